"""Route registration for the Flask app."""

from __future__ import annotations

from flask import Flask

from .participants import participants_bp
from .raffle import raffle_bp
from .grouping import grouping_bp
from .health import health_bp


def register_routes(app: Flask) -> None:
    app.register_blueprint(participants_bp)
    app.register_blueprint(raffle_bp)
    app.register_blueprint(grouping_bp)
    app.register_blueprint(health_bp)
