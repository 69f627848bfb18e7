"""Helpers shared by the blueprints."""

from __future__ import annotations

from flask import current_app

from services.app_state import AppState


def get_app_state() -> AppState:
    """The application state created by the factory."""
    return current_app.config["APP_STATE"]
