"""Flask application factory for the HR raffle and grouping suite."""

from __future__ import annotations

from typing import Optional

from flask import Flask, redirect, render_template, request, url_for
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from config import Config, load_config
from core import AppTab
from services.app_state import AppState, build_app_state
from web.config_middleware import (
    configure_app,
    setup_extensions,
    setup_security_headers,
    setup_metrics,
)
from web.routes import register_routes


def create_app(
    config: Optional[Config] = None,
    testing: bool = False,
    state: Optional[AppState] = None,
) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Application configuration, loaded from the environment if omitted
        testing: Whether running in testing mode
        state: Pre-built application state (tests inject fakes this way)

    Returns:
        Configured Flask application
    """
    config = config or load_config()
    app = Flask(__name__)

    # Configure application
    configure_app(app, config, testing)

    # Setup extensions
    setup_extensions(app, testing)

    # Setup middleware
    setup_security_headers(app)
    setup_metrics(app)

    # Shared in-memory state for all screens
    app.config["APP_STATE"] = state or build_app_state(config)

    # Register routes
    register_routes(app)

    # Setup additional handlers
    _setup_routes(app)
    _setup_context_processors(app)
    _setup_error_handlers(app)

    return app


def _setup_routes(app: Flask) -> None:
    """Setup basic application routes.

    Args:
        app: Flask application instance
    """
    @app.route('/')
    def root():
        """Root route opens the list input tab."""
        return redirect(url_for('participants.index'))

    @app.route('/metrics')
    def metrics():
        """Expose Prometheus metrics."""
        data = generate_latest()
        return data, 200, {'Content-Type': CONTENT_TYPE_LATEST}


def _setup_context_processors(app: Flask) -> None:
    """Setup Jinja context processors.

    Args:
        app: Flask application instance
    """
    @app.context_processor
    def inject_shell():
        """Navigation tabs and the participant count for every page."""
        state: AppState = app.config["APP_STATE"]
        return {
            "tabs": list(AppTab),
            "active_tab": AppTab.from_blueprint(request.blueprint),
            "participant_count": len(state.participants),
        }


def _setup_error_handlers(app: Flask) -> None:
    """Setup error handlers.

    Args:
        app: Flask application instance
    """
    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return render_template('404.html'), 404

    @app.errorhandler(413)
    def too_large(error):
        """Handle uploads above MAX_CONTENT_LENGTH."""
        return render_template('error.html', message="檔案太大，無法上傳"), 413

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f"Internal server error: {error}")
        return render_template('500.html'), 500
