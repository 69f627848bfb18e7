"""Flask application configuration and middleware setup."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from flask import Flask, g, request
from flask_wtf.csrf import CSRFProtect
from prometheus_client import Counter, Histogram

from config import DEFAULT_SECRET_KEY

if TYPE_CHECKING:
    from config import Config

# Global instances
csrf = CSRFProtect()

SLOW_REQUEST_SECONDS = 1.0

# Prometheus metrics
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total number of 5xx responses",
    ["method", "path"],
)
RAFFLE_SPINS = Counter(
    "raffle_spins_total",
    "Raffle spins started",
)
RAFFLE_REFUSALS = Counter(
    "raffle_refusals_total",
    "Raffle spins refused",
    ["reason"],
)
GROUPINGS_GENERATED = Counter(
    "groupings_generated_total",
    "Group partitions generated",
    ["themed"],
)
THEME_FAILURES = Counter(
    "group_theme_failures_total",
    "Group theme generations that fell back to default names",
)
EXPORTS = Counter(
    "group_exports_total",
    "Grouping CSV downloads",
)


def configure_app(app: Flask, config: Config, testing: bool = False) -> None:
    """Configure Flask application settings.

    Args:
        app: Flask application instance
        config: Application configuration
        testing: Whether running in testing mode
    """
    app.config.update(
        SECRET_KEY=config.secret_key,
        MAX_CONTENT_LENGTH=config.max_file_size,
        SEND_FILE_MAX_AGE_DEFAULT=3600,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SECURE=(config.environment != 'development'),
        SESSION_COOKIE_SAMESITE='Lax',
        TESTING=testing,
        WTF_CSRF_ENABLED=not testing,
        WTF_CSRF_TIME_LIMIT=None,
        APP_CONFIG=config,
    )

    # Warn if insecure defaults detected
    if config.environment == 'production':
        if config.secret_key == DEFAULT_SECRET_KEY:
            app.logger.warning("SECRET_KEY is left at its default value in production")
        if not config.ai_enabled:
            app.logger.warning("GEMINI_API_KEY is not set, AI group naming will fall back to default names")


def setup_extensions(app: Flask, testing: bool = False) -> None:
    """Setup Flask extensions.

    Args:
        app: Flask application instance
        testing: Whether running in testing mode
    """
    # Initialize CSRF protection (disabled in testing)
    if not testing:
        csrf.init_app(app)

    from web.csrf_helpers import init_csrf_helpers
    init_csrf_helpers(app)


def setup_security_headers(app: Flask) -> None:
    """Setup security headers middleware.

    Args:
        app: Flask application instance
    """
    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        csp = (
            "default-src 'self'; "
            "img-src 'self' data:; "
            "font-src 'self' https://cdnjs.cloudflare.com data:; "
            "style-src 'self' 'unsafe-inline' https://cdnjs.cloudflare.com; "
            "script-src 'self'"
        )
        if not response.headers.get('Content-Security-Policy'):
            response.headers['Content-Security-Policy'] = csp

        # Additional hardening headers
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'DENY')
        response.headers.setdefault('Referrer-Policy', 'same-origin')
        response.headers.setdefault('Permissions-Policy', "camera=(), microphone=(), geolocation=()")
        return response


def setup_metrics(app: Flask) -> None:
    """Setup Prometheus metrics and slow request logging.

    Args:
        app: Flask application instance
    """
    @app.before_request
    def before_metrics():
        """Store request start time."""
        g._metrics_start = time.time()

    @app.after_request
    def after_metrics(response):
        """Record request metrics."""
        start = getattr(g, '_metrics_start', None)
        path = getattr(request.url_rule, 'rule', request.path)
        if start is not None:
            duration = time.time() - start
            REQUEST_LATENCY.labels(method=request.method, path=path).observe(duration)
            if duration > SLOW_REQUEST_SECONDS:
                app.logger.warning(f"Slow request: {request.method} {request.path} took {duration:.2f}s")
            response.headers['X-Response-Time'] = f"{duration:.3f}s"

        # Record 5xx errors
        if response.status_code >= 500:
            REQUEST_ERRORS.labels(method=request.method, path=path).inc()
        return response
