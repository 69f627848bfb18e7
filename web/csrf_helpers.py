"""CSRF helpers for templates and the JSON spin call."""

from flask import current_app
from flask_wtf.csrf import generate_csrf


def csrf_token():
    """CSRF token for forms, or an empty string when protection is off."""
    if not current_app.config.get('WTF_CSRF_ENABLED', True):
        return ""
    if 'csrf' not in current_app.extensions:
        return ""
    return generate_csrf()


def init_csrf_helpers(app):
    """Expose ``csrf_token()`` to Jinja templates."""
    app.jinja_env.globals['csrf_token'] = csrf_token
