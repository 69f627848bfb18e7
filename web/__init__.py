"""Web layer: application factory, blueprints and templates."""

from web.app import create_app

__all__ = ["create_app"]
