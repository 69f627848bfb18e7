"""Health check blueprint."""

from __future__ import annotations

from flask import Blueprint, jsonify

from web.routes.common import get_app_state


health_bp = Blueprint("health", __name__)


@health_bp.route("/health")
def health_check():
    state = get_app_state()
    with state.lock:
        data = {
            "status": "ok",
            "participants": len(state.participants),
            "winners": len(state.winners),
            "groups": len(state.groups),
            "raffle_state": state.raffle.state.value,
            "generating_groups": state.grouping.generating,
        }
    return jsonify(data)
