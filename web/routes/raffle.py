"""Raffle tab: animated single-winner draw and winner history."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, render_template, request

from core.exceptions import NoEligibleParticipantsError, SpinInProgressError
from utils.validators import parse_bool
from web.config_middleware import RAFFLE_REFUSALS, RAFFLE_SPINS
from web.routes.common import get_app_state


raffle_bp = Blueprint("raffle", __name__, url_prefix="/raffle")


@raffle_bp.route("/")
def index():
    state = get_app_state()
    return render_template(
        "raffle.html",
        snapshot=state.raffle_snapshot(),
        settings=state.raffle_settings,
        tick_ms=current_app.config["APP_CONFIG"].spin_tick_ms,
    )


@raffle_bp.route("/state")
def spin_state():
    return jsonify(get_app_state().raffle_snapshot())


@raffle_bp.route("/spin", methods=["POST"])
def spin():
    payload = request.get_json(silent=True) or request.form
    prize_name = payload.get("prize_name")
    allow_duplicates = parse_bool(payload.get("allow_duplicates"))

    state = get_app_state()
    try:
        state.start_spin(prize_name=prize_name, allow_duplicates=allow_duplicates)
    except NoEligibleParticipantsError as e:
        RAFFLE_REFUSALS.labels(reason="no_eligible").inc()
        return jsonify({"ok": False, "message": str(e), "state": state.raffle_snapshot()}), 409
    except SpinInProgressError as e:
        RAFFLE_REFUSALS.labels(reason="in_progress").inc()
        return jsonify({"ok": False, "message": str(e), "state": state.raffle_snapshot()}), 409

    RAFFLE_SPINS.inc()
    return jsonify({"ok": True, "state": state.raffle_snapshot()})
