"""Grouping tab: random partitions, generated names and CSV download."""

from __future__ import annotations

from urllib.parse import quote

from flask import Blueprint, Response, current_app, flash, redirect, render_template, request, url_for

from core import ExportDefaults
from core.exceptions import EmptyExportError, GenerationInProgressError, InvalidGroupCountError
from services.export import build_groups_csv, export_filename
from services.theme_generator import ThemeFailure
from utils.validators import clamp_group_count, parse_bool, parse_group_count
from web.config_middleware import EXPORTS, GROUPINGS_GENERATED, THEME_FAILURES
from web.routes.common import get_app_state


grouping_bp = Blueprint("grouping", __name__, url_prefix="/grouping")


@grouping_bp.route("/")
def index():
    state = get_app_state()
    with state.lock:
        groups = list(state.groups)
        pool_size = len(state.participants)
        settings = state.grouping_settings
    return render_template(
        "grouping.html",
        groups=groups,
        group_count=clamp_group_count(settings.group_count, pool_size),
        use_ai_themes=settings.use_ai_themes,
        generating=state.grouping.generating,
        max_groups=pool_size,
    )


@grouping_bp.route("/generate", methods=["POST"])
def generate():
    state = get_app_state()
    use_ai_themes = parse_bool(request.form.get("use_ai_themes"))
    try:
        group_count = parse_group_count(request.form.get("group_count"), len(state.participants))
        outcome = state.generate_groups(group_count, use_ai_themes=use_ai_themes)
    except (InvalidGroupCountError, GenerationInProgressError) as e:
        flash(str(e), "error")
        return redirect(url_for("grouping.index"))

    GROUPINGS_GENERATED.labels(themed=str(use_ai_themes).lower()).inc()
    if isinstance(outcome.theme_result, ThemeFailure):
        THEME_FAILURES.inc()
    if not outcome.groups:
        flash("名單已變更，請重新分組", "warning")
    else:
        flash(f"已分成 {len(outcome.groups)} 組", "success")
    return redirect(url_for("grouping.index"))


@grouping_bp.route("/export")
def export():
    state = get_app_state()
    with state.lock:
        groups = list(state.groups)
    try:
        content = build_groups_csv(groups)
    except EmptyExportError as e:
        flash(str(e), "warning")
        return redirect(url_for("grouping.index"))

    EXPORTS.inc()
    filename = export_filename()
    current_app.logger.info(f"Serving grouping export {filename}")
    return Response(content, content_type=ExportDefaults.MIMETYPE, headers={
        "Content-Disposition": f"attachment; filename=groups.csv; filename*=UTF-8''{quote(filename)}"
    })
