"""List input tab: manual entry, file import and duplicate handling."""

from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from core.exceptions import FileValidationError
from utils.file_validators import read_list_upload
from web.routes.common import get_app_state


participants_bp = Blueprint("participants", __name__, url_prefix="/participants")


@participants_bp.route("/")
def index():
    state = get_app_state()
    with state.lock:
        participants = list(state.participants)
        draft_text = state.draft_text
    duplicates = state.duplicates
    return render_template(
        "participants.html",
        participants=participants,
        draft_text=draft_text,
        duplicates=duplicates,
        has_duplicates=bool(duplicates),
    )


@participants_bp.route("/save", methods=["POST"])
def save():
    state = get_app_state()
    participants = state.save_text(request.form.get("names", ""))
    flash(f"已儲存！共 {len(participants)} 人", "success")
    return redirect(url_for("participants.index"))


@participants_bp.route("/upload", methods=["POST"])
def upload():
    state = get_app_state()
    max_size = current_app.config["APP_CONFIG"].max_file_size
    try:
        data = read_list_upload(request.files.get("file"), max_size=max_size)
        names = state.load_upload(data)
    except FileValidationError as e:
        flash(str(e), "error")
        return redirect(url_for("participants.index"))

    if names:
        flash(f"已讀取 {len(names)} 個姓名，確認後請按「儲存名單」", "success")
    else:
        flash("檔案中找不到任何姓名", "warning")
    return redirect(url_for("participants.index"))


@participants_bp.route("/sample", methods=["POST"])
def sample():
    get_app_state().load_sample()
    return redirect(url_for("participants.index"))


@participants_bp.route("/dedupe", methods=["POST"])
def dedupe():
    removed = get_app_state().remove_duplicates()
    if removed:
        flash(f"已移除 {removed} 筆重複姓名", "success")
    else:
        flash("名單中沒有重複姓名", "info")
    return redirect(url_for("participants.index"))
