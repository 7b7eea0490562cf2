from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

bp = Blueprint("admin", __name__)

logger = logging.getLogger(__name__)


def _authorized() -> bool:
    token = current_app.config.get("ADMIN_TOKEN", "")
    if not token:
        return False
    return request.headers.get("X-Admin-Token", "") == token


@bp.post("/admin/reset")
def admin_reset():
    if not _authorized():
        return jsonify({"error": "unauthorized"}), 401

    coordinator = current_app.extensions["duodraw"]
    coordinator.reset_all()
    logger.warning("Game state reset from %s", request.remote_addr)
    return jsonify({"ok": True, "room": coordinator.room_public_state()})
