from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    coordinator = current_app.extensions["duodraw"]
    payload = coordinator.status()
    payload["message"] = "Pictionary server is running"
    return jsonify(payload)
