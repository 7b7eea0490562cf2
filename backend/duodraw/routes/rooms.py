from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<room_id>")
def get_room(room_id: str):
    coordinator = current_app.extensions["duodraw"]
    if room_id != coordinator.room.id:
        return jsonify({"error": "room_not_found"}), 404
    # No viewer: the secret word only shows up once the round has ended.
    return jsonify(coordinator.room_public_state())
