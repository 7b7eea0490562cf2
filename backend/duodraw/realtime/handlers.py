from __future__ import annotations

import logging
import threading

from flask import current_app, request
from flask_socketio import SocketIO, emit, join_room

from ..game.models import DrawingEvent
from ..game.service import JoinError, RoomFullError, SessionCoordinator
from . import events


logger = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def register_socketio_handlers(socketio: SocketIO, coordinator: SessionCoordinator) -> None:
    clock_lock = threading.Lock()
    clock_task = {"running": False}

    def _clock_enabled() -> bool:
        cfg = current_app.config
        return not cfg.get("TESTING") or cfg.get("ENABLE_CLOCK_IN_TESTS", False)

    def _ensure_clock_task() -> None:
        if not _clock_enabled():
            return
        poll = float(current_app.config.get("CLOCK_POLL_SEC", 0.25))

        with clock_lock:
            if clock_task["running"] or not coordinator.timers_running():
                return
            clock_task["running"] = True

        def _runner() -> None:
            logger.debug("Clock task started")
            while True:
                with clock_lock:
                    if not coordinator.timers_running():
                        clock_task["running"] = False
                        break
                try:
                    coordinator.tick()
                except Exception:
                    logger.exception("Timer tick failed")
                socketio.sleep(poll)
            logger.debug("Clock task stopped")

        socketio.start_background_task(_runner)

    def _room_matches(payload: dict) -> bool:
        room_id = str(payload.get("roomId", "") or "").strip()
        return not room_id or room_id == coordinator.room.id

    @socketio.on("connect")
    def on_connect():
        logger.info("User connected: %s", request.sid)

    @socketio.on(events.JOIN)
    def on_join(data=None):
        payload = data if isinstance(data, dict) else {}
        name = str(payload.get("name", "")).strip()

        if not _validate_name(name):
            emit(events.ERROR, {"error": "invalid_payload"})
            return
        if not _room_matches(payload):
            emit(events.ERROR, {"error": "room_not_found"})
            return

        try:
            coordinator.join(request.sid, name)
        except RoomFullError:
            logger.info("Join rejected for %s: room is full", request.sid)
            emit(events.ROOM_FULL, {"roomId": coordinator.room.id})
            return
        except JoinError as exc:
            emit(events.ERROR, {"error": exc.code})
            return

        join_room(coordinator.room.id)
        _ensure_clock_task()

    @socketio.on(events.DRAWING_EVENT)
    def on_drawing_event(data=None):
        try:
            event = DrawingEvent.from_payload(data, default_room_id=coordinator.room.id)
        except ValueError as exc:
            logger.debug("Malformed drawing event from %s: %s", request.sid, exc)
            return
        coordinator.submit_drawing_event(request.sid, event)

    @socketio.on(events.SEND_GUESS)
    def on_send_guess(data=None):
        payload = data if isinstance(data, dict) else {}
        text = payload.get("text", payload.get("guess", ""))
        if not isinstance(text, str):
            return
        coordinator.submit_guess(request.sid, text)

    @socketio.on(events.CLEAR_CANVAS)
    def on_clear_canvas(data=None):
        coordinator.clear_canvas(request.sid)

    @socketio.on(events.SEND_MESSAGE)
    def on_send_message(data=None):
        payload = data if isinstance(data, dict) else {}
        text = payload.get("text", "")
        if not isinstance(text, str):
            return
        coordinator.send_chat(request.sid, text)

    @socketio.on("disconnect")
    def on_disconnect(*args):
        coordinator.disconnect(request.sid)
        logger.info("User disconnected: %s", request.sid)

    @socketio.on_error_default
    def on_error(exc):
        logger.exception("Socket.IO handler failed for %s", getattr(request, "sid", "?"))
        emit(events.ERROR, {"error": "internal_error"})
