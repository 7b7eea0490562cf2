from __future__ import annotations

import logging
import re
import time
from threading import RLock
from typing import Any, Callable, Protocol

from .messages import Message
from .models import DrawingEvent, Participant, Room
from .relay import DrawingRelay
from .timers import Countdown
from .words import WordSource


logger = logging.getLogger(__name__)

MAX_PARTICIPANTS = 2
ROUNDS_PER_PAIRING = 1


class Broadcaster(Protocol):
    def send(self, sid: str, event: str, payload: Any) -> None: ...


class JoinError(Exception):
    code = "join_failed"


class RoomFullError(JoinError):
    code = "room_full"


class AlreadyJoinedError(JoinError):
    code = "already_joined"


def _normalize_text(text: str) -> str:
    t = text.strip().lower()
    t = re.sub(r"\s+", "", t)
    t = re.sub(r"[^0-9a-z]", "", t)
    return t


def _contains_answer(text: str, answer: str) -> bool:
    a = _normalize_text(answer)
    if not a:
        return False
    return a in _normalize_text(text)


def is_correct_guess(guess: str, secret_word: str) -> bool:
    if not secret_word:
        return False
    return guess.strip().lower() == secret_word.strip().lower()


class SessionCoordinator:
    """Authoritative state machine for one two-player room.

    Every public method takes the coordinator lock, so inbound socket events
    and clock ticks are applied one at a time in arrival order.
    """

    def __init__(
        self,
        room: Room,
        broadcaster: Broadcaster,
        words: WordSource | None = None,
        clock: Callable[[], float] = time.monotonic,
        round_duration_sec: int = 60,
        guess_duration_sec: int = 10,
        points_per_guess: int = 10,
    ) -> None:
        self._lock = RLock()
        self._room = room
        self._broadcaster = broadcaster
        self._words = words or WordSource()
        self._clock = clock
        self.points_per_guess = points_per_guess

        self.round_timer = Countdown(
            "round",
            round_duration_sec,
            on_tick=self._on_round_tick,
            on_expire=self._on_round_expired,
            clock=clock,
        )
        self.guess_timer = Countdown(
            "guess",
            guess_duration_sec,
            on_tick=self._on_guess_tick,
            on_expire=self._on_guess_expired,
            auto_restart=True,
            clock=clock,
        )
        self.relay = DrawingRelay(self)
        self._room.messages.subscribe(self._on_message)

    @property
    def room(self) -> Room:
        return self._room

    # ---- authorization ----

    def is_drawer(self, sid: str | None) -> bool:
        return bool(sid) and sid == self._room.drawer_id and sid in self._room.participants

    def is_guesser(self, sid: str | None) -> bool:
        return bool(sid) and sid == self._room.guesser_id and sid in self._room.participants

    # ---- outbound ----

    def send(self, sid: str, event: str, payload: Any) -> None:
        self._broadcaster.send(sid, event, payload)

    def broadcast(self, event: str, payload: Any, exclude: str | None = None) -> None:
        for pid in list(self._room.participants.keys()):
            if pid == exclude:
                continue
            self.send(pid, event, payload)

    def _broadcast_room_state(self) -> None:
        for pid in list(self._room.participants.keys()):
            self.send(pid, "room-updated", self.room_public_state(viewer_socket_id=pid))

    def _send_game_state(self, sid: str) -> None:
        self.send(sid, "game-state", self.game_state(viewer_socket_id=sid))

    def _on_message(self, msg: Message) -> None:
        event = "system-message" if msg.kind == "system" else "chat-message"
        self.broadcast(event, msg.to_dict())

    # ---- read models ----

    def _visible_word(self, viewer_socket_id: str | None) -> str | None:
        room = self._room
        if not room.secret_word:
            return None
        if room.state == "round_end":
            return room.secret_word
        if viewer_socket_id and viewer_socket_id == room.drawer_id:
            return room.secret_word
        return None

    def room_public_state(self, viewer_socket_id: str | None = None) -> dict:
        with self._lock:
            room = self._room
            payload = {
                "id": room.id,
                "state": room.state,
                "round": room.round,
                "maxRounds": ROUNDS_PER_PAIRING,
                "drawerId": room.drawer_id,
                "guesserId": room.guesser_id,
                "players": [p.to_dict() for p in room.participants.values()],
                "timeLeft": self.round_timer.remaining,
                "guessTimeLeft": self.guess_timer.remaining,
                "createdAtMs": room.created_at_ms,
            }
            word = self._visible_word(viewer_socket_id)
            if word:
                payload["currentWord"] = word
            return payload

    def game_state(self, viewer_socket_id: str | None = None) -> dict:
        with self._lock:
            room = self._room
            payload = {
                "state": room.state,
                "drawerId": room.drawer_id,
                "guesserId": room.guesser_id,
                "messages": room.messages.to_list(),
                "timeLeft": self.round_timer.remaining,
                "guessTimeLeft": self.guess_timer.remaining,
                "round": room.round,
                "maxRounds": ROUNDS_PER_PAIRING,
            }
            word = self._visible_word(viewer_socket_id)
            if word:
                payload["currentWord"] = word
            return payload

    def status(self) -> dict:
        with self._lock:
            return {
                "status": "OK",
                "roomId": self._room.id,
                "players": len(self._room.participants),
                "gameState": self._room.state,
            }

    def timers_running(self) -> bool:
        with self._lock:
            return self.round_timer.running or self.guess_timer.running

    # ---- membership ----

    def join(self, sid: str, name: str) -> Participant:
        with self._lock:
            room = self._room
            if sid in room.participants:
                raise AlreadyJoinedError(sid)
            if len(room.participants) >= MAX_PARTICIPANTS:
                raise RoomFullError(room.id)

            if room.drawer_id is None:
                player = Participant(id=sid, name=name, role="drawer")
                room.participants[sid] = player
                room.drawer_id = sid
                room.secret_word = self._words.draw()
                room.messages.system(f"{name} joined as the drawer.")
            else:
                player = Participant(id=sid, name=name, role="guesser")
                room.participants[sid] = player
                room.guesser_id = sid
                room.messages.system(f"{name} joined as the guesser.")

            started = room.drawer_id is not None and room.guesser_id is not None
            if started:
                self._start_round_locked()

            self.broadcast("participant-joined", player.to_dict())
            self._broadcast_room_state()
            if started:
                for pid in list(room.participants.keys()):
                    self._send_game_state(pid)
            else:
                self._send_game_state(sid)

            logger.info(
                "Player %s (%s) joined room %s as %s. Total players: %d",
                name, sid, room.id, player.role, len(room.participants),
            )
            return player

    def _start_round_locked(self) -> None:
        room = self._room
        if not room.secret_word:
            room.secret_word = self._words.draw()
        room.state = "playing"
        room.round += 1
        room.messages.system("Game started!")
        self.round_timer.start()
        self.guess_timer.start()
        logger.info("Round %d started in room %s", room.round, room.id)

    def disconnect(self, sid: str) -> bool:
        with self._lock:
            room = self._room
            player = room.participants.pop(sid, None)
            if player is None:
                return False
            player.connected = False

            was_revealed = room.state == "round_end"
            room.messages.system(f"{player.name} left the game")

            if sid == room.drawer_id:
                room.drawer_id = None
                room.secret_word = ""
            if sid == room.guesser_id:
                room.guesser_id = None
                if was_revealed and room.drawer_id:
                    room.secret_word = self._words.draw()

            self.round_timer.reset()
            self.guess_timer.reset()
            room.state = "waiting"

            self.broadcast("participant-left", {"id": sid})
            self._broadcast_room_state()
            for pid in list(room.participants.keys()):
                self._send_game_state(pid)

            logger.info("Player %s (%s) left room %s", player.name, sid, room.id)
            return True

    def reset_all(self) -> None:
        with self._lock:
            room = self._room
            self.round_timer.reset()
            self.guess_timer.reset()
            self.broadcast("game-reset", {"roomId": room.id})
            room.reset()
            room.messages.subscribe(self._on_message)
            logger.info("Room %s reset", room.id)

    # ---- gameplay ----

    def submit_guess(self, sid: str, text: str) -> bool | None:
        """Returns whether the guess was correct, or None if it was ignored."""
        with self._lock:
            room = self._room
            if room.state != "playing" or not self.is_guesser(sid):
                logger.debug("Guess rejected: %s is not the active guesser", sid)
                return None

            guess = (text or "").strip()
            player = room.participants[sid]
            correct = is_correct_guess(guess, room.secret_word)

            room.messages.append(sid, player.name, text, "guess")
            self.broadcast("guess-evaluated", {"guesserId": sid, "text": text, "isCorrect": correct})

            if correct:
                player.score += self.points_per_guess
                self.broadcast(
                    "correct-guess",
                    {"guesserId": sid, "word": room.secret_word, "pointsAwarded": self.points_per_guess},
                )
                self._end_round_locked(f"{player.name} guessed correctly!")
            else:
                room.messages.system(f'{player.name} guessed: "{guess}" (incorrect)')
                self.guess_timer.start()

            return correct

    def _end_round_locked(self, reason: str) -> None:
        room = self._room
        self.round_timer.stop()
        self.guess_timer.stop()
        room.state = "round_end"
        room.messages.system(reason)
        self.broadcast("round-ended", {"correctWord": room.secret_word, "nextDrawer": None})
        self._broadcast_room_state()
        logger.info("Round %d ended in room %s: %s", room.round, room.id, reason)

    def submit_drawing_event(self, sid: str, event: DrawingEvent) -> bool:
        with self._lock:
            return self.relay.relay(sid, event)

    def clear_canvas(self, sid: str) -> bool:
        with self._lock:
            return self.relay.clear(sid)

    def send_chat(self, sid: str, text: str) -> Message | None:
        with self._lock:
            room = self._room
            player = room.participants.get(sid)
            if player is None:
                return None

            body = (text or "").strip()
            if not body:
                return None

            if (
                self.is_drawer(sid)
                and room.state != "round_end"
                and _contains_answer(body, room.secret_word)
            ):
                self.send(sid, "system-message", {"text": "The drawer can't reveal the answer in chat."})
                return None

            return room.messages.append(sid, player.name, body, "chat")

    # ---- clock ----

    def tick(self, now: float | None = None) -> None:
        with self._lock:
            if now is None:
                now = self._clock()
            timers = (self.round_timer, self.guess_timer)
            # Interleave both timers second by second, in time order.
            while True:
                due = [t.next_tick_at for t in timers if t.running and t.next_tick_at is not None]
                due = [at for at in due if at <= now]
                if not due:
                    break
                at = min(due)
                for timer in timers:
                    timer.tick(at)

    def _on_round_tick(self, remaining: int) -> None:
        self.broadcast("timer-update", {"timeLeft": remaining})

    def _on_guess_tick(self, remaining: int) -> None:
        self.broadcast("guesser-timer-update", {"guessTimeLeft": remaining})

    def _on_round_expired(self) -> None:
        if self._room.state != "playing":
            return
        self._end_round_locked("Time's up! The word was not guessed.")

    def _on_guess_expired(self) -> None:
        if self._room.state != "playing":
            return
        self._room.messages.system("Time's up for this guess! Make another guess.")
