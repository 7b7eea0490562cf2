from __future__ import annotations

import time
from typing import Callable


class Countdown:
    """A whole-second countdown advanced by an external scheduler.

    The host calls ``tick()`` as often as it likes; every whole second elapsed
    since the timer was armed is processed in order, firing ``on_tick`` with
    the new remaining value and ``on_expire`` when it reaches zero.

    Each start/stop/reset bumps a generation counter. Work queued under an
    older generation is dropped, so a tick that lands after the timer was
    stopped (or restarted from a callback) does nothing.
    """

    def __init__(
        self,
        name: str,
        duration_sec: int,
        on_tick: Callable[[int], None] | None = None,
        on_expire: Callable[[], None] | None = None,
        auto_restart: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if duration_sec <= 0:
            raise ValueError("duration_sec must be positive")
        self.name = name
        self.duration_sec = duration_sec
        self.remaining = duration_sec
        self.running = False
        self.auto_restart = auto_restart
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._clock = clock
        self._next_tick_at: float | None = None
        self._generation = 0

    def _arm(self, started_at: float) -> None:
        self._generation += 1
        self.remaining = self.duration_sec
        self.running = True
        self._next_tick_at = started_at + 1

    def start(self) -> None:
        """(Re)start at the full duration."""
        self._arm(self._clock())

    def stop(self) -> None:
        self._generation += 1
        if not self.running:
            return
        self.running = False
        self._next_tick_at = None

    @property
    def next_tick_at(self) -> float | None:
        return self._next_tick_at

    def reset(self) -> None:
        self.stop()
        self.remaining = self.duration_sec

    def tick(self, now: float | None = None) -> int:
        """Process elapsed seconds. Returns how many ticks fired."""
        if not self.running:
            return 0
        if now is None:
            now = self._clock()

        fired = 0
        while self.running and self._next_tick_at is not None and now >= self._next_tick_at:
            generation = self._generation
            tick_at = self._next_tick_at
            self.remaining = max(0, self.remaining - 1)
            self._next_tick_at = tick_at + 1
            fired += 1

            if self._on_tick:
                self._on_tick(self.remaining)
            if generation != self._generation:
                break

            if self.remaining > 0:
                continue

            self.running = False
            self._next_tick_at = None
            self._generation += 1
            generation = self._generation
            if self._on_expire:
                self._on_expire()
            if self.auto_restart and generation == self._generation:
                self._arm(tick_at)

        return fired
