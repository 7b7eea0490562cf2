from backend.duodraw.game.timers import Countdown


def make(clock, duration=3, auto_restart=False, on_expire=None):
    ticks = []
    expiries = []

    def _expire():
        expiries.append(clock.now)
        if on_expire:
            on_expire()

    timer = Countdown("t", duration, on_tick=ticks.append, on_expire=_expire, auto_restart=auto_restart, clock=clock)
    return timer, ticks, expiries


def test_start_sets_full_duration_and_running(clock):
    timer, _ticks, _exp = make(clock, duration=5)
    assert timer.remaining == 5
    assert not timer.running
    timer.start()
    assert timer.running
    assert timer.remaining == 5


def test_ticks_once_per_elapsed_second(clock):
    timer, ticks, _exp = make(clock, duration=5)
    timer.start()

    clock.advance(0.5)
    assert timer.tick() == 0
    clock.advance(0.5)
    assert timer.tick() == 1
    clock.advance(2.2)
    assert timer.tick() == 2

    assert ticks == [4, 3, 2]
    assert timer.remaining == 2


def test_expiry_stops_without_auto_restart(clock):
    timer, ticks, expiries = make(clock, duration=2)
    timer.start()
    clock.advance(5)
    timer.tick()

    assert ticks == [1, 0]
    assert len(expiries) == 1
    assert not timer.running
    assert timer.remaining == 0


def test_auto_restart_renews_after_expiry(clock):
    timer, ticks, expiries = make(clock, duration=2, auto_restart=True)
    timer.start()
    clock.advance(2)
    timer.tick()

    assert ticks == [1, 0]
    assert len(expiries) == 1
    assert timer.running
    assert timer.remaining == 2

    clock.advance(1)
    timer.tick()
    assert ticks[-1] == 1


def test_expire_callback_that_stops_prevents_restart(clock):
    holder = {}
    timer, _ticks, _exp = make(clock, duration=1, auto_restart=True, on_expire=lambda: holder["t"].stop())
    holder["t"] = timer
    timer.start()
    clock.advance(1)
    timer.tick()
    assert not timer.running


def test_stop_is_idempotent_and_cancels_pending_ticks(clock):
    timer, ticks, _exp = make(clock, duration=5)
    timer.start()
    timer.stop()
    timer.stop()
    assert not timer.running

    clock.advance(10)
    assert timer.tick() == 0
    assert ticks == []
    assert timer.remaining == 5


def test_reset_restores_duration(clock):
    timer, _ticks, _exp = make(clock, duration=5)
    timer.start()
    clock.advance(3)
    timer.tick()
    assert timer.remaining == 2

    timer.reset()
    assert not timer.running
    assert timer.remaining == 5


def test_restart_while_running_resets_clock(clock):
    timer, ticks, _exp = make(clock, duration=5)
    timer.start()
    clock.advance(0.5)
    timer.tick()
    timer.start()
    clock.advance(0.75)
    assert timer.tick() == 0
    clock.advance(0.25)
    assert timer.tick() == 1
    assert ticks == [4]


def test_next_tick_at_tracks_the_armed_schedule(clock):
    timer, _ticks, _exp = make(clock, duration=2, auto_restart=True)
    assert timer.next_tick_at is None

    timer.start()
    assert timer.next_tick_at == clock.now + 1

    clock.advance(2)
    timer.tick()
    assert timer.next_tick_at == clock.now + 1

    timer.stop()
    assert timer.next_tick_at is None
