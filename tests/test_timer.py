import pytest

from time_dilation.focus.timer import (
    CompletionEvent,
    DurationTable,
    PomodoroTimer,
    TimerMode,
    TimerState,
    apply_pause,
    apply_select_mode,
    apply_start,
    apply_tick,
)

SMALL = DurationTable(focus=5, short_break=3, long_break=4)


def run_to_zero(timer: PomodoroTimer) -> list[CompletionEvent]:
    events = []
    for _ in range(timer.durations[timer.mode]):
        event = timer.tick()
        if event is not None:
            events.append(event)
    return events


# ---- DurationTable ----

def test_default_durations() -> None:
    table = DurationTable()
    assert table[TimerMode.FOCUS] == 1500
    assert table["short-break"] == 300
    assert table[TimerMode.LONG_BREAK] == 900


def test_duration_table_rejects_non_positive() -> None:
    with pytest.raises(ValueError):
        DurationTable(focus=0)
    with pytest.raises(ValueError):
        DurationTable(long_break=-60)


def test_duration_table_replace_leaves_original() -> None:
    updated = SMALL.replace(TimerMode.SHORT_BREAK, 120)
    assert updated.short_break == 120
    assert SMALL.short_break == 3


def test_from_minutes() -> None:
    assert DurationTable.from_minutes(50, 10, 20).to_dict() == {
        "focus": 3000,
        "short-break": 600,
        "long-break": 1200,
    }


# ---- countdown ----

@pytest.mark.parametrize("mode", list(TimerMode))
def test_countdown_reaches_zero_on_exactly_the_last_tick(mode: TimerMode) -> None:
    timer = PomodoroTimer(SMALL, mode=mode)
    timer.start()
    duration = SMALL[mode]

    for i in range(1, duration):
        assert timer.tick() is None
        assert timer.state.remaining_seconds == duration - i
        assert timer.state.is_running

    event = timer.tick()
    assert event == CompletionEvent(mode=mode, duration_seconds=duration)
    assert timer.state == TimerState(mode=mode, remaining_seconds=0, is_running=False, is_complete=True)


def test_tick_is_noop_when_not_running() -> None:
    timer = PomodoroTimer(SMALL)
    assert timer.tick() is None
    assert timer.state.remaining_seconds == 5

    timer.start()
    timer.tick()
    timer.pause()
    assert timer.tick() is None
    assert timer.state.remaining_seconds == 4


def test_completion_fires_once_even_with_extra_ticks() -> None:
    timer = PomodoroTimer(SMALL)
    fired = []
    timer.on_complete = fired.append
    timer.start()

    events = run_to_zero(timer)
    for _ in range(10):
        timer.tick()

    assert len(events) == 1
    assert fired == events
    assert timer.state.remaining_seconds == 0


def test_on_complete_errors_do_not_break_the_timer() -> None:
    timer = PomodoroTimer(DurationTable(focus=1))

    def boom(event: CompletionEvent) -> None:
        raise RuntimeError("render failed")

    timer.on_complete = boom
    timer.start()
    event = timer.tick()

    assert event is not None
    assert timer.state.is_complete


# ---- start / pause / reset / select_mode ----

def test_start_twice_is_same_as_once() -> None:
    once = apply_start(TimerState(remaining_seconds=5))
    assert apply_start(once) is once
    assert once.is_running


def test_pause_when_not_running_is_noop() -> None:
    state = TimerState(remaining_seconds=5)
    assert apply_pause(state) is state


def test_start_is_ignored_while_complete() -> None:
    timer = PomodoroTimer(SMALL)
    timer.start()
    run_to_zero(timer)

    timer.start()

    assert not timer.state.is_running
    assert timer.state.is_complete


def test_reset_rewinds_without_changing_mode() -> None:
    timer = PomodoroTimer(SMALL, mode=TimerMode.LONG_BREAK)
    timer.start()
    timer.tick()
    timer.tick()

    timer.reset()

    assert timer.state == TimerState(mode=TimerMode.LONG_BREAK, remaining_seconds=4)


def test_reset_after_completion_allows_restart() -> None:
    timer = PomodoroTimer(SMALL)
    timer.start()
    run_to_zero(timer)

    timer.reset()
    timer.start()

    assert timer.state.is_running
    assert timer.state.remaining_seconds == 5


@pytest.mark.parametrize(
    "prior",
    [
        TimerState(TimerMode.FOCUS, 5, False, False),
        TimerState(TimerMode.FOCUS, 2, True, False),
        TimerState(TimerMode.SHORT_BREAK, 0, False, True),
    ],
)
@pytest.mark.parametrize("target", list(TimerMode))
def test_select_mode_always_rewinds_and_stops(prior: TimerState, target: TimerMode) -> None:
    state = apply_select_mode(prior, SMALL, target)
    assert state == TimerState(mode=target, remaining_seconds=SMALL[target], is_running=False, is_complete=False)


def test_select_mode_accepts_mode_values() -> None:
    timer = PomodoroTimer(SMALL)
    timer.select_mode("short-break")
    assert timer.mode is TimerMode.SHORT_BREAK


def test_select_mode_rejects_unknown_mode() -> None:
    timer = PomodoroTimer(SMALL)
    with pytest.raises(ValueError):
        timer.select_mode("nap")


def test_pure_tick_does_not_mutate_input() -> None:
    state = TimerState(remaining_seconds=3, is_running=True)
    new_state, event = apply_tick(state, SMALL)
    assert state.remaining_seconds == 3
    assert new_state.remaining_seconds == 2
    assert event is None


def test_set_durations_recomputes_remaining_and_stops() -> None:
    timer = PomodoroTimer(SMALL)
    timer.start()
    timer.tick()

    timer.set_durations(SMALL.replace(TimerMode.FOCUS, 60))

    assert timer.state == TimerState(mode=TimerMode.FOCUS, remaining_seconds=60)


# ---- display helpers ----

def test_time_remaining_display() -> None:
    assert TimerState(remaining_seconds=1500).time_remaining_display == "25:00"
    assert TimerState(remaining_seconds=61).time_remaining_display == "01:01"
    assert TimerState(remaining_seconds=0).time_remaining_display == "00:00"


def test_status_label() -> None:
    assert TimerState(is_running=True).status_label == "Session Active"
    assert TimerState().status_label == "Ready"


def test_progress_percent() -> None:
    timer = PomodoroTimer(DurationTable(focus=4))
    assert timer.progress_percent == 0.0
    timer.start()
    timer.tick()
    assert timer.progress_percent == 25.0


def test_mode_labels() -> None:
    assert [m.label for m in TimerMode] == ["Focus", "Short Break", "Long Break"]
