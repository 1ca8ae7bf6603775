"""Pomodoro timer state machine with configurable durations.

The transitions are pure functions from ``(state, durations, ...)`` to a new
``TimerState``. ``PomodoroTimer`` holds the current state and the active
duration table and applies them; scheduling lives in ``focus.scheduler``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class TimerMode(Enum):
    """Which countdown is active."""
    FOCUS = "focus"
    SHORT_BREAK = "short-break"
    LONG_BREAK = "long-break"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @property
    def field_name(self) -> str:
        """Attribute name of this mode on DurationTable."""
        return self.value.replace("-", "_")


_MODE_LABELS = {
    TimerMode.FOCUS: "Focus",
    TimerMode.SHORT_BREAK: "Short Break",
    TimerMode.LONG_BREAK: "Long Break",
}


@dataclass(frozen=True)
class DurationTable:
    """Seconds per mode. Every mode always has a positive duration."""
    focus: int = 25 * 60
    short_break: int = 5 * 60
    long_break: int = 15 * 60

    def __post_init__(self) -> None:
        for mode in TimerMode:
            seconds = getattr(self, mode.field_name)
            if not isinstance(seconds, int) or seconds < 1:
                raise ValueError(f"{mode.value} duration must be a positive number of seconds, got {seconds!r}")

    def __getitem__(self, mode: TimerMode | str) -> int:
        return getattr(self, TimerMode(mode).field_name)

    @classmethod
    def from_minutes(cls, focus: int, short_break: int, long_break: int) -> DurationTable:
        return cls(focus=focus * 60, short_break=short_break * 60, long_break=long_break * 60)

    def replace(self, mode: TimerMode | str, seconds: int) -> DurationTable:
        """Return a copy with one mode's duration changed."""
        return dataclasses.replace(self, **{TimerMode(mode).field_name: seconds})

    def to_dict(self) -> dict[str, int]:
        return {mode.value: self[mode] for mode in TimerMode}


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the timer.

    ``is_running`` and ``is_complete`` are never both true, and
    ``is_complete`` is only set by the countdown reaching zero.
    """
    mode: TimerMode = TimerMode.FOCUS
    remaining_seconds: int = 25 * 60
    is_running: bool = False
    is_complete: bool = False

    @property
    def is_idle(self) -> bool:
        return not self.is_running and not self.is_complete

    @property
    def time_remaining_display(self) -> str:
        """Format time remaining as MM:SS."""
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def status_label(self) -> str:
        return "Session Active" if self.is_running else "Ready"


@dataclass(frozen=True)
class CompletionEvent:
    """Emitted exactly once when a countdown reaches zero."""
    mode: TimerMode
    duration_seconds: int

    @property
    def minutes(self) -> int:
        """Whole minutes credited for this completion."""
        return self.duration_seconds // 60


# Pure transitions

def initial_state(durations: DurationTable, mode: TimerMode = TimerMode.FOCUS) -> TimerState:
    return TimerState(mode=mode, remaining_seconds=durations[mode])


def apply_select_mode(state: TimerState, durations: DurationTable, mode: TimerMode | str) -> TimerState:
    """Switch mode and rewind to its full duration, stopped and not complete."""
    mode = TimerMode(mode)
    return TimerState(mode=mode, remaining_seconds=durations[mode])


def apply_start(state: TimerState) -> TimerState:
    # A finished countdown has to be reset (or switched) before it can run again
    if state.is_running or state.is_complete:
        return state
    return dataclasses.replace(state, is_running=True)


def apply_pause(state: TimerState) -> TimerState:
    if not state.is_running:
        return state
    return dataclasses.replace(state, is_running=False)


def apply_reset(state: TimerState, durations: DurationTable) -> TimerState:
    return TimerState(mode=state.mode, remaining_seconds=durations[state.mode])


def apply_tick(state: TimerState, durations: DurationTable) -> tuple[TimerState, CompletionEvent | None]:
    """Advance one time unit.

    Returns the new state and, on the terminal tick only, the completion event.
    """
    if not state.is_running:
        return state, None

    if state.remaining_seconds > 1:
        return dataclasses.replace(state, remaining_seconds=state.remaining_seconds - 1), None

    finished = TimerState(mode=state.mode, remaining_seconds=0, is_running=False, is_complete=True)
    return finished, CompletionEvent(mode=state.mode, duration_seconds=durations[state.mode])


class PomodoroTimer:
    """Pomodoro timer holding the live state and the active duration table.

    Usage:
        timer = PomodoroTimer(DurationTable.from_minutes(25, 5, 15))
        timer.on_complete = lambda event: print(f"{event.mode.label} done")

        timer.start()
        for _ in range(25 * 60):
            timer.tick()
        timer.reset()
    """

    def __init__(self, durations: DurationTable | None = None, mode: TimerMode = TimerMode.FOCUS):
        self._durations = durations or DurationTable()
        self._state = initial_state(self._durations, mode)

        # Callbacks
        self.on_complete: Callable[[CompletionEvent], None] | None = None

    @property
    def state(self) -> TimerState:
        """Get current timer state (immutable snapshot)."""
        return self._state

    @property
    def durations(self) -> DurationTable:
        """The active duration table."""
        return self._durations

    @property
    def mode(self) -> TimerMode:
        return self._state.mode

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def progress_percent(self) -> float:
        """Progress through the current countdown (0-100)."""
        total = self._durations[self._state.mode]
        elapsed = total - self._state.remaining_seconds
        return min(100.0, max(0.0, (elapsed / total) * 100))

    def select_mode(self, mode: TimerMode | str) -> None:
        self._state = apply_select_mode(self._state, self._durations, mode)
        logger.info(f"Timer mode set to {self._state.mode.value}")

    def start(self) -> None:
        """Start the countdown. Ignored while running or complete."""
        previous = self._state
        self._state = apply_start(previous)
        if self._state is previous:
            logger.debug(f"Start ignored (running={previous.is_running}, complete={previous.is_complete})")
            return
        logger.info(f"Timer started: {self._state.mode.value}, {self._state.time_remaining_display} left")

    def pause(self) -> None:
        previous = self._state
        self._state = apply_pause(previous)
        if self._state is not previous:
            logger.info(f"Timer paused at {self._state.time_remaining_display}")

    def reset(self) -> None:
        """Rewind the current mode to its full duration."""
        self._state = apply_reset(self._state, self._durations)
        logger.info(f"Timer reset: {self._state.mode.value}")

    def set_durations(self, durations: DurationTable) -> None:
        """Replace the active table and re-select the current mode."""
        self._durations = durations
        self._state = apply_select_mode(self._state, durations, self._state.mode)
        logger.info(f"Active durations updated: {durations.to_dict()}")

    def tick(self) -> CompletionEvent | None:
        """Advance one second. Returns the completion event on the terminal tick."""
        self._state, event = apply_tick(self._state, self._durations)
        if event is None:
            return None

        logger.info(f"{event.mode.label} complete ({event.minutes} min)")
        if self.on_complete:
            try:
                self.on_complete(event)
            except Exception as e:
                logger.error(f"Error in on_complete callback: {e}")
        return event

    def get_summary(self) -> dict:
        """Get a summary of the current timer."""
        return {
            "mode": self._state.mode.value,
            "is_running": self._state.is_running,
            "is_complete": self._state.is_complete,
            "time_remaining": self._state.time_remaining_display,
            "progress_percent": round(self.progress_percent, 1),
            "durations": self._durations.to_dict(),
        }
