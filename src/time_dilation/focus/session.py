"""Session that coordinates the timer, task ledger, settings editor, and scheduler."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from time_dilation.core.config import Config, get_config
from time_dilation.focus.ledger import DailyTask, TaskLedger
from time_dilation.focus.scheduler import TickScheduler
from time_dilation.focus.settings import DurationEditor
from time_dilation.focus.timer import CompletionEvent, DurationTable, PomodoroTimer, TimerMode, TimerState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the presentation layer needs to render one frame."""
    timer: TimerState
    durations: DurationTable
    tasks: tuple[DailyTask, ...] = field(default_factory=tuple)
    selected_task_id: str | None = None
    settings_open: bool = False
    pending_durations: DurationTable | None = None  # Only while settings are open
    progress_percent: float = 0.0


def durations_from_config(config: Config) -> DurationTable:
    return DurationTable.from_minutes(
        focus=config.timer.focus_minutes,
        short_break=config.timer.short_break_minutes,
        long_break=config.timer.long_break_minutes,
    )


def tasks_from_config(config: Config) -> list[DailyTask]:
    return [
        DailyTask(
            id=t.id,
            name=t.name,
            target_minutes=t.target_minutes,
            completed_minutes=t.completed_minutes,
        )
        for t in config.tasks
    ]


class PomodoroSession:
    """Single-user session: one timer, one ledger, one settings editor.

    This is the interface a presentation layer talks to. Operations are
    synchronous; with ``scheduled=True`` a TickScheduler drives ``tick()``
    on the running event loop, otherwise the caller ticks manually.

    Usage:
        session = PomodoroSession(config, scheduled=True)
        session.on_change = render
        session.select_task("coding")
        session.start()  # must be called inside a running event loop
    """

    def __init__(self, config: Config | None = None, scheduled: bool = False):
        """Initialize the session.

        Args:
            config: Config instance, defaults to get_config()
            scheduled: Drive ticks from a TickScheduler on the event loop
        """
        self.config = config or get_config()
        defaults = durations_from_config(self.config)

        self._timer = PomodoroTimer(defaults)
        self._ledger = TaskLedger(
            tasks_from_config(self.config),
            selected_task_id=self.config.default_task_id,
            credit_break_sessions=self.config.timer.credit_break_sessions,
        )
        self._editor = DurationEditor(defaults, defaults=defaults)
        self._scheduler: TickScheduler | None = None
        if scheduled:
            self._scheduler = TickScheduler(
                self.tick,
                lambda: self._timer.is_running,
                interval=self.config.timer.tick_interval_seconds,
                on_failure=self._on_tick_failure,
            )

        # Callbacks
        self.on_change: Callable[[SessionSnapshot], None] | None = None
        self.on_complete: Callable[[CompletionEvent, DailyTask | None], None] | None = None

    # Properties
    @property
    def timer_state(self) -> TimerState:
        return self._timer.state

    @property
    def durations(self) -> DurationTable:
        """The active duration table."""
        return self._timer.durations

    @property
    def pending_durations(self) -> DurationTable:
        return self._editor.pending

    @property
    def settings_open(self) -> bool:
        return self._editor.is_open

    @property
    def tasks(self) -> list[DailyTask]:
        return self._ledger.tasks

    @property
    def selected_task_id(self) -> str | None:
        return self._ledger.selected_task_id

    @property
    def ledger(self) -> TaskLedger:
        return self._ledger

    @property
    def scheduler(self) -> TickScheduler | None:
        return self._scheduler

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            timer=self._timer.state,
            durations=self._timer.durations,
            tasks=tuple(self._ledger.tasks),
            selected_task_id=self._ledger.selected_task_id,
            settings_open=self._editor.is_open,
            pending_durations=self._editor.pending if self._editor.is_open else None,
            progress_percent=self._timer.progress_percent,
        )

    # Timer operations
    def select_mode(self, mode: TimerMode | str) -> None:
        self._timer.select_mode(mode)
        self._after_change()

    def start(self) -> None:
        self._timer.start()
        self._after_change()

    def pause(self) -> None:
        self._timer.pause()
        self._after_change()

    def toggle(self) -> None:
        """Pause if running, otherwise start."""
        if self._timer.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._timer.reset()
        self._after_change()

    def tick(self) -> CompletionEvent | None:
        """Advance the countdown by one unit and credit the ledger on completion."""
        event = self._timer.tick()
        if event is not None:
            task = self._ledger.apply_completion(event)
            if self.on_complete:
                try:
                    self.on_complete(event, task)
                except Exception as e:
                    logger.error(f"Error in on_complete callback: {e}")
        self._after_change()
        return event

    # Ledger operations
    def select_task(self, task_id: str) -> None:
        self._ledger.select_task(task_id)
        self._notify()

    def reset_ledger(self) -> None:
        self._ledger.reset_ledger()
        self._notify()

    # Settings operations
    def open_settings(self) -> None:
        self._editor.open(self._timer.durations)
        self._notify()

    def close_settings(self) -> None:
        self._editor.close()
        self._notify()

    def toggle_settings(self) -> None:
        self._editor.toggle(self._timer.durations)
        self._notify()

    def edit_duration(self, mode: TimerMode | str, raw_input: str | int) -> int:
        seconds = self._editor.edit_duration(mode, raw_input)
        self._notify()
        return seconds

    def discard_to_default(self) -> None:
        self._editor.discard_to_default()
        self._notify()

    def save_settings(self) -> None:
        """Commit the pending table and rewind the current mode to it."""
        self._timer.set_durations(self._editor.save())
        self._after_change()

    def get_status(self) -> dict:
        """Get a status summary of the session."""
        selected = self._ledger.selected_task
        return {
            "timer": self._timer.get_summary(),
            "selected_task": selected.id if selected else None,
            "tasks": [
                {
                    "id": t.id,
                    "name": t.name,
                    "progress": t.format_progress(),
                    "progress_percent": round(t.progress_percent, 1),
                }
                for t in self._ledger.tasks
            ],
            "total_completed_minutes": self._ledger.total_completed_minutes,
            "total_target_minutes": self._ledger.total_target_minutes,
        }

    def _on_tick_failure(self) -> None:
        # A tick that raised leaves no armed scheduler; stop the countdown to match
        logger.warning("Tick failed, pausing timer")
        self._timer.pause()
        self._after_change()

    def _after_change(self) -> None:
        if self._scheduler:
            self._scheduler.sync(self._timer.is_running)
        self._notify()

    def _notify(self) -> None:
        if not self.on_change:
            return
        try:
            self.on_change(self.snapshot())
        except Exception as e:
            logger.error(f"Error in on_change callback: {e}")
