"""Daily task ledger that accumulates credited focus minutes."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from time_dilation.focus.timer import CompletionEvent, TimerMode

logger = logging.getLogger(__name__)


@dataclass
class DailyTask:
    """A daily goal and its progress.

    Example:
        task = DailyTask(id="learning", name="Learning", target_minutes=240)
    """
    id: str
    name: str = ""
    target_minutes: int = 60
    completed_minutes: int = 0

    @property
    def progress_percent(self) -> float:
        """Progress toward target (0-100). Completed minutes themselves are uncapped."""
        if self.target_minutes <= 0:
            return 100.0
        return min(100.0, (self.completed_minutes / self.target_minutes) * 100)

    @property
    def remaining_minutes(self) -> int:
        return max(0, self.target_minutes - self.completed_minutes)

    def format_progress(self) -> str:
        return f"{self.completed_minutes}/{self.target_minutes}m"

    def format_completed(self) -> str:
        """Format completed minutes as human-readable string."""
        return format_minutes(self.completed_minutes)


def format_minutes(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


class TaskLedger:
    """Owns the daily tasks and credits completed countdowns to the selected one.

    The selection is held by id only and resolved when a credit arrives, so
    selecting an unknown id is accepted and later credits are dropped.

    Usage:
        ledger = TaskLedger(defaults, selected_task_id="learning")
        ledger.apply_completion(CompletionEvent(TimerMode.FOCUS, 1500))
        ledger.get_task("learning").completed_minutes  # 25
    """

    def __init__(
        self,
        defaults: Iterable[DailyTask],
        selected_task_id: str | None = None,
        credit_break_sessions: bool = True,
    ):
        """Initialize the ledger.

        Args:
            defaults: Task list restored on every reset; copied, never mutated
            selected_task_id: Initial selection, defaults to the first task
            credit_break_sessions: Whether break completions also earn minutes
        """
        self._defaults: tuple[DailyTask, ...] = tuple(dataclasses.replace(t) for t in defaults)
        self._tasks: dict[str, DailyTask] = self._fresh_tasks()
        if selected_task_id is None and self._defaults:
            selected_task_id = self._defaults[0].id
        self._selected_task_id = selected_task_id
        self.credit_break_sessions = credit_break_sessions

    def _fresh_tasks(self) -> dict[str, DailyTask]:
        return {t.id: dataclasses.replace(t) for t in self._defaults}

    @property
    def tasks(self) -> list[DailyTask]:
        """Copies of all tasks, in default order."""
        return [dataclasses.replace(t) for t in self._tasks.values()]

    @property
    def selected_task_id(self) -> str | None:
        return self._selected_task_id

    @property
    def selected_task(self) -> DailyTask | None:
        """The selected task, or None when the selection does not resolve."""
        return self.get_task(self._selected_task_id) if self._selected_task_id is not None else None

    @property
    def total_completed_minutes(self) -> int:
        return sum(t.completed_minutes for t in self._tasks.values())

    @property
    def total_target_minutes(self) -> int:
        return sum(t.target_minutes for t in self._tasks.values())

    def get_task(self, task_id: str) -> DailyTask | None:
        task = self._tasks.get(task_id)
        return dataclasses.replace(task) if task else None

    def select_task(self, task_id: str) -> None:
        self._selected_task_id = task_id
        logger.info(f"Selected task: {task_id}")

    def apply_completion(self, event: CompletionEvent) -> DailyTask | None:
        """Credit a finished countdown to the selected task.

        Returns:
            The updated task, or None if the credit was dropped
        """
        if event.mode != TimerMode.FOCUS and not self.credit_break_sessions:
            logger.debug(f"Not crediting {event.mode.value} completion")
            return None

        task = self._tasks.get(self._selected_task_id) if self._selected_task_id is not None else None
        if task is None:
            logger.debug(f"Dropped {event.minutes} min credit for unknown task {self._selected_task_id!r}")
            return None

        task.completed_minutes += event.minutes
        logger.info(f"Credited {event.minutes} min to {task.id} ({task.format_progress()})")
        return dataclasses.replace(task)

    def reset_ledger(self) -> None:
        """Restore the default task list verbatim."""
        self._tasks = self._fresh_tasks()
        logger.info("Daily tasks reset")
