"""Pomodoro timer, daily task ledger, and the session that ties them together."""

from time_dilation.focus.timer import PomodoroTimer, TimerState, TimerMode, DurationTable, CompletionEvent
from time_dilation.focus.ledger import TaskLedger, DailyTask
from time_dilation.focus.settings import DurationEditor, parse_minutes
from time_dilation.focus.scheduler import TickScheduler
from time_dilation.focus.session import PomodoroSession, SessionSnapshot

__all__ = [
    "PomodoroTimer",
    "TimerState",
    "TimerMode",
    "DurationTable",
    "CompletionEvent",
    "TaskLedger",
    "DailyTask",
    "DurationEditor",
    "parse_minutes",
    "TickScheduler",
    "PomodoroSession",
    "SessionSnapshot",
]
