import pytest

from time_dilation.focus.ledger import DailyTask, TaskLedger, format_minutes
from time_dilation.focus.timer import CompletionEvent, TimerMode

DEFAULTS = [
    DailyTask(id="learning", name="Learning", target_minutes=240),
    DailyTask(id="coding", name="Python Coding / DSA", target_minutes=180),
    DailyTask(id="aptitude", name="Aptitude", target_minutes=60),
]

FOCUS_25 = CompletionEvent(TimerMode.FOCUS, 1500)


@pytest.fixture
def ledger() -> TaskLedger:
    return TaskLedger(DEFAULTS, selected_task_id="learning")


def completed(ledger: TaskLedger) -> dict[str, int]:
    return {t.id: t.completed_minutes for t in ledger.tasks}


def test_focus_completion_credits_selected_task_only(ledger: TaskLedger) -> None:
    task = ledger.apply_completion(FOCUS_25)

    assert task is not None
    assert task.completed_minutes == 25
    assert completed(ledger) == {"learning": 25, "coding": 0, "aptitude": 0}


def test_minutes_are_floored(ledger: TaskLedger) -> None:
    ledger.apply_completion(CompletionEvent(TimerMode.FOCUS, 119))
    assert ledger.get_task("learning").completed_minutes == 1


def test_credit_is_uncapped(ledger: TaskLedger) -> None:
    ledger.select_task("aptitude")
    for _ in range(3):
        ledger.apply_completion(FOCUS_25)

    task = ledger.get_task("aptitude")
    assert task.completed_minutes == 75
    assert task.progress_percent == 100.0
    assert task.remaining_minutes == 0


def test_unknown_selection_is_accepted_and_credit_dropped(ledger: TaskLedger) -> None:
    ledger.select_task("nope")

    assert ledger.selected_task_id == "nope"
    assert ledger.selected_task is None
    assert ledger.apply_completion(FOCUS_25) is None
    assert completed(ledger) == {"learning": 0, "coding": 0, "aptitude": 0}


def test_break_completions_are_credited_by_default(ledger: TaskLedger) -> None:
    ledger.apply_completion(CompletionEvent(TimerMode.SHORT_BREAK, 300))
    ledger.apply_completion(CompletionEvent(TimerMode.LONG_BREAK, 900))
    assert ledger.get_task("learning").completed_minutes == 20


def test_break_credits_can_be_disabled() -> None:
    ledger = TaskLedger(DEFAULTS, selected_task_id="learning", credit_break_sessions=False)

    assert ledger.apply_completion(CompletionEvent(TimerMode.SHORT_BREAK, 300)) is None
    ledger.apply_completion(FOCUS_25)

    assert ledger.get_task("learning").completed_minutes == 25


def test_reset_restores_defaults(ledger: TaskLedger) -> None:
    ledger.apply_completion(FOCUS_25)
    ledger.select_task("coding")
    ledger.apply_completion(FOCUS_25)

    ledger.reset_ledger()

    assert completed(ledger) == {"learning": 0, "coding": 0, "aptitude": 0}
    assert ledger.selected_task_id == "coding"


def test_reset_does_not_share_state_with_defaults() -> None:
    defaults = [DailyTask(id="reading", name="Reading", target_minutes=30, completed_minutes=5)]
    ledger = TaskLedger(defaults)

    ledger.apply_completion(FOCUS_25)
    defaults[0].completed_minutes = 999
    ledger.reset_ledger()

    assert ledger.get_task("reading").completed_minutes == 5


def test_returned_tasks_are_copies(ledger: TaskLedger) -> None:
    ledger.tasks[0].completed_minutes = 100
    ledger.get_task("learning").completed_minutes = 100
    assert ledger.get_task("learning").completed_minutes == 0


def test_first_task_is_selected_by_default() -> None:
    assert TaskLedger(DEFAULTS).selected_task_id == "learning"
    assert TaskLedger([]).selected_task_id is None


def test_totals(ledger: TaskLedger) -> None:
    ledger.apply_completion(FOCUS_25)
    assert ledger.total_completed_minutes == 25
    assert ledger.total_target_minutes == 480


def test_progress_formatting() -> None:
    task = DailyTask(id="learning", name="Learning", target_minutes=240, completed_minutes=65)
    assert task.format_progress() == "65/240m"
    assert task.format_completed() == "1h 5m"
    assert format_minutes(45) == "45m"
    assert format_minutes(120) == "2h 0m"
