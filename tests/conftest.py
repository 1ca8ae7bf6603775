import os
from pathlib import Path

import pytest

from time_dilation.core.config import Config, TimerConfig
from time_dilation.focus.session import PomodoroSession


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.upper().startswith("TIME_DILATION_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(config_dir=tmp_path)


@pytest.fixture
def short_config(tmp_path: Path) -> Config:
    """One-minute countdowns that tick every millisecond."""
    return Config(
        config_dir=tmp_path,
        timer=TimerConfig(
            focus_minutes=1,
            short_break_minutes=1,
            long_break_minutes=2,
            tick_interval_seconds=0.001,
        ),
    )


@pytest.fixture
def session(config: Config) -> PomodoroSession:
    return PomodoroSession(config)
