"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class TimerConfig(BaseModel):
    """Countdown durations and scheduling."""

    focus_minutes: int = Field(default=25, ge=1)
    short_break_minutes: int = Field(default=5, ge=1)
    long_break_minutes: int = Field(default=15, ge=1)
    tick_interval_seconds: float = Field(default=1.0, gt=0, description="Wall-clock seconds per tick")
    credit_break_sessions: bool = Field(
        default=True,
        description="Credit short/long break completions to the selected task",
    )


class TaskConfig(BaseModel):
    """A daily task loaded into the ledger at session start."""

    id: str = Field(min_length=1)
    name: str
    target_minutes: int = Field(ge=1)
    completed_minutes: int = Field(default=0, ge=0)


def _default_tasks() -> list[TaskConfig]:
    return [
        TaskConfig(id="learning", name="Learning", target_minutes=240),
        TaskConfig(id="coding", name="Python Coding / DSA", target_minutes=180),
        TaskConfig(id="aptitude", name="Aptitude", target_minutes=60),
    ]


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TIME_DILATION_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config/time-dilation")

    # Log level
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Sub-configurations
    timer: TimerConfig = Field(default_factory=TimerConfig)
    tasks: list[TaskConfig] = Field(default_factory=_default_tasks)
    default_task_id: str = Field(default="learning", description="Task selected at session start")

    @field_validator("tasks")
    @classmethod
    def _unique_task_ids(cls, tasks: list[TaskConfig]) -> list[TaskConfig]:
        seen: set[str] = set()
        for task in tasks:
            if task.id in seen:
                raise ValueError(f"duplicate task id: {task.id}")
            seen.add(task.id)
        return tasks

    @model_validator(mode="after")
    def _default_task_exists(self) -> Config:
        # An unresolved selection is legal at runtime, but a config that starts
        # with one is almost certainly a typo.
        if self.tasks and self.default_task_id not in {t.id for t in self.tasks}:
            raise ValueError(f"default_task_id {self.default_task_id!r} is not a configured task")
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment first so it outranks the YAML values passed as init data
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / "config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values
        """
        config_path = config_path or Path.home() / ".config/time-dilation/config.yaml"

        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        # Create config with YAML as init data, env vars will override
        return cls(**yaml_config)

    def save(self, config_path: Path | None = None) -> None:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(exclude_none=True)

        # Convert Path objects to strings for YAML
        data["config_dir"] = str(data["config_dir"])

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.load()
