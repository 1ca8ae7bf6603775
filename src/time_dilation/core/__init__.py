"""Core application components."""

from time_dilation.core.config import Config, get_config

__all__ = ["Config", "get_config"]
