"""Core infrastructure - logging."""
from __future__ import annotations

from maintcrm.core.logging_config import LogConfig, get_logger, setup_logging

__all__ = [
    "LogConfig",
    "get_logger",
    "setup_logging",
]
