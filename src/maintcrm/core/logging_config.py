"""Process-wide logging for the maintcrm CLI and web server.

``setup_logging`` is called once at startup with the ``[logging]`` section of
settings.toml. It replaces whatever handlers the root logger carries with:

* a size-rotated UTF-8 log file (under the data directory by default), and
* a console handler, rendered by rich unless ``use_rich_console`` is off.

Modules log through ``logging.getLogger(__name__)`` as usual.
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler


# Libraries that chatter at INFO: SQL echo, connection pool checkouts,
# multipart upload parsing.
_NOISY_LOGGERS: tuple[str, ...] = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "multipart",
)

# Request line inside a uvicorn access record: "GET /api/status?x=1 HTTP/1.1"
_REQUEST_LINE = re.compile(r'"[A-Z]+ (?P<target>\S+) HTTP/[\d.]+"')


@dataclass
class LogConfig:
    """The ``[logging]`` settings section."""

    level: str = "INFO"
    file_enabled: bool = True
    file_path: str = "~/.maintcrm/logs/maintcrm.log"
    file_max_bytes: int = 10 * 1024 * 1024
    file_backup_count: int = 5
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    use_rich_console: bool = True
    quiet_third_party: bool = True
    access_log_ignore: list[str] = field(default_factory=lambda: ["/api/status"])

    @property
    def level_number(self) -> int:
        level = logging.getLevelName(self.level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.level!r}")
        return level


class _IgnoredPathsFilter(logging.Filter):
    """Drop access-log lines whose request path is one of ``paths`` or below it."""

    def __init__(self, paths: list[str]) -> None:
        super().__init__()
        self.paths = tuple(p.rstrip("/") for p in paths)

    def _is_ignored(self, target: str) -> bool:
        path = target.split("?", 1)[0].rstrip("/")
        return any(path == p or path.startswith(p + "/") for p in self.paths)

    def filter(self, record: logging.LogRecord) -> bool:
        match = _REQUEST_LINE.search(record.getMessage())
        return match is None or not self._is_ignored(match.group("target"))


def _file_handler(config: LogConfig) -> RotatingFileHandler:
    log_path = Path(config.file_path).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=config.file_max_bytes,
        backupCount=config.file_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(config.format))
    return handler


def _console_handler(config: LogConfig) -> logging.Handler:
    if config.use_rich_console:
        # RichHandler draws its own time and level columns.
        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(config.format))
    return handler


def _replace_access_filter(paths: list[str]) -> None:
    access_logger = logging.getLogger("uvicorn.access")
    for existing in [f for f in access_logger.filters if isinstance(f, _IgnoredPathsFilter)]:
        access_logger.removeFilter(existing)
    if paths:
        access_logger.addFilter(_IgnoredPathsFilter(paths))


def setup_logging(config: LogConfig) -> None:
    """
    Install the file and console handlers on the root logger.

    Safe to call more than once; each call starts from an empty handler list
    and at most one access-log filter stays attached.

    Args:
        config: Logging section of the loaded settings

    Raises:
        ValueError: If ``config.level`` is not a logging level name
    """
    root = logging.getLogger()
    root.setLevel(config.level_number)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if config.file_enabled:
        root.addHandler(_file_handler(config))
    root.addHandler(_console_handler(config))

    if config.quiet_third_party:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # The desktop shell polls /api/status every few seconds.
    _replace_access_filter(config.access_log_ignore)


def get_logger(name: str) -> logging.Logger:
    """Module logger; a named alias of ``logging.getLogger``."""
    return logging.getLogger(name)
