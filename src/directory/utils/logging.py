"""Logging for Safe Space Finder.

stdlib logging owns the handlers; structlog renders key/value events on top
of it. Outside production the console gets Rich tracebacks, in production
and staging every line is a JSON object.

Settings come from the environment:

    PROTEAN_ENV / ENV       picks the default level and the renderer
    LOG_LEVEL               overrides the level
    LOG_DIR                 where rotating log files go (default ``logs``)
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import UUID

import structlog

_DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVIRONMENTS = frozenset({"production", "staging"})

_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5

# Libraries that are chatty at INFO
_QUIET_LOGGERS = ("protean", "asyncio", "uvicorn.access")


def current_env() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENV") or "development").lower()


@dataclass(frozen=True)
class LoggingSettings:
    env: str
    level: str
    log_dir: Path
    file_prefix: str

    @classmethod
    def from_env(cls, level: str | None = None, log_dir: str | None = None, file_prefix: str = "safespace"):
        env = current_env()
        return cls(
            env=env,
            level=(level or os.getenv("LOG_LEVEL") or _DEFAULT_LEVELS.get(env, "INFO")).upper(),
            log_dir=Path(log_dir or os.getenv("LOG_DIR", "logs")),
            file_prefix=file_prefix,
        )

    @property
    def json_output(self) -> bool:
        return self.env in _JSON_ENVIRONMENTS

    @property
    def writes_files(self) -> bool:
        # Test runs log to the console only
        return not self.env.startswith("test")


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(settings: LoggingSettings) -> None:
    """Attach console and (outside tests) rotating file handlers to the root logger."""
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.level)
    root_logger.addHandler(console_handler)

    if settings.writes_files:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(settings.log_dir / f"{settings.file_prefix}.log", settings.level))
        root_logger.addHandler(
            _rotating_handler(settings.log_dir / f"{settings.file_prefix}_error.log", logging.ERROR)
        )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def stringify_identifiers(_logger, _method_name, event_dict):
    """Render UUID values (business, review and user ids) as plain strings."""
    for key, value in event_dict.items():
        if isinstance(value, UUID):
            event_dict[key] = str(value)
    return event_dict


def setup_structlog(settings: LoggingSettings) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        stringify_identifiers,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str | None = None, log_dir: str | None = None, log_file_prefix: str = "safespace"):
    settings = LoggingSettings.from_env(level=level, log_dir=log_dir, file_prefix=log_file_prefix)
    setup_stdlib_logging(settings)
    setup_structlog(settings)
    return settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values (request path, method) onto every log line of the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
