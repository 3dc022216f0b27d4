"""Structured key=value logging for DocMind.

Loggers under the ``docmind`` namespace share one stdout handler. A run id
bound with :func:`run_context` is stamped on every record emitted while the
run is in flight, including records from graph nodes and memory backends.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

ROOT_LOGGER_NAME = "docmind"

_ENV_LEVELS = {
    "dev": logging.DEBUG,
    "test": logging.INFO,
    "prod": logging.INFO,
}

_current_run_id: ContextVar[str | None] = ContextVar("docmind_run_id", default=None)


class StructuredFormatter(logging.Formatter):
    """Render records as space separated key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        run_id = getattr(record, "run_id", None) or _current_run_id.get()
        if run_id:
            fields["run_id"] = run_id

        fields.update(getattr(record, "extra_data", None) or {})

        if record.exc_info:
            # Single line so one record stays one line
            fields["exception"] = self.formatException(record.exc_info).replace("\n", " | ")

        return " ".join(f"{key}={value}" for key, value in fields.items())


def _level_for_env() -> int:
    try:
        from docmind.core.config import get_settings

        return _ENV_LEVELS.get(get_settings().DOCMIND_ENV, logging.INFO)
    except Exception:
        # Credentials not loaded yet
        return logging.INFO


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.setLevel(_level_for_env())
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger that writes through the shared DocMind handler.

    Names outside the ``docmind`` namespace are nested under it so that
    test and script loggers format the same way.
    """
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


@contextmanager
def run_context(run_id: str) -> Iterator[str]:
    """Bind ``run_id`` to every record logged inside the block."""
    token = _current_run_id.set(run_id)
    try:
        yield run_id
    finally:
        _current_run_id.reset(token)


def current_run_id() -> str | None:
    return _current_run_id.get()


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log ``msg`` with extra key=value fields.

    An explicit ``run_id`` keyword wins over the one bound by run_context.
    """
    extra: dict[str, Any] = {}
    run_id = kwargs.pop("run_id", None)
    if run_id:
        extra["run_id"] = run_id
    extra["extra_data"] = kwargs
    logger.log(level, msg, extra=extra)
