from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import FilteringBoundLogger

_TOKEN_PATTERNS = (
    # discord bot tokens: base64 user id, timestamp, hmac
    re.compile(r"[MNO][A-Za-z\d_-]{23,25}\.[A-Za-z\d_-]{6}\.[A-Za-z\d_-]{27,38}"),
    re.compile(r"(?i)(Bot\s+)[A-Za-z\d._-]{20,}"),
)
_REDACTED = "[REDACTED]"
_SECRET_KEYS = frozenset({"token", "bot_token", "authorization"})


def _redact_text(value: str) -> str:
    for pattern in _TOKEN_PATTERNS:
        if pattern.groups:
            value = pattern.sub(lambda m: m.group(1) + _REDACTED, value)
        else:
            value = pattern.sub(_REDACTED, value)
    return value


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return _redact_text(value)
    if isinstance(value, Mapping):
        return {key: _redact_value(item) for key, item in value.items()}
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return type(value)(*(_redact_value(item) for item in value))
    if isinstance(value, list | tuple):
        return type(value)(_redact_value(item) for item in value)
    return value


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    for key, value in list(event_dict.items()):
        if key in _SECRET_KEYS and value is not None:
            event_dict[key] = _REDACTED
        else:
            event_dict[key] = _redact_value(value)
    return event_dict


def _renderer() -> Any:
    fmt = os.environ.get("BOTSCAFFOLD_LOG_FORMAT", "").strip().lower()
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(*, debug: bool = False, cache_logger_on_first_use: bool = True) -> None:
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.processors.format_exc_info,
            redact_secrets,
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=cache_logger_on_first_use,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    return structlog.get_logger(name)


@contextmanager
def bound_context(**values: Any) -> Iterator[None]:
    """Bind log fields for the duration of a block (task-local)."""
    with structlog.contextvars.bound_contextvars(**values):
        yield
