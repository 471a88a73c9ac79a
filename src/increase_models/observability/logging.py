"""
increase-models — structured logging

File: src/increase_models/observability/logging.py

Purpose
- Render engine events (``structlog``) and plain stdlib records as one JSON
  object per line, with credentials and bank identifiers redacted.
- Bind request/resource correlation fields for the duration of a call.

Behavior
- Nothing is configured at import time; ``setup_structured_logging`` installs
  the handlers and ``shutdown_logging`` removes them again.
- Engine modules log through ``structlog.get_logger(__name__)``; their stdlib
  loggers are children of ``increase_models`` and reach the same handlers.
"""

from __future__ import annotations

import logging
import re
import sys
import threading
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any, Final

import structlog

from increase_models.constants import LOG_DIR, LOG_FILE_NAME

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
LogRedactor = Callable[[JSONValue], JSONValue]
EventDict = MutableMapping[str, Any]

_REDACTED_VALUE: Final[str] = "***REDACTED***"
_DEFAULT_LOGGER_NAME: Final[str] = "increase_models"
# Keys the renderer itself adds; never treated as payload.
_ENVELOPE_KEYS: Final[frozenset[str]] = frozenset({"event", "level", "logger", "timestamp"})

_SENSITIVE_KEY_TERMS: Final[tuple[str, ...]] = (
    "secret",
    "token",
    "password",
    "api_key",
    "apikey",
    "authorization",
    "credential",
    "cookie",
    "account_number",
    "routing_number",
)

_SENSITIVE_ASSIGNMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(api[_-]?key|token|password|secret|authorization|account_number|routing_number)\b"
    r"\s*([:=])\s*([^\s,;]+)"
)
_BEARER_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/-]+=*")
_API_KEY_PATTERN: Final[re.Pattern[str]] = re.compile(r"\bsecret_key_[A-Za-z0-9]{12,}\b")

_ACTIVE_HANDLE_LOCK = threading.Lock()
_ACTIVE_HANDLE: LoggingHandle | None = None


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Where and how verbosely to write JSON-lines logs."""

    level: int | str = "INFO"
    log_path: Path | str | None = None
    log_to_stdout: bool = False
    redact_secrets: bool = True
    logger_name: str = _DEFAULT_LOGGER_NAME
    redactor: LogRedactor | None = None


class LoggingHandle:
    """Handlers installed by one ``setup_structured_logging`` call."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        handlers: tuple[logging.Handler, ...],
        log_path: Path | None,
    ) -> None:
        self.logger = logger
        self.log_path = log_path
        self._handlers = handlers
        self._lock = threading.Lock()
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def flush(self) -> None:
        for handler in self._handlers:
            handler.flush()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            for handler in self._handlers:
                self.logger.removeHandler(handler)
                handler.flush()
                handler.close()
            structlog.reset_defaults()
            self._closed = True


def setup_structured_logging(config: LoggingConfig) -> LoggingHandle:
    """Install JSON-lines handlers on ``config.logger_name`` and route structlog through them."""

    global _ACTIVE_HANDLE

    level = _parse_log_level(config.level)
    logger_name = config.logger_name.strip()
    if not logger_name:
        raise ValueError("logger_name must not be empty")
    redactor = config.redactor or (default_log_redactor if config.redact_secrets else None)
    formatter = _json_formatter(redactor)

    handlers: list[logging.Handler] = []
    log_path: Path | None = None
    if config.log_path is not None:
        log_path = Path(config.log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    if config.log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    if not handlers:
        raise ValueError("LoggingConfig needs a log_path or log_to_stdout=True")

    shutdown_logging()

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handle = LoggingHandle(logger=logger, handlers=tuple(handlers), log_path=log_path)
    with _ACTIVE_HANDLE_LOCK:
        _ACTIVE_HANDLE = handle
    return handle


def setup_logging(
    observability_config: Mapping[str, object] | None = None,
    *,
    log_dir: Path | str | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Configure logging from an ``[observability]`` config section and return the logger.

    The log file is ``<log_dir>/increase-models.jsonl``; ``log_dir`` overrides
    the section's own value.
    """

    section = dict(observability_config or {})
    raw_level = section.get("log_level", "INFO")
    raw_dir = log_dir if log_dir is not None else section.get("log_dir", LOG_DIR)
    if not isinstance(raw_dir, (str, PurePath)):
        raise ValueError(f"log_dir must be a path, got {type(raw_dir).__name__}")

    handle = setup_structured_logging(
        LoggingConfig(
            level=raw_level if isinstance(raw_level, (int, str)) else "INFO",
            log_path=Path(raw_dir) / LOG_FILE_NAME,
            log_to_stdout=bool(section.get("log_to_stdout", False)),
            redact_secrets=bool(section.get("redact_secrets", True)),
            logger_name=logger_name,
        )
    )
    return handle.logger


def flush_logging(handle: LoggingHandle | None = None) -> None:
    resolved = handle or get_active_logging_handle()
    if resolved is not None:
        resolved.flush()


def shutdown_logging(handle: LoggingHandle | None = None) -> None:
    """Remove installed handlers and restore structlog's defaults. Safe to repeat."""

    global _ACTIVE_HANDLE

    with _ACTIVE_HANDLE_LOCK:
        resolved = handle or _ACTIVE_HANDLE
        if resolved is None:
            return
        if _ACTIVE_HANDLE is resolved:
            _ACTIVE_HANDLE = None
    resolved.close()


def get_active_logging_handle() -> LoggingHandle | None:
    with _ACTIVE_HANDLE_LOCK:
        return _ACTIVE_HANDLE


@contextmanager
def correlation_scope(**fields: str) -> Iterator[None]:
    """Attach ``fields`` (e.g. ``request_id``) to every log line emitted in scope."""

    for key, value in fields.items():
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"correlation field {key!r} must be a non-empty string")
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def get_correlation_context() -> dict[str, Any]:
    return dict(structlog.contextvars.get_contextvars())


def default_log_redactor(value: JSONValue) -> JSONValue:
    """Deep redaction of credentials and bank account identifiers."""

    return _redact_value(value, key_context=None)


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]


def _json_formatter(redactor: LogRedactor | None) -> structlog.stdlib.ProcessorFormatter:
    def redact(_logger: object, _method: str, event_dict: EventDict) -> EventDict:
        envelope: dict[str, JSONValue] = {}
        payload: dict[str, JSONValue] = {}
        for key, value in event_dict.items():
            target = envelope if key in _ENVELOPE_KEYS else payload
            target[key] = _to_json(value)
        if redactor is not None:
            envelope["event"] = redactor(envelope.get("event"))
            redacted = redactor(payload)
            payload = redacted if isinstance(redacted, dict) else {}
        return {**envelope, **payload}

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[structlog.stdlib.ExtraAdder(), *_shared_processors()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            redact,
            structlog.processors.JSONRenderer(sort_keys=True, ensure_ascii=False),
        ],
    )


def _to_json(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return str(value)


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    parsed = logging.getLevelName(str(value).strip().upper())
    if isinstance(parsed, int):
        return parsed
    raise ValueError(f"unsupported logging level {value!r}")


def _redact_value(value: JSONValue, *, key_context: str | None) -> JSONValue:
    if key_context is not None and _requires_redaction_for_key(key_context):
        return _REDACTED_VALUE
    if isinstance(value, str):
        return _redact_string(value)
    if isinstance(value, list):
        return [_redact_value(item, key_context=None) for item in value]
    if isinstance(value, dict):
        return {key: _redact_value(item, key_context=key) for key, item in value.items()}
    return value


def _requires_redaction_for_key(key: str) -> bool:
    key_lower = key.lower()
    return any(term in key_lower for term in _SENSITIVE_KEY_TERMS)


def _redact_string(text: str) -> str:
    redacted = _SENSITIVE_ASSIGNMENT_PATTERN.sub(
        lambda match: f"{match.group(1)}{match.group(2)}{_REDACTED_VALUE}", text
    )
    redacted = _BEARER_TOKEN_PATTERN.sub(f"Bearer {_REDACTED_VALUE}", redacted)
    return _API_KEY_PATTERN.sub(_REDACTED_VALUE, redacted)


__all__ = [
    "JSONScalar",
    "JSONValue",
    "LogRedactor",
    "LoggingConfig",
    "LoggingHandle",
    "correlation_scope",
    "default_log_redactor",
    "flush_logging",
    "get_active_logging_handle",
    "get_correlation_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
