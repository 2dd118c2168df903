"""Structured logging utilities for the provider layer.

Every module obtains its logger through ``get_logger("chatwire.<area>")``;
child loggers propagate to the shared ``chatwire`` logger, which owns a single
stderr handler using :class:`JsonFormatter`. Events are emitted with
``log_event`` (free-form) or ``normalized_log_event`` (guaranteed ``phase``,
``attempt``, ``error_code``, ``emitted`` and ``tokens`` keys) so downstream
tooling can filter on one schema across vendors.

Environment:
    CHATWIRE_LOG_LEVEL: level name for the shared logger (default ``INFO``).
"""
from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "chatwire"
LOG_LEVEL_ENV = "CHATWIRE_LOG_LEVEL"

# Marks handlers this module owns; anything else on the logger is left alone.
_OWNER_TAG = "_chatwire_role"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5


def _parse_level(value: int | str | None, default: int = logging.INFO) -> int:
    """Resolve a level number or name; unknown names yield ``default``."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    resolved = logging.getLevelName(value.strip().upper())
    return resolved if isinstance(resolved, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _owned(logger: logging.Logger, role: str) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _OWNER_TAG, None) == role]


def _base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Return the shared ``chatwire`` logger, installing its stderr handler once."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    if not _owned(logger, "console"):
        logger.setLevel(_parse_level(os.getenv(LOG_LEVEL_ENV), default=level))
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_formatter(json_mode))
        setattr(console, _OWNER_TAG, "console")
        logger.addHandler(console)
        logger.propagate = False
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``name`` as a child of the shared, JSON-formatted base logger."""
    base = _base_logger(json_mode, level)
    if name == BASE_LOGGER_NAME:
        return base
    child = logging.getLogger(name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared logger at runtime.

    ``level`` accepts a number or a name; ``None`` keeps the current one.
    ``file_path`` points the managed rotating file handler at a new path,
    and ``None`` detaches it. Handlers added by callers are never touched.
    """
    logger = _base_logger(json_mode, logging.INFO)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level))

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    keep: Optional[logging.Handler] = None
    for handler in _owned(logger, "file"):
        if target is not None and getattr(handler, "baseFilename", None) == target:
            keep = handler
            continue
        logger.removeHandler(handler)
        handler.close()

    if target is None:
        return logger
    if keep is None:
        os.makedirs(os.path.dirname(target) or ".", exist_ok=True)
        keep = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        setattr(keep, _OWNER_TAG, "file")
        logger.addHandler(keep)
    keep.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit one structured event as a single JSON line.

    ``None``-valued fields are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    """Return a JSON-friendly view of token usage (mapping, DTO or ``None``)."""
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    to_dict = getattr(tokens, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit an event that always carries the normalized key set.

    ``error_code`` is omitted when ``None``; the other required keys are kept
    (as JSON ``null`` when unknown). ``extra_fields`` never overwrite them.
    """
    base_fields: Dict[str, Any] = {
        "structured": True,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or k in base_fields:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
