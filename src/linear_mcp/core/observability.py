from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

RESERVED_LOG_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "asctime",
}

# Never emitted, even if a caller passes them by mistake.
SECRET_LOG_KEYS = {
    "access_token",
    "refresh_token",
    "client_secret",
    "code",
    "token",
}

OBSERVABILITY_LOGGER = "linear_mcp.observability"


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: v
        for k, v in fields.items()
        if k not in RESERVED_LOG_KEYS and k not in SECRET_LOG_KEYS
    }


def log_event(event: str, logger: logging.Logger | None = None, **fields: Any) -> None:
    """
    Minimal structured logging helper.
    - Uses logger.info with extra dict so formatters can include keys.
    - Drops reserved LogRecord attributes and secret-looking keys.
    """
    log = logger or logging.getLogger(OBSERVABILITY_LOGGER)
    extra = {"event": event, **_clean_fields(fields)}
    log.info(event, extra=extra)


@contextmanager
def timed_event(event: str, **fields: Any) -> Iterator[Dict[str, Any]]:
    """
    Emit ``event`` once the block exits, with duration_ms and a status.

    The block may set ``status`` (or any other field) on the yielded dict.
    An exception marks the event ``status=exception`` with its type and is
    re-raised.
    """
    record: Dict[str, Any] = dict(fields)
    start = time.perf_counter()
    try:
        yield record
    except BaseException as exc:
        record.setdefault("status", "exception")
        record["error_type"] = type(exc).__name__
        raise
    finally:
        record.setdefault("status", "ok")
        record["duration_ms"] = int((time.perf_counter() - start) * 1000)
        log_event(event, **record)


__all__ = ["log_event", "timed_event", "OBSERVABILITY_LOGGER"]
