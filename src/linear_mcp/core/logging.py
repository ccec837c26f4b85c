import logging
import sys
from typing import IO, Any, Dict, Optional

from .observability import RESERVED_LOG_KEYS, SECRET_LOG_KEYS

# attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | RESERVED_LOG_KEYS | {"event"}

_HANDLER_NAME = "linear_mcp.logfmt"


class LogfmtFormatter(logging.Formatter):
    """
    logfmt lines: level, logger, event (the message), then every ``extra``
    field in name order. Secret-looking keys and None values are left out.
    """

    def format(self, record: logging.LogRecord) -> str:
        pairs = [
            ("level", record.levelname.lower()),
            ("logger", record.name),
            ("event", record.getMessage()),
        ]
        pairs.extend(sorted(self.extras(record).items()))
        if record.exc_info and record.exc_info[0] is not None:
            pairs.append(("exc_type", record.exc_info[0].__name__))
        return " ".join(f"{k}={quote(v)}" for k, v in pairs if v not in (None, ""))

    @staticmethod
    def extras(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in SECRET_LOG_KEYS
            and not key.startswith("_")
        }


def quote(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value)
    if not text or any(c in text for c in ' ="'):
        text = '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


def setup_logging(level: str = "INFO", stream: Optional[IO[str]] = None) -> logging.Handler:
    """
    Install the logfmt handler on the root logger and return it.

    Calling again replaces the handler installed earlier and leaves other
    handlers alone. Output goes to stderr by default; stdout carries the MCP
    stdio protocol.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return handler


__all__ = ["setup_logging", "LogfmtFormatter", "quote"]
