from __future__ import annotations
import json, logging, sys
from typing import Any, Dict, TextIO

# LogRecord attributes that are plumbing, not caller-supplied `extra=` fields
_RESERVED = frozenset((
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "taskName", "message", "asctime",
))

class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k not in _RESERVED:
                payload[k] = v
        # rule names and paths are plain data; anything else is stringified
        return json.dumps(payload, separators=(",", ":"), default=str)

def get_logger(
    name: str = "simplifier",
    level: str = "INFO",
    structured_json: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler(stream or sys.stdout)
    if structured_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger

def child_logger(suffix: str) -> logging.Logger:
    """Logger under the "simplifier" tree; output goes wherever get_logger() pointed the parent."""
    return logging.getLogger(f"simplifier.{suffix}")
