"""
Logging bootstrap for the golo CLI.

Console tracing goes to stderr through Rich; ``--verbose`` lowers the level
to DEBUG. Setting ``GOLO_LOG_PATH`` additionally writes every record as one
JSON object per line.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

from rich.logging import RichHandler

from .console import err_console

DEFAULT_PATH = os.environ.get("GOLO_LOG_PATH")
DEFAULT_LEVEL = os.environ.get("GOLO_LOG_LEVEL", "WARNING").upper()

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    {
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
        "name",
        "taskName",
    }
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            base = {
                "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "schema": {"name": "golo.log", "ver": "1.0.0"},
                "logger": record.name,
                "message": record.getMessage(),
            }
            for k, v in record.__dict__.items():
                if k in _RESERVED_ATTRS:
                    continue
                base.setdefault(k, v)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


def init_logging(verbose: bool = False, path: str | None = None, level: str | None = None) -> None:
    """Configure the root logger for one CLI invocation.

    Safe to call more than once: handlers installed by an earlier call are
    replaced rather than duplicated.
    """
    path = path or DEFAULT_PATH
    level_name = "DEBUG" if verbose else (level or DEFAULT_LEVEL).upper()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    for h in list(root.handlers):
        if isinstance(h, (JsonlHandler, RichHandler)):
            root.removeHandler(h)

    root.addHandler(RichHandler(console=err_console, show_path=False, show_time=False, markup=False))
    if path:
        root.addHandler(JsonlHandler(path))
