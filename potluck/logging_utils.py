"""
Shared logging setup.

One line per entry:
<RunId>|<Date>|<Time>|<Level>|<File:Line>|<Module.Func>|<Detail>|<END>
"""

from __future__ import annotations

import datetime
import logging
import uuid

RUN_ID: str = uuid.uuid4().hex[:8]


class StructuredFormatter(logging.Formatter):
    """Emit a single '|' separated line per record."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        dt = datetime.datetime.fromtimestamp(record.created)
        run_id = getattr(record, "run_id", RUN_ID)
        line = (
            f"{run_id}|{dt.strftime('%Y-%m-%d')}|{dt.strftime('%H:%M:%S')}|{record.levelname}|"
            f"{record.filename}:{record.lineno}|{record.module}.{record.funcName}|"
            f"{record.getMessage()}|<END>"
        )
        if record.exc_info:
            line = f"{line} | EXC={record.exc_info[1]!r}"
        return line


def init_logging(level: int = logging.INFO, log_path: str | None = None) -> None:
    """
    Configure the root logger once.

    With ``log_path`` the lines go to a file instead of stderr, which keeps the
    terminal UI free of log output.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (tests, REPL, or a second entry point).
        return

    handler: logging.Handler
    if log_path:
        handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger. Configuration is left to the entry point."""
    return logging.getLogger(name)
