"""Logging for the render CLI.

Glyph rows own stdout, so every log record goes to stderr and/or a file.
Records carry the render context (app, mode, frame) pushed by the pipeline:

    12:45:03.118 INFO     src.ascii_fields.pipeline [app=render mode=noise frame=2] fractal_pass: 0.041 s

With json=True each record is one JSON object per line instead
({"t": ..., "lvl": ..., "name": ..., "msg": ..., "mode": ...}).

Usage:
    from src.utils.logging_config import setup_logging, push_context

    setup_logging("INFO", context={"app": "render"})
    push_context(mode="fractal")
"""

import contextvars
import json as jsonlib
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_context_var: contextvars.ContextVar = contextvars.ContextVar('render_log_context', default={})

# Handlers added by the last setup_logging() call
_installed: List[logging.Handler] = []

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[1;31m',
}
RESET = '\033[0m'


class ContextFormatter(logging.Formatter):
    """Human or JSON-lines records with the current render context attached."""

    def __init__(self, json_lines: bool = False, color: bool = False):
        super().__init__()
        self.json_lines = json_lines
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        if self.json_lines:
            payload = {
                't': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                'lvl': record.levelname,
                'name': record.name,
                'msg': record.getMessage(),
                **context,
            }
            if record.exc_info:
                payload['exc'] = self.formatException(record.exc_info)
            return jsonlib.dumps(payload, default=str)

        stamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]
        level = f"{record.levelname:<8}"
        if self.color:
            level = LEVEL_COLORS.get(record.levelname, '') + level + RESET
        ctx = " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]" if context else ""
        line = f"{stamp} {level} {record.name}{ctx} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure the root logger for a render run.

    Calling it again replaces the handlers installed by the previous call,
    so records are never duplicated. Python warnings are routed to logging.

    Parameters
    ----------
    log_level : str
        Level name, case-insensitive
    log_file : str, optional
        Also append records to this file (parents created)
    json : bool
        JSON lines instead of the human format
    color : bool
        Color level names on stderr when it is a TTY
    to_stderr : bool
        Attach a stderr handler
    context : dict, optional
        Fields pushed onto the log context (e.g., {"app": "render"})

    Returns
    -------
    List[logging.Handler]
        Handlers now attached to the root logger

    Raises
    ------
    ValueError
        If log_level is not a logging level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter(json, color and sys.stderr.isatty()))
        _installed.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(ContextFormatter(json))
        _installed.append(file_handler)

    for handler in _installed:
        root.addHandler(handler)

    if context:
        push_context(**context)
    logging.captureWarnings(True)
    return list(_installed)


def push_context(**fields) -> None:
    """Attach fields to every subsequent record."""
    _context_var.set({**_context_var.get(), **fields})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop the given fields, or all of them when keys is None."""
    if keys is None:
        _context_var.set({})
        return
    _context_var.set({k: v for k, v in _context_var.get().items() if k not in keys})


def get_context() -> Dict[str, Any]:
    return dict(_context_var.get())


def install_excepthook() -> None:
    """Log uncaught exceptions at CRITICAL; Ctrl+C keeps the default hook."""
    def hook(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger("render").critical(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = hook
