"""
ttoken.logging
--------------

Structured logging for the ledger and its tools:
- JSON or concise text formats
- Context-local fields via `contextvars` (trace_id, component, call, signer)
- Safe value coercion (bytes → 0x-hex, dataclasses → dicts)
- stdlib only, so it is usable from the lowest layers

Usage
-----
    from ttoken import logging as tlog

    tlog.configure(json=False, level="DEBUG")  # once at process start
    log = tlog.get_logger(__name__)

    with tlog.trace_scope():
        tlog.bind(component="relayer")
        log.info("call applied", extra={"op": "transfer"})

Environment
-----------
TTOKEN_LOG_FORMAT  json|text (default: text on a TTY, json otherwise)
TTOKEN_LOG_LEVEL   DEBUG|INFO|WARNING|ERROR (default: INFO)
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterator, Optional

# ----------------------------
# Context
# ----------------------------

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_TTOKEN_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = ("trace_id", "component", "call", "signer")

# LogRecord attributes that are not user extras.
_RESERVED = frozenset(
    (
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "taskName", "message", "asctime",
    )
)


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    """Merge fields into the active context."""
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce_value(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


def short_uuid() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def trace_scope(trace_id: Optional[str] = None) -> Iterator[str]:
    """
    Ensure a trace_id is present for the duration of the scope. Restores the
    prior context on exit.
    """
    prev = dict(_LOG_CONTEXT.get())
    tid = trace_id or short_uuid()
    try:
        bind(trace_id=tid)
        yield tid
    finally:
        _LOG_CONTEXT.set(prev)


# ----------------------------
# Formatters
# ----------------------------


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return "0x" + bytes(v).hex()
    if isinstance(v, (list, tuple)):
        return [_coerce_value(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _coerce_value(x) for k, x in v.items()}
    if is_dataclass(v) and not isinstance(v, type):
        return _coerce_value(asdict(v))
    return str(v)


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce_value(v)
        for k, v in record.__dict__.items()
        if not k.startswith("_") and k not in _RESERVED
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(context())
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, separators=(",", ":"), default=str)


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2026-01-05T12:34:56.789+00:00 | INFO  | ttoken.runtime.engine | trace_id=abc123 | op=transfer | call applied
    """

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        ctx_str = " ".join(f"{k}={ctx[k]}" for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None)
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items() if k not in ctx)

        line = f"{_utcnow_iso()} | {record.levelname:<5} | {record.name}"
        if ctx_str:
            line += f" | {ctx_str}"
        if extras:
            line += f" | {extras}"
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


# ----------------------------
# Public setup API
# ----------------------------


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int | None = None,
    stream: io.TextIOBase = sys.stderr,
) -> None:
    """
    Configure the ``ttoken`` logger tree.

    json=None picks TTOKEN_LOG_FORMAT, else JSON when `stream` is not a TTY.
    level=None picks TTOKEN_LOG_LEVEL, else INFO.
    """
    root = logging.getLogger("ttoken")
    lvl = _coerce_level(level if level is not None else os.environ.get("TTOKEN_LOG_LEVEL", "INFO"))
    root.setLevel(lvl)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setLevel(lvl)
    handler.setFormatter(JSONFormatter() if _decide_json(json, stream) else TextFormatter())
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "ttoken")


# ----------------------------
# Internals
# ----------------------------


_LEVEL_TO_INT = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return _LEVEL_TO_INT.get(level.strip().upper(), logging.INFO)


def _decide_json(json_flag: Optional[bool], stream: io.TextIOBase) -> bool:
    if json_flag is not None:
        return json_flag
    env = os.environ.get("TTOKEN_LOG_FORMAT", "").strip().lower()
    if env in ("json", "text"):
        return env == "json"
    try:
        return not stream.isatty()
    except (AttributeError, ValueError):
        return True


__all__ = [
    "bind",
    "unbind",
    "clear_context",
    "context",
    "trace_scope",
    "short_uuid",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "get_logger",
]
