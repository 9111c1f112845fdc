"""
Cycle-safe, field-redacting, size-bounded rendering of arbitrary values.

``sanitize`` turns a runtime value into a JSON-like snapshot:

- containers already on the current traversal path → ``'[Circular]'``
- fields named in ``config.remove_fields`` → ``'<removed>'``
- a ``req`` field with a connection → ``{method, url, headers, remoteAddress, remotePort}``
- a ``res`` field with a status code → ``{statusCode, header}``
- sequences longer than ``config.max_array_length`` → ``'Array(<len>)'``

``serialize`` renders the snapshot with ``pprint`` honouring ``config.depth``
and never raises.
"""
from __future__ import annotations

import dataclasses
import datetime as _dt
import inspect
import pprint
import types
from collections import deque
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from core_config import CIRCULAR_MARKER, REMOVED_MARKER, RENDER_WIDTH
from core_logging import ErrorCode, get_logger
from core_decorators.context import DecoratorConfig, default_context

logger = get_logger("core_decorators")

_PRIMITIVES = (str, int, float, bool, type(None))
_SEQUENCES = (list, tuple, set, frozenset, deque)


def _lookup(obj: Any, *names: str) -> Any:
    """First non-missing value among *names*, read as mapping key or attribute."""
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        else:
            value = getattr(obj, name, None)
            if value is not None:
                return value
    return None


def _project_req(value: Any) -> Optional[dict]:
    connection = _lookup(value, "connection")
    if not connection:
        return None
    return {
        "method": _lookup(value, "method"),
        "url": _lookup(value, "url"),
        "headers": _lookup(value, "headers"),
        "remoteAddress": _lookup(connection, "remoteAddress", "remote_address"),
        "remotePort": _lookup(connection, "remotePort", "remote_port"),
    }


def _project_res(value: Any) -> Optional[dict]:
    status = _lookup(value, "statusCode", "status_code")
    if isinstance(status, bool) or not isinstance(status, int) or not status:
        return None
    return {"statusCode": status, "header": _lookup(value, "_header", "_headers")}


def _elided(value: Any) -> Any:
    """Stand-in for a container below the render depth; pprint shows it as {...} or [...]."""
    if isinstance(value, Mapping):
        return {"...": "..."} if value else {}
    if isinstance(value, _SEQUENCES):
        return ["..."] if value else []
    if isinstance(value, BaseModel) or dataclasses.is_dataclass(value) or isinstance(getattr(value, "__dict__", None), dict):
        return {"...": "..."}
    return repr(value)


class _Sanitizer:
    __slots__ = ("remove_fields", "max_array_length", "levels", "_path")

    def __init__(self, config: DecoratorConfig) -> None:
        self.remove_fields = config.remove_fields
        self.max_array_length = config.max_array_length
        # Container levels kept: the top level plus ``depth`` nested ones
        self.levels = None if config.depth is None else config.depth + 1
        self._path: set[int] = set()

    def field(self, name: str, value: Any) -> Any:
        if name in self.remove_fields:
            return REMOVED_MARKER
        if name == "req" and value is not None and not isinstance(value, _PRIMITIVES):
            projected = _project_req(value)
            if projected is not None:
                return self.value(projected)
        elif name == "res" and value is not None and not isinstance(value, _PRIMITIVES):
            projected = _project_res(value)
            if projected is not None:
                return self.value(projected)
        return self.value(value)

    def value(self, value: Any) -> Any:
        if isinstance(value, _PRIMITIVES):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).decode("utf-8", "replace")
        if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
            return value.isoformat()
        if isinstance(value, BaseException):
            return {"error": type(value).__name__, "message": str(value)}
        if isinstance(value, _SEQUENCES) and len(value) > self.max_array_length:
            return f"Array({len(value)})"
        if isinstance(value, (type, types.ModuleType)) or inspect.isroutine(value):
            return repr(value)

        if self.levels is not None and len(self._path) >= self.levels:
            return _elided(value)

        marker = id(value)
        if marker in self._path:
            return CIRCULAR_MARKER
        self._path.add(marker)
        try:
            if isinstance(value, Mapping):
                return {str(k): self.field(str(k), v) for k, v in value.items()}
            if isinstance(value, _SEQUENCES):
                return [self.value(v) for v in value]
            if isinstance(value, BaseModel):
                # Iterating a model yields (field, value) pairs without copying
                return {k: self.field(k, v) for k, v in value}
            if dataclasses.is_dataclass(value):
                return {f.name: self.field(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)}
            attrs = getattr(value, "__dict__", None)
            if isinstance(attrs, dict):
                return {k: self.field(k, v) for k, v in attrs.items() if not k.startswith("_")}
            return repr(value)
        finally:
            self._path.discard(marker)


def sanitize(value: Any, config: Optional[DecoratorConfig] = None) -> Any:
    """Return the sanitized snapshot of *value* (may raise on hostile objects)."""
    return _Sanitizer(config or default_context.config).value(value)


def _fallback(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__} object>"


def serialize(value: Any, config: Optional[DecoratorConfig] = None) -> str:
    """Human-readable rendering of *value* for log payloads. Never raises."""
    cfg = config or default_context.config
    try:
        snapshot = _Sanitizer(cfg).value(value)
        depth = None if cfg.depth is None else cfg.depth + 1
        return pprint.pformat(snapshot, depth=depth, width=RENDER_WIDTH, sort_dicts=False)
    except Exception as exc:
        logger.warning(
            "serializer.fallback",
            extra={
                "value_type": type(value).__name__,
                "error": type(exc).__name__,
                "error_code": ErrorCode.serialization_failed.value,
            },
        )
        return _fallback(value)
