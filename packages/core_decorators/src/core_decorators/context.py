"""
Process-scoped decorator state.

A :class:`DecoratorContext` bundles the mutable configuration consulted by
the serializer and the composition root together with the correlation-id
counter. Wrappers hold a reference to their context and read
``context.config`` once per call, so :func:`configure` affects every call
made afterwards without re-decorating anything.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from core_config import (
    DEFAULT_DEPTH,
    DEFAULT_MAX_ARRAY_LENGTH,
    DEFAULT_REMOVE_FIELDS,
    Settings,
    get_settings,
)
from core_logging import get_logger

LoggerFactory = Callable[..., Any]

# camelCase option names accepted by configure() for parity with the
# documented option names.
_OPTION_ALIASES: Dict[str, str] = {
    "removeFields": "remove_fields",
    "maxArrayLength": "max_array_length",
    "loggerFactory": "logger_factory",
}


def default_logger_factory(name: str, config: "DecoratorConfig") -> logging.Logger:
    """One JSON logger per service.

    The logger is always opened at DEBUG; the wrappers consult
    ``config.debug`` on every call, so toggling it needs no re-decoration.
    """
    return get_logger(name, level="DEBUG")


class DecoratorConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True, arbitrary_types_allowed=True, extra="forbid")

    remove_fields: frozenset[str] = DEFAULT_REMOVE_FIELDS
    debug: bool = True
    depth: Optional[int] = Field(default=DEFAULT_DEPTH, ge=0)
    max_array_length: int = Field(default=DEFAULT_MAX_ARRAY_LENGTH, ge=0)
    logger_factory: LoggerFactory = default_logger_factory

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DecoratorConfig":
        s = settings or get_settings()
        return cls(
            remove_fields=s.decorator_remove_fields,
            debug=s.decorator_debug,
            depth=s.decorator_depth,
            max_array_length=s.decorator_max_array_length,
        )


class DecoratorContext:
    """Configuration plus the shared, monotonically increasing correlation counter."""

    def __init__(self, config: Optional[DecoratorConfig] = None) -> None:
        self.config: DecoratorConfig = config or DecoratorConfig.from_settings()
        self._seq = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._seq += 1
            return self._seq

    def reset_id(self) -> None:
        with self._lock:
            self._seq = 0

    def configure(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> DecoratorConfig:
        """Merge *options* into the current configuration (matching keys only)."""
        updates: Dict[str, Any] = {}
        for key, value in {**dict(options or {}), **kwargs}.items():
            attr = _OPTION_ALIASES.get(key, key)
            if attr not in DecoratorConfig.model_fields:
                raise TypeError(f"unknown decorator option: {key!r}")
            updates[attr] = value
        # Swap in a fully validated copy; calls already in flight keep the old one.
        self.config = DecoratorConfig.model_validate({**dict(self.config), **updates})
        return self.config

    def reset(self) -> None:
        self.config = DecoratorConfig.from_settings()
        self.reset_id()


default_context = DecoratorContext()


def configure(options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> DecoratorConfig:
    return default_context.configure(options, **kwargs)


def reset_id() -> None:
    default_context.reset_id()
