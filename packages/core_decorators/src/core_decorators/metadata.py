from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

from core_decorators.arguments import resolve_params


def _is_async(fn: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


@dataclass(frozen=True)
class OperationMeta:
    """Per-operation facts derived once at decoration time."""

    method_name: str
    params: Tuple[str, ...] = ()
    schema: Any = None
    remove_output: bool = False
    synchronous: bool = True

    @classmethod
    def from_callable(
        cls,
        fn: Callable[..., Any],
        *,
        name: Optional[str] = None,
        params: Optional[Sequence[str]] = None,
    ) -> "OperationMeta":
        declared_sync = getattr(fn, "synchronous", None)
        remove_output = getattr(fn, "remove_output", None)
        if remove_output is None:
            remove_output = getattr(fn, "removeOutput", False)
        return cls(
            method_name=name or getattr(fn, "method_name", None) or getattr(fn, "__name__", None) or type(fn).__name__,
            params=tuple(params) if params is not None else resolve_params(fn),
            schema=getattr(fn, "schema", None),
            remove_output=bool(remove_output),
            synchronous=bool(declared_sync) if declared_sync is not None else not _is_async(fn),
        )


def operation(
    *,
    params: Optional[Sequence[str]] = None,
    schema: Any = None,
    remove_output: bool = False,
    synchronous: Optional[bool] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Attach decoration metadata to a function::

        @operation(schema={"a": int, "b": int})
        def add(a, b):
            return a + b
    """
    def _mark(fn: Callable[..., Any]) -> Callable[..., Any]:
        if params is not None:
            fn.params = tuple(params)  # type: ignore[attr-defined]
        if schema is not None:
            fn.schema = schema  # type: ignore[attr-defined]
        if remove_output:
            fn.remove_output = True  # type: ignore[attr-defined]
        if synchronous is not None:
            fn.synchronous = synchronous  # type: ignore[attr-defined]
        return fn
    return _mark
