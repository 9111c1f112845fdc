"""Validation wrapper: normalize positional arguments through the schema engine."""
from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Optional

from core_validator import compile_schema
from core_decorators.arguments import merge_keywords, to_named, to_positional
from core_decorators.metadata import OperationMeta


def validate(method: Callable[..., Any], meta: Optional[OperationMeta] = None) -> Callable[..., Any]:
    """
    Wrap *method* so its arguments are validated and coerced by ``meta.schema``.

    Synchronous operations raise ``ValidationError`` at call time. For
    asynchronous operations the wrapper is a coroutine function, so the same
    error only surfaces when the result is awaited.
    """
    meta = meta or OperationMeta.from_callable(method)
    # Malformed schemas fail here, at decoration time, not on every call
    compiled = compile_schema(meta.schema, name=f"{meta.method_name}_args")
    params = meta.params

    def _normalize(args: tuple, kwargs: dict) -> tuple[list, dict]:
        if compiled.source is None:
            return list(args), kwargs
        args, kwargs = merge_keywords(params, args, kwargs)
        normalized = compiled.attempt(to_named(params, args))
        return to_positional(params, normalized, args[len(params):]), kwargs

    if not meta.synchronous:
        @functools.wraps(method)
        async def _validated_async(*args: Any, **kwargs: Any) -> Any:
            new_args, new_kwargs = _normalize(args, kwargs)
            result = method(*new_args, **new_kwargs)
            if inspect.isawaitable(result):
                return await result
            return result
        return _validated_async

    @functools.wraps(method)
    def _validated(*args: Any, **kwargs: Any) -> Any:
        new_args, new_kwargs = _normalize(args, kwargs)
        return method(*new_args, **new_kwargs)
    return _validated
