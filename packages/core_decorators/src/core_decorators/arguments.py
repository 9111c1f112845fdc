"""Positional ↔ named argument bridging for decorated operations."""
from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_MISSING = object()


def introspect_params(fn: Callable[..., Any]) -> Tuple[str, ...]:
    """Ordered positional parameter names of *fn* (``()`` when unavailable)."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return ()
    return tuple(p.name for p in sig.parameters.values() if p.kind in _POSITIONAL)


def resolve_params(fn: Callable[..., Any]) -> Tuple[str, ...]:
    """Declared ``fn.params`` when present, otherwise introspected names."""
    declared = getattr(fn, "params", None)
    if declared is None:
        return introspect_params(fn)
    if isinstance(declared, str):
        raise TypeError("params must be a sequence of names, not a string")
    params = tuple(str(p) for p in declared)
    if len(set(params)) != len(params):
        raise ValueError(f"duplicate parameter names: {params!r}")
    return params


def to_named(params: Sequence[str], args: Sequence[Any]) -> Dict[str, Any]:
    # zip() drops arguments beyond the declared parameters
    return dict(zip(params, args))


def to_positional(
    params: Sequence[str],
    named: Mapping[str, Any],
    extra: Sequence[Any] = (),
) -> List[Any]:
    """
    Rebuild a positional list from *named* in declared order.

    Trailing parameters absent from *named* are left off so the operation's
    own defaults apply; interior gaps become ``None``. *extra* (arguments
    beyond the declared count) is appended unchanged.
    """
    values = [named.get(p, _MISSING) for p in params]
    while values and values[-1] is _MISSING:
        values.pop()
    out = [None if v is _MISSING else v for v in values]
    out.extend(extra)
    return out


def merge_keywords(
    params: Sequence[str],
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
    """
    Move keyword arguments that name the next declared parameters into the
    positional tuple. Keywords that cannot be placed positionally are returned
    untouched.
    """
    if not kwargs:
        return tuple(args), {}
    merged = list(args)
    rest = dict(kwargs)
    for name in params[len(merged):]:
        if name not in rest:
            break
        merged.append(rest.pop(name))
    return tuple(merged), rest
