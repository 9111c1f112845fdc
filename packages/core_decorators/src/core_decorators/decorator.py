"""
Composition root.

``decorate(service, "CalcService")`` replaces every operation of *service*
in place with ``log(validate(op))``. References to the undecorated callables
held elsewhere keep bypassing validation and logging.
"""
from __future__ import annotations

import inspect
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Iterator, Optional, Tuple

from core_decorators.context import DecoratorContext, default_context
from core_decorators.metadata import OperationMeta
from core_decorators.tracing import log
from core_decorators.validation import validate


def _operations(service: Any) -> Iterator[Tuple[str, Callable[..., Any]]]:
    if isinstance(service, Mapping):
        items = list(service.items())
        yield from ((str(k), v) for k, v in items if callable(v))
        return
    for name in dir(service):
        if name.startswith("_"):
            continue
        # Static lookup so properties are never evaluated
        static = inspect.getattr_static(service, name, None)
        if isinstance(static, (staticmethod, classmethod)) or inspect.isroutine(static):
            yield name, getattr(service, name)


def compose(
    method: Callable[..., Any],
    logger: Any,
    *,
    name: Optional[str] = None,
    context: Optional[DecoratorContext] = None,
) -> Callable[..., Any]:
    """Return ``log(validate(method))`` carrying its metadata for re-decoration."""
    meta = OperationMeta.from_callable(method, name=name)
    wrapped = log(validate(method, meta), logger, meta, context)
    wrapped.method_name = meta.method_name  # type: ignore[attr-defined]
    wrapped.params = meta.params  # type: ignore[attr-defined]
    wrapped.remove_output = meta.remove_output  # type: ignore[attr-defined]
    wrapped.synchronous = meta.synchronous  # type: ignore[attr-defined]
    return wrapped


def decorate(service: Any, service_name: str, *, context: Optional[DecoratorContext] = None) -> None:
    """
    Decorate every operation of *service* in place.

    *service* is a mutable mapping of name → callable, or any object whose
    public routines are replaced with ``setattr``. One logger is built per
    call through ``config.logger_factory(service_name, config)``.
    """
    if isinstance(service, Mapping) and not isinstance(service, MutableMapping):
        raise TypeError(f"cannot decorate read-only mapping {service_name!r} in place")
    ctx = context or default_context
    cfg = ctx.config
    logger = cfg.logger_factory(service_name, cfg)
    for name, method in list(_operations(service)):
        wrapped = compose(method, logger, name=name, context=ctx)
        if isinstance(service, MutableMapping):
            service[name] = wrapped
        else:
            setattr(service, name, wrapped)
