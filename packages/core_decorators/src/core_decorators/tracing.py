"""
Logging wrapper: ENTER/EXIT records around every invocation.

Each call gets the next correlation id from its :class:`DecoratorContext`.
Records are emitted through the logger's ``debug``/``error`` channels with the
id and the serialized payload in ``extra``::

    DEBUG  "ENTER add:"   extra={"id": 7, "payload": "{'a': 1, 'b': 2}"}
    DEBUG  " EXIT add:"   extra={"id": 7, "payload": "3"}
    ERROR  "ERROR add:"   extra={"id": 7, "error_code": "operation_failed"}, exc_info=...

Awaitable results (coroutine functions, or plain functions returning an
awaitable) are settled before the EXIT/ERROR record is written.
"""
from __future__ import annotations

import functools
from typing import Any, Callable, Optional

from core_config import EMPTY_INPUT, REMOVED_MARKER
from core_logging import ErrorCode, bind_correlation_id, reset_correlation_id
from core_validator import ValidationError
from core_decorators.arguments import merge_keywords, to_named
from core_decorators.context import DecoratorConfig, DecoratorContext, default_context
from core_decorators.metadata import OperationMeta
from core_decorators.outcome import Deferred, Outcome, classify
from core_decorators.serializer import serialize


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, ValidationError):
        return ErrorCode.validation_failed.value
    return ErrorCode.operation_failed.value


def _emit(channel: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    try:
        channel(*args, **kwargs)
    except Exception:
        # Never let logging break the call
        pass


def log(
    method: Callable[..., Any],
    logger: Any,
    meta: Optional[OperationMeta] = None,
    context: Optional[DecoratorContext] = None,
) -> Callable[..., Any]:
    meta = meta or OperationMeta.from_callable(method)
    ctx = context or default_context
    name = meta.method_name

    def _format_input(cfg: DecoratorConfig, args: tuple, kwargs: dict) -> str:
        if not meta.params:
            return EMPTY_INPUT
        merged, _ = merge_keywords(meta.params, args, kwargs)
        return serialize(to_named(meta.params, merged), cfg)

    def _enter(args: tuple, kwargs: dict) -> tuple[DecoratorConfig, int, Optional[str]]:
        cfg = ctx.config
        cid = ctx.next_id()
        formatted = None
        if cfg.debug:
            formatted = _format_input(cfg, args, kwargs)
            _emit(logger.debug, "ENTER %s:", name, extra={"id": cid, "payload": formatted})
        return cfg, cid, formatted

    def _exit(cfg: DecoratorConfig, cid: int, output: Any) -> Any:
        if cfg.debug:
            payload = REMOVED_MARKER if meta.remove_output else serialize(output, cfg)
            _emit(logger.debug, " EXIT %s:", name, extra={"id": cid, "payload": payload})
        return output

    def _fail_now(cid: int, exc: Exception) -> None:
        _emit(logger.error, "ERROR %s:", name, exc_info=exc,
              extra={"id": cid, "error_code": _error_code(exc)})

    def _fail_deferred(cfg: DecoratorConfig, cid: int, formatted: Optional[str],
                       args: tuple, kwargs: dict, exc: Exception) -> None:
        if formatted is None:
            formatted = _format_input(cfg, args, kwargs)
        _emit(logger.error, "ERROR %s: %s", name, formatted, exc_info=exc,
              extra={"id": cid, "error_code": _error_code(exc)})

    async def _settle(cfg: DecoratorConfig, cid: int, formatted: Optional[str],
                      args: tuple, kwargs: dict, outcome: Outcome) -> Any:
        token = bind_correlation_id(cid)
        try:
            value = await outcome.awaitable if isinstance(outcome, Deferred) else outcome.value
        except Exception as exc:
            _fail_deferred(cfg, cid, formatted, args, kwargs, exc)
            raise
        finally:
            reset_correlation_id(token)
        return _exit(cfg, cid, value)

    if not meta.synchronous:
        @functools.wraps(method)
        async def _logged_async(*args: Any, **kwargs: Any) -> Any:
            cfg, cid, formatted = _enter(args, kwargs)
            token = bind_correlation_id(cid)
            try:
                outcome = classify(method(*args, **kwargs))
            except Exception as exc:
                _fail_deferred(cfg, cid, formatted, args, kwargs, exc)
                raise
            finally:
                reset_correlation_id(token)
            return await _settle(cfg, cid, formatted, args, kwargs, outcome)
        return _logged_async

    @functools.wraps(method)
    def _logged(*args: Any, **kwargs: Any) -> Any:
        cfg, cid, formatted = _enter(args, kwargs)
        token = bind_correlation_id(cid)
        try:
            outcome = classify(method(*args, **kwargs))
        except Exception as exc:
            _fail_now(cid, exc)
            raise
        finally:
            reset_correlation_id(token)
        if isinstance(outcome, Deferred):
            return _settle(cfg, cid, formatted, args, kwargs, outcome)
        return _exit(cfg, cid, outcome.value)
    return _logged
