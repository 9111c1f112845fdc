import logging, sys, orjson, os
from typing import Any, Optional, Dict
import time
import contextvars

# ────────────────────────────────────────────────────────────
# Correlation-id binding
# ────────────────────────────────────────────────────────────
# The decorators allocate one integer id per invocation and bind it here
# while the wrapped operation runs, so records emitted *inside* the
# operation (or by nested helpers) carry the same id as its ENTER/EXIT pair.

_CORRELATION_ID: contextvars.ContextVar[Optional[int]] = \
    contextvars.ContextVar("_CORRELATION_ID", default=None)

def bind_correlation_id(correlation_id: Optional[int]) -> contextvars.Token:
    """Bind *correlation_id* into the local context; returns a reset token."""
    return _CORRELATION_ID.set(correlation_id)

def reset_correlation_id(token: contextvars.Token) -> None:
    """Restore the binding that was active before :func:`bind_correlation_id`."""
    try:
        _CORRELATION_ID.reset(token)
    except ValueError:
        # Token created in another context (e.g. a coroutine resumed elsewhere)
        _CORRELATION_ID.set(None)

def current_correlation_id() -> Optional[int]:
    """Return the currently bound correlation id (if any)."""
    return _CORRELATION_ID.get()


class _CorrelationFilter(logging.Filter):
    """Inject the bound correlation id as ``id`` into LogRecords that lack it."""
    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "id", None) is None:
            cid = _CORRELATION_ID.get()
            if cid is not None:
                record.id = cid
        return True

# Reserved LogRecord attributes we must not overwrite
_RESERVED: set[str] = {
    "name","msg","args","levelname","levelno",
    "pathname","filename","module","exc_info","exc_text","stack_info",
    "lineno","funcName","created","msecs","relativeCreated",
    "thread","threadName","processName","process","message","asctime",
    "taskName",
}

# Top‑level fields of the log envelope; everything else is nested under ``meta``
_TOP_LEVEL: set[str] = {
    "ts",
    "level",
    "service",
    "id",                 # per-invocation correlation id
    "error_code",
    "payload",            # serialized ENTER/EXIT payload
}

def _default(obj):
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", errors="ignore")
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    if isinstance(obj, BaseException):
        return {"error": obj.__class__.__name__, "message": str(obj)}
    return repr(obj)

class JsonFormatter(logging.Formatter):
    """Emit one structured JSON object per line.

    Top‑level keys follow the envelope above; everything else is nested under ``meta``.
    """

    def format(self, record: logging.LogRecord) -> str:
        # --- fixed top‑level fields -----------------------------------------
        base: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(getattr(record, "created", time.time()))),
            "level": record.levelname,
            "service": os.getenv("SERVICE_NAME", record.name),
            # Canonical event key (do not duplicate as `message`)
            "event": record.getMessage(),
        }

        meta: Dict[str, Any] = {}

        # ── merge structured extras ─────────────────────────────────────────
        for key, val in record.__dict__.items():
            if key in _RESERVED:
                continue  # skip LogRecord internals

            # keep allowed top‑level attrs flat; everything else → meta
            if key in _TOP_LEVEL:
                base[key] = val
            else:
                meta[key] = val

        msg_extra = record.__dict__.get("message_extra", None)
        if msg_extra is not None:
            base["message"] = msg_extra

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            base["exc_type"] = exc.__class__.__name__
            base["exc_message"] = str(exc)

        if meta:
            base["meta"] = meta

        return orjson.dumps(base, default=_default).decode("utf-8")

class StructuredLogger(logging.Logger):
    """
    A drop-in `logging.Logger` replacement that **accepts arbitrary keyword
    arguments** (e.g. `logger.debug("ENTER add:", id=3)`) and transparently
    merges them into the `extra` mapping.
    """

    def _log(                                   # noqa: PLR0913 – keep signature
        self,
        level: int,
        msg: str,
        args,
        exc_info=None,
        extra: Dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **kwargs: Any,
    ) -> None:
        if kwargs:                              # merge kw-args → extra-dict
            extra = {**(extra or {}), **kwargs}
        # Sanitize to avoid LogRecord collisions (e.g., "message")
        extra = _sanitize_extra(extra)
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel,
        )


class DynamicStdoutHandler(logging.StreamHandler):
    """
    Ensures every *emit* writes to **the current** `sys.stdout`.

    Unit tests (`redirect_stdout(...)`) replace `sys.stdout` *after* the logger
    has been instantiated; refreshing the stream on each call guarantees the
    log line is captured by the redirected buffer.
    """

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self.setStream(sys.stdout)                      # always up-to-date
        super().emit(record)


# Make the subclass the default for *new* loggers created after this import
logging.setLoggerClass(StructuredLogger)


def get_logger(name: str = "app", level: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    is_service_root = "." not in name  # only top-level names own handlers

    if is_service_root:
        # Attach a single JSON StreamHandler **once** for the service root.
        if not logger.handlers:
            handler = DynamicStdoutHandler()
            handler.setFormatter(JsonFormatter())
            logger.addHandler(handler)
        # Service roots terminate propagation to avoid double-emit at the root.
        logger.propagate = False
    else:
        # Leaf/module loggers never own handlers; let them bubble to the service root.
        if logger.handlers:  # scrub any accidental handlers to prevent duplication
            for h in list(logger.handlers):
                logger.removeHandler(h)
        logger.propagate = True

    logger.setLevel((level or os.getenv("SERVICE_LOG_LEVEL", "INFO")).upper())
    # Ensure the correlation filter is attached exactly once.
    if not any(isinstance(f, _CorrelationFilter) for f in getattr(logger, "filters", [])):
        logger.addFilter(_CorrelationFilter())
    return logger

def _sanitize_extra(extra: Dict[str, Any] | None) -> Dict[str, Any]:
    """
    Remove/rename keys in `extra` that would collide with LogRecord attributes.
    - `message` is remapped to `message_extra` to preserve content.
    - all other collisions are namespaced as `meta_<key>`.
    """
    if not extra:
        return {}
    safe: Dict[str, Any] = {}
    for k, v in extra.items():
        lk = str(k)
        # Flatten user-provided nested `meta` to avoid meta.meta
        if lk == "meta" and isinstance(v, dict):
            for mk, mv in v.items():
                # don't collide with LogRecord attrs
                mk_norm = str(mk)
                if mk_norm in _RESERVED:
                    safe[f"meta_{mk_norm}"] = mv
                else:
                    safe[mk_norm] = mv
            continue

        if lk in _RESERVED:
            if lk == "message":
                safe["message_extra"] = v
            else:
                safe[f"meta_{lk}"] = v
        else:
            safe[lk] = v
    return safe
