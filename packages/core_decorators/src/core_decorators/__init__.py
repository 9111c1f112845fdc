"""
Validation + enter/exit logging decorators for service operations.

    from core_decorators import decorate, configure

    def add(a, b):
        return a + b
    add.schema = {"a": int, "b": int}

    CalcService = {"add": add}
    decorate(CalcService, "CalcService")
    CalcService["add"]("1", "2")   # → 3, logs ENTER/EXIT with a shared id
"""
from core_validator import SchemaError, ValidationError

from .context import (
    DecoratorConfig,
    DecoratorContext,
    configure,
    default_context,
    default_logger_factory,
    reset_id,
)
from .arguments import introspect_params, resolve_params, to_named, to_positional
from .metadata import OperationMeta, operation
from .outcome import Deferred, Immediate, classify
from .serializer import sanitize, serialize
from .validation import validate
from .tracing import log
from .decorator import compose, decorate

__all__ = [
    "DecoratorConfig",
    "DecoratorContext",
    "Deferred",
    "Immediate",
    "OperationMeta",
    "SchemaError",
    "ValidationError",
    "classify",
    "compose",
    "configure",
    "decorate",
    "default_context",
    "default_logger_factory",
    "introspect_params",
    "log",
    "operation",
    "reset_id",
    "resolve_params",
    "sanitize",
    "serialize",
    "to_named",
    "to_positional",
    "validate",
]
