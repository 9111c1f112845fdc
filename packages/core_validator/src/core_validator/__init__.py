"""
Public API for the core_validator package.

Schema engine used by the decorators: named-argument mappings in,
normalized mappings (or a ValidationError) out.
"""

from .validator import (  # noqa: F401
    CompiledSchema,
    SchemaError,
    ValidationError,
    attempt,
    compile_schema,
)

__all__ = [
    "CompiledSchema",
    "SchemaError",
    "ValidationError",
    "attempt",
    "compile_schema",
]
