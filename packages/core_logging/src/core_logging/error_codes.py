from enum import Enum

class ErrorCode(str, Enum):
    """
    Canonical error codes attached as ``error_code`` to ERROR/WARNING records
    emitted by the decorators.
    """
    validation_failed     = "validation_failed"
    operation_failed      = "operation_failed"
    serialization_failed  = "serialization_failed"
    invalid_schema        = "invalid_schema"

__all__ = ["ErrorCode"]
