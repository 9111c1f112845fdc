from .logger import (
    get_logger,
    bind_correlation_id,
    reset_correlation_id,
    current_correlation_id,
    JsonFormatter,
    StructuredLogger,
)
from .error_codes import ErrorCode

__all__ = [
    "get_logger",
    "bind_correlation_id",
    "reset_correlation_id",
    "current_correlation_id",
    "JsonFormatter",
    "StructuredLogger",
    "ErrorCode",
]
