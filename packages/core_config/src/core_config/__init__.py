from .settings import Settings, get_settings
from .constants import (
    CIRCULAR_MARKER,
    DEFAULT_DEPTH,
    DEFAULT_MAX_ARRAY_LENGTH,
    DEFAULT_REMOVE_FIELDS,
    EMPTY_INPUT,
    REMOVED_MARKER,
    RENDER_WIDTH,
)

__all__ = [
    "Settings",
    "get_settings",
    "CIRCULAR_MARKER",
    "DEFAULT_DEPTH",
    "DEFAULT_MAX_ARRAY_LENGTH",
    "DEFAULT_REMOVE_FIELDS",
    "EMPTY_INPUT",
    "REMOVED_MARKER",
    "RENDER_WIDTH",
]
