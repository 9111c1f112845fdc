# Literal markers written into sanitized log payloads
REMOVED_MARKER = "<removed>"
CIRCULAR_MARKER = "[Circular]"
# Payload logged for operations that declare no parameters
EMPTY_INPUT = "{}"

# Field names redacted from every serialized payload unless reconfigured.
DEFAULT_REMOVE_FIELDS: frozenset[str] = frozenset({"password", "token", "accessToken"})

# Serialization bounds (overridable via core_config.Settings)
DEFAULT_DEPTH = 4
DEFAULT_MAX_ARRAY_LENGTH = 30

# pprint line width used when rendering snapshots
RENDER_WIDTH = 80
