"""Core constants: accessor naming and shared literal values."""

# Column holding the human-readable name in a lookup table, unless overridden.
DEFAULT_LOOKUP_FIELD_NAME = "name"

# Generated accessor names: <relation>, set_<relation>, is_<relation>
SETTER_PREFIX = "set_"
CHECKER_PREFIX = "is_"

API_V1_PREFIX = "/api/v1"
