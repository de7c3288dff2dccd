"""Type aliases for dynamic data flowing through actions.

Action payloads arrive from callers as loosely-shaped mappings and leave as
JSON-compatible values; these aliases name those shapes.
"""

from collections.abc import Mapping
from typing import Any

# JSON-compatible type that represents any valid JSON value
type JsonValue = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# Raw action input before it is checked against a field schema
type Payload = Mapping[str, Any]

# Serialized entity record returned inside a result envelope
type Record = dict[str, JsonValue]

# Context dictionary for logging additional information
type LogContext = dict[str, Any]
