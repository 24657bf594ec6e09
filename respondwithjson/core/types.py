"""Type aliases for dynamic data structures used by the helpers.

This module centralizes type definitions for data that cannot be statically
typed, giving them a clear semantic meaning.
"""

# Mapping of serialized field name to declared type name
type FieldTypeMap = dict[str, str]
