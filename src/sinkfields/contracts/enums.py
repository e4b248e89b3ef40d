"""Modes and type classifications used across subsystem boundaries.

All enums are StrEnum so they round-trip through YAML configuration and
JSON output without custom encoders.
"""

from enum import StrEnum


class PrimaryKeyMode(StrEnum):
    """Strategy used to derive the primary-key columns of a destination table.

    Values:
        NONE: No primary key
        KAFKA: Topic, partition and offset coordinates of the record
        RECORD_KEY: Fields of the record key
        RECORD_VALUE: Fields of the record value
        FLATTEN: Columns named by the record headers, read from key or value
    """

    NONE = "none"
    KAFKA = "kafka"
    RECORD_KEY = "record_key"
    RECORD_VALUE = "record_value"
    FLATTEN = "flatten"


class InsertMode(StrEnum):
    """Write statement used by the sink for incoming records."""

    INSERT = "insert"
    UPSERT = "upsert"
    UPDATE = "update"


class SchemaType(StrEnum):
    """Shape of a record payload or of one of its fields."""

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    MAP = "map"
    STRUCT = "struct"

    @property
    def is_primitive(self) -> bool:
        """True for scalar types that map onto a single column."""
        return self not in _NON_PRIMITIVE


_NON_PRIMITIVE = frozenset({SchemaType.ARRAY, SchemaType.MAP, SchemaType.STRUCT})
