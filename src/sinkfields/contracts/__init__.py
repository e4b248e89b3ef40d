"""Shared contracts for cross-boundary data types.

Record schema and header models, resolved field metadata, enums and the
error taxonomy. This package is a LEAF MODULE with no outbound dependencies
to core/ or resolution/.

Import patterns:
    from sinkfields.contracts import ConnectSchema, Headers, PrimaryKeyMode
    from sinkfields.contracts import ResolvedFieldSet, FieldResolutionError
"""

from sinkfields.contracts.enums import InsertMode, PrimaryKeyMode, SchemaType
from sinkfields.contracts.errors import (
    ConfigurationError,
    EmptyFieldSetError,
    FieldResolutionError,
    FieldSetInvariantError,
    MissingFieldError,
    MissingPayloadError,
    SchemaShapeError,
)
from sinkfields.contracts.fields import ResolvedFieldSet, SinkRecordField
from sinkfields.contracts.headers import EMPTY_HEADERS, Header, Headers
from sinkfields.contracts.schema import (
    INT32_SCHEMA,
    INT64_SCHEMA,
    STRING_SCHEMA,
    ConnectSchema,
    SchemaField,
    SchemaPair,
)

__all__ = [
    "EMPTY_HEADERS",
    "INT32_SCHEMA",
    "INT64_SCHEMA",
    "STRING_SCHEMA",
    "ConfigurationError",
    "ConnectSchema",
    "EmptyFieldSetError",
    "FieldResolutionError",
    "FieldSetInvariantError",
    "Header",
    "Headers",
    "InsertMode",
    "MissingFieldError",
    "MissingPayloadError",
    "PrimaryKeyMode",
    "ResolvedFieldSet",
    "SchemaField",
    "SchemaPair",
    "SchemaShapeError",
    "SchemaType",
    "SinkRecordField",
]
