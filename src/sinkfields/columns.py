"""SQLAlchemy column metadata for a resolved field set.

Builds unbound sqlalchemy Column objects (key columns first, in key order,
then non-key columns) that a sink can attach to a Table for DDL. Nothing here
touches a database or emits SQL.
"""

from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    Double,
    Float,
    Integer,
    LargeBinary,
    Numeric,
    SmallInteger,
    Text,
    Time,
)
from sqlalchemy.types import TypeEngine

from sinkfields.contracts.enums import SchemaType
from sinkfields.contracts.errors import SchemaShapeError
from sinkfields.contracts.fields import ResolvedFieldSet, SinkRecordField
from sinkfields.contracts.schema import (
    DATE_LOGICAL_NAME,
    DECIMAL_LOGICAL_NAME,
    TIME_LOGICAL_NAME,
    TIMESTAMP_LOGICAL_NAME,
    ConnectSchema,
)

# Text (not String) for strings: String() without a length is rejected or
# truncated by some backends (MySQL, MSSQL).
SCHEMA_TYPE_TO_SQLALCHEMY: dict[SchemaType, type[TypeEngine[Any]]] = {
    SchemaType.INT8: SmallInteger,
    SchemaType.INT16: SmallInteger,
    SchemaType.INT32: Integer,
    SchemaType.INT64: BigInteger,
    SchemaType.FLOAT32: Float,
    SchemaType.FLOAT64: Double,
    SchemaType.BOOLEAN: Boolean,
    SchemaType.STRING: Text,
    SchemaType.BYTES: LargeBinary,
}

# Logical types override the physical type
LOGICAL_NAME_TO_SQLALCHEMY: dict[str, type[TypeEngine[Any]]] = {
    DECIMAL_LOGICAL_NAME: Numeric,
    DATE_LOGICAL_NAME: Date,
    TIME_LOGICAL_NAME: Time,
    TIMESTAMP_LOGICAL_NAME: DateTime,
}


def column_type(schema: ConnectSchema) -> type[TypeEngine[Any]]:
    """Map a field schema to a SQLAlchemy column type.

    Raises:
        KeyError: If the schema type has no column representation
            (struct, array, map)
    """
    if schema.name is not None and schema.name in LOGICAL_NAME_TO_SQLALCHEMY:
        return LOGICAL_NAME_TO_SQLALCHEMY[schema.name]
    return SCHEMA_TYPE_TO_SQLALCHEMY[schema.type]


def to_column(field: SinkRecordField, *, table_name: str = "") -> Column[Any]:
    """Build the Column for one resolved field.

    Raises:
        SchemaShapeError: If the field is a struct, array or map
    """
    try:
        sql_type = column_type(field.schema)
    except KeyError:
        raise SchemaShapeError(
            f"Field '{field.name}' of table '{table_name}' has type {field.schema_type}, which has no column representation",
            table_name=table_name,
            pk_mode=None,
        ) from None

    kwargs: dict[str, Any] = {}
    if field.default_value is not None:
        kwargs["default"] = field.default_value
    return Column(
        field.name,
        sql_type,
        primary_key=field.is_primary_key,
        nullable=field.is_optional,
        **kwargs,
    )


def to_columns(field_set: ResolvedFieldSet, *, table_name: str = "") -> list[Column[Any]]:
    """Build Columns for every resolved field, key columns first."""
    return [to_column(f, table_name=table_name) for f in (*field_set.key_fields, *field_set.non_key_fields)]
