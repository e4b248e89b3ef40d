"""Primary-key derivation strategies.

Each PrimaryKeyMode has exactly one strategy. A strategy is a pure function
of a KeyDerivationInput: it reads the schemas, configured field names and
headers, and returns an immutable PartialKeyResult holding the key columns
(all marked is_primary_key=True). Inconsistent input raises a
FieldResolutionError subclass and aborts the whole resolution.

Strategies:
- NoneStrategy: no key columns
- KafkaStrategy: topic / partition / offset coordinate columns
- RecordKeyStrategy: columns taken from the record key
- RecordValueStrategy: columns taken from the record value
- FlattenStrategy: header-named columns (see flatten.py)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from sinkfields.contracts.enums import InsertMode, PrimaryKeyMode
from sinkfields.contracts.errors import (
    ConfigurationError,
    MissingFieldError,
    MissingPayloadError,
    SchemaShapeError,
)
from sinkfields.contracts.fields import SinkRecordField
from sinkfields.contracts.headers import EMPTY_HEADERS, Headers
from sinkfields.contracts.schema import INT32_SCHEMA, INT64_SCHEMA, STRING_SCHEMA, ConnectSchema

# Column names used by KAFKA mode when no pk_fields are configured
DEFAULT_KAFKA_PK_NAMES: tuple[str, str, str] = ("__connect_topic", "__connect_partition", "__connect_offset")

# Column types of the KAFKA coordinates, in coordinate order
_KAFKA_COORDINATE_SCHEMAS: tuple[ConnectSchema, ConnectSchema, ConnectSchema] = (
    STRING_SCHEMA,
    INT32_SCHEMA,
    INT64_SCHEMA,
)


@dataclass(frozen=True, slots=True)
class KeyDerivationInput:
    """Everything a key strategy may read.

    Attributes:
        table_name: Destination table (for error messages)
        key_schema: Record key schema, None if the record has no key schema
        value_schema: Record value schema, None for tombstones / no schema
        configured_pk_fields: pk_fields from settings, in configured order
        headers: Record headers (FLATTEN only)
        delete_enabled: Whether null-value records are deletes (FLATTEN only)
        insert_mode: Sink write mode (FLATTEN only)
    """

    table_name: str
    key_schema: ConnectSchema | None = None
    value_schema: ConnectSchema | None = None
    configured_pk_fields: tuple[str, ...] = ()
    headers: Headers = EMPTY_HEADERS
    delete_enabled: bool = False
    insert_mode: InsertMode = InsertMode.INSERT


@dataclass(frozen=True, slots=True)
class PartialKeyResult:
    """Key columns produced by a strategy, in derivation order.

    Attributes:
        key_fields: Primary-key columns; names are unique
        key_field_names_in_key: FLATTEN only - key columns read from the
            record key. None for every other mode.
    """

    key_fields: tuple[SinkRecordField, ...] = ()
    key_field_names_in_key: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        names = self.key_field_names
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate key field names in partial result: {list(names)}")

    @property
    def key_field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.key_fields)


def key_fields_from_schema(schema: ConnectSchema, names: Iterable[str]) -> tuple[SinkRecordField, ...]:
    """Build key columns for names known to exist in a struct schema.

    Repeated names collapse to their first occurrence.
    """
    fields: list[SinkRecordField] = []
    for name in dict.fromkeys(names):
        schema_field = schema.field(name)
        if schema_field is None:
            raise KeyError(f"'{name}' not found in struct schema (caller must validate first)")
        fields.append(SinkRecordField(name=name, schema=schema_field.schema, is_primary_key=True))
    return tuple(fields)


def require_fields(
    schema: ConnectSchema,
    names: Iterable[str],
    *,
    request: KeyDerivationInput,
    pk_mode: PrimaryKeyMode,
    payload: Literal["key", "value"],
    configured: Iterable[str] | str,
) -> None:
    """Raise MissingFieldError for the first name the struct schema lacks."""
    for name in names:
        if schema.field(name) is None:
            raise MissingFieldError(
                table_name=request.table_name,
                pk_mode=pk_mode,
                field_name=name,
                payload=payload,
                configured=configured,
                available=schema.field_names(),
            )


def shape_error(request: KeyDerivationInput, pk_mode: PrimaryKeyMode, key_schema: ConnectSchema) -> SchemaShapeError:
    return SchemaShapeError(
        f"Key schema for table '{request.table_name}' (PK mode {pk_mode}) must be primitive type or Struct, "
        f"but is of type: {key_schema.type}",
        table_name=request.table_name,
        pk_mode=pk_mode,
    )


@runtime_checkable
class KeyStrategy(Protocol):
    """Protocol for primary-key derivation strategies."""

    mode: PrimaryKeyMode

    def derive_key_fields(self, request: KeyDerivationInput) -> PartialKeyResult:
        """Derive the primary-key columns for one record.

        Raises:
            FieldResolutionError: If the input is inconsistent with the mode
        """
        ...


class NoneStrategy:
    """No primary key: every value field is an ordinary column."""

    mode = PrimaryKeyMode.NONE

    def derive_key_fields(self, request: KeyDerivationInput) -> PartialKeyResult:
        return PartialKeyResult()


class KafkaStrategy:
    """Key on the record's topic, partition and offset.

    Either no pk_fields (the DEFAULT_KAFKA_PK_NAMES are used) or exactly
    three, naming the topic, partition and offset columns in that order.
    """

    mode = PrimaryKeyMode.KAFKA

    def derive_key_fields(self, request: KeyDerivationInput) -> PartialKeyResult:
        configured = request.configured_pk_fields
        if not configured:
            names: tuple[str, ...] = DEFAULT_KAFKA_PK_NAMES
        elif len(configured) == 3 and len(set(configured)) == 3:
            names = configured
        else:
            raise ConfigurationError(
                f"PK mode for table '{request.table_name}' is {self.mode} so there should either be no field names "
                f"defined for defaults {list(DEFAULT_KAFKA_PK_NAMES)} to be applicable, or exactly 3 distinct, "
                f"defined fields are: {list(configured)}",
                table_name=request.table_name,
                pk_mode=self.mode,
            )
        return PartialKeyResult(
            key_fields=tuple(
                SinkRecordField(name=name, schema=schema, is_primary_key=True)
                for name, schema in zip(names, _KAFKA_COORDINATE_SCHEMAS, strict=True)
            )
        )


class RecordKeyStrategy:
    """Key on the record key.

    Primitive key: exactly one pk_field names the single key column.
    Struct key: all key fields, or the configured subset in configured order.
    """

    mode = PrimaryKeyMode.RECORD_KEY

    def derive_key_fields(self, request: KeyDerivationInput) -> PartialKeyResult:
        key_schema = request.key_schema
        if key_schema is None:
            raise MissingPayloadError(table_name=request.table_name, pk_mode=self.mode, payload="key")

        configured = request.configured_pk_fields
        if key_schema.type.is_primitive:
            if len(configured) != 1:
                raise ConfigurationError(
                    f"PK mode for table '{request.table_name}' is {self.mode}: need exactly one PK column defined "
                    f"since the key schema for records is a primitive type ({key_schema.type}), "
                    f"defined columns are: {list(configured)}",
                    table_name=request.table_name,
                    pk_mode=self.mode,
                )
            return PartialKeyResult(key_fields=(SinkRecordField(name=configured[0], schema=key_schema, is_primary_key=True),))

        if key_schema.is_struct:
            if not configured:
                return PartialKeyResult(key_fields=key_fields_from_schema(key_schema, key_schema.field_names()))
            require_fields(key_schema, configured, request=request, pk_mode=self.mode, payload="key", configured=configured)
            return PartialKeyResult(key_fields=key_fields_from_schema(key_schema, configured))

        raise shape_error(request, self.mode, key_schema)


class RecordValueStrategy:
    """Key on fields of the record value: all of them, or the configured subset."""

    mode = PrimaryKeyMode.RECORD_VALUE

    def derive_key_fields(self, request: KeyDerivationInput) -> PartialKeyResult:
        value_schema = request.value_schema
        if value_schema is None:
            raise MissingPayloadError(table_name=request.table_name, pk_mode=self.mode, payload="value")

        configured = request.configured_pk_fields
        if not configured:
            return PartialKeyResult(key_fields=key_fields_from_schema(value_schema, value_schema.field_names()))
        require_fields(value_schema, configured, request=request, pk_mode=self.mode, payload="value", configured=configured)
        return PartialKeyResult(key_fields=key_fields_from_schema(value_schema, configured))

