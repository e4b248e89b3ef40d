"""FLATTEN primary-key strategy.

FLATTEN reads the record headers as a name-translation table. Each header
maps a source identifier (header key) to a destination column (header
value). Which payload the key columns come from depends on the record:

    value present? | delete_enabled? | insert_mode | branch
    ---------------+-----------------+-------------+--------------
    no             | yes             | any         | KEY_SOURCED
    no             | no              | upsert      | KEY_SOURCED
    no             | no              | other       | VALUE_SOURCED
    yes            | any             | any         | VALUE_SOURCED

VALUE_SOURCED with no value schema fails with MissingPayloadError, so a
tombstone is only resolvable when deletes or upserts can use its key.

KEY_SOURCED:
    Primitive key: exactly one header; its value names the single key
    column, typed as the key schema.
    Struct key: every header key names a key field; the header value is the
    column name, typed as that key field.
    All key columns are read from the record key.

VALUE_SOURCED:
    Every header value names a value field, which becomes a key column typed
    from the value schema. The column is also read from the record key when
    the key schema is a struct with a field named by the header key, or when
    the key schema is not a struct and the header key ends with ".key".
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from enum import StrEnum

from sinkfields.contracts.enums import InsertMode, PrimaryKeyMode
from sinkfields.contracts.errors import ConfigurationError, MissingFieldError, MissingPayloadError
from sinkfields.contracts.fields import SinkRecordField
from sinkfields.contracts.headers import Header
from sinkfields.contracts.schema import ConnectSchema
from sinkfields.resolution.strategies import KeyDerivationInput, PartialKeyResult, shape_error

# Header-key suffix marking a reference to the record key when the key schema
# is not a struct (e.g. "customer.key" -> "customer_id")
KEY_REFERENCE_SUFFIX = ".key"


class FlattenBranch(StrEnum):
    """Where FLATTEN key columns are sourced from."""

    KEY_SOURCED = "key_sourced"
    VALUE_SOURCED = "value_sourced"


# (value_present, delete_enabled, is_upsert) -> branch
FLATTEN_BRANCH_TABLE: Mapping[tuple[bool, bool, bool], FlattenBranch] = types.MappingProxyType(
    {
        (False, True, True): FlattenBranch.KEY_SOURCED,
        (False, True, False): FlattenBranch.KEY_SOURCED,
        (False, False, True): FlattenBranch.KEY_SOURCED,
        (False, False, False): FlattenBranch.VALUE_SOURCED,
        (True, True, True): FlattenBranch.VALUE_SOURCED,
        (True, True, False): FlattenBranch.VALUE_SOURCED,
        (True, False, True): FlattenBranch.VALUE_SOURCED,
        (True, False, False): FlattenBranch.VALUE_SOURCED,
    }
)


def select_flatten_branch(*, value_present: bool, delete_enabled: bool, insert_mode: InsertMode) -> FlattenBranch:
    """Pick the FLATTEN branch for a record."""
    return FLATTEN_BRANCH_TABLE[(value_present, delete_enabled, insert_mode is InsertMode.UPSERT)]


class FlattenStrategy:
    """Key columns named by record headers (see module docstring)."""

    mode = PrimaryKeyMode.FLATTEN

    def derive_key_fields(self, request: KeyDerivationInput) -> PartialKeyResult:
        branch = select_flatten_branch(
            value_present=request.value_schema is not None,
            delete_enabled=request.delete_enabled,
            insert_mode=request.insert_mode,
        )
        if branch is FlattenBranch.KEY_SOURCED:
            return self._from_key(request)
        return self._from_value(request)

    def _from_key(self, request: KeyDerivationInput) -> PartialKeyResult:
        key_schema = request.key_schema
        if key_schema is None:
            raise MissingPayloadError(table_name=request.table_name, pk_mode=self.mode, payload="key")

        headers = request.headers
        if key_schema.type.is_primitive:
            if len(headers) != 1:
                raise ConfigurationError(
                    f"PK mode for table '{request.table_name}' is {self.mode}: need exactly one PK header defined "
                    f"since the key schema for records is a primitive type ({key_schema.type}), "
                    f"defined headers are: {headers}",
                    table_name=request.table_name,
                    pk_mode=self.mode,
                )
            (header,) = headers
            column = _column_name(request, header)
            return PartialKeyResult(
                key_fields=(SinkRecordField(name=column, schema=key_schema, is_primary_key=True),),
                key_field_names_in_key=(column,),
            )

        if key_schema.is_struct:
            fields: dict[str, SinkRecordField] = {}
            for header in headers:
                key_field = key_schema.field(header.key)
                if key_field is None:
                    raise MissingFieldError(
                        table_name=request.table_name,
                        pk_mode=self.mode,
                        field_name=header.key,
                        payload="key",
                        configured=str(headers),
                        available=key_schema.field_names(),
                    )
                column = _column_name(request, header)
                fields.setdefault(column, SinkRecordField(name=column, schema=key_field.schema, is_primary_key=True))
            return PartialKeyResult(key_fields=tuple(fields.values()), key_field_names_in_key=tuple(fields))

        raise shape_error(request, self.mode, key_schema)

    def _from_value(self, request: KeyDerivationInput) -> PartialKeyResult:
        value_schema = request.value_schema
        if value_schema is None:
            raise MissingPayloadError(table_name=request.table_name, pk_mode=self.mode, payload="value")

        key_schema = request.key_schema
        fields: dict[str, SinkRecordField] = {}
        in_key: dict[str, None] = {}
        for header in request.headers:
            column = _column_name(request, header)
            value_field = value_schema.field(column)
            if value_field is None:
                raise MissingFieldError(
                    table_name=request.table_name,
                    pk_mode=self.mode,
                    field_name=column,
                    payload="value",
                    configured=column,
                    available=value_schema.field_names(),
                )
            fields.setdefault(column, SinkRecordField(name=column, schema=value_field.schema, is_primary_key=True))
            if key_schema is not None and _references_key(key_schema, header.key):
                in_key[column] = None

        return PartialKeyResult(key_fields=tuple(fields.values()), key_field_names_in_key=tuple(in_key))


def _references_key(key_schema: ConnectSchema, header_key: str) -> bool:
    if key_schema.is_struct:
        return key_schema.field(header_key) is not None
    return header_key.endswith(KEY_REFERENCE_SUFFIX)


def _column_name(request: KeyDerivationInput, header: Header) -> str:
    try:
        return header.value_as_str()
    except UnicodeDecodeError as e:
        raise ConfigurationError(
            f"PK mode for table '{request.table_name}' is {PrimaryKeyMode.FLATTEN}: value of header '{header.key}' "
            f"is not valid UTF-8 ({e.reason} at byte {e.start}), so it cannot name a column",
            table_name=request.table_name,
            pk_mode=PrimaryKeyMode.FLATTEN,
        ) from e
