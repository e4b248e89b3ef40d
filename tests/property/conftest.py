# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Usage:
    from tests.property.conftest import records

    @given(record=records())
    def test_partition(record: RecordInput) -> None:
        ...

For standardized @settings decorators, import from tests.property.settings.
"""

from __future__ import annotations

from dataclasses import dataclass

from hypothesis import strategies as st

from sinkfields.contracts import ConnectSchema, Headers, InsertMode, PrimaryKeyMode, SchemaType

# Small name pool so keys, values, headers and pk_fields collide often
FIELD_NAMES = ("id", "tenant", "order_id", "status", "amount", "note", "pk", "ref.key")

PRIMITIVE_TYPES = tuple(t for t in SchemaType if t.is_primitive)

field_names = st.sampled_from(FIELD_NAMES)

primitive_schemas = st.builds(
    ConnectSchema,
    type=st.sampled_from(PRIMITIVE_TYPES),
    optional=st.booleans(),
)


@st.composite
def struct_schemas(draw: st.DrawFn, *, min_size: int = 0) -> ConnectSchema:
    names = draw(st.lists(field_names, min_size=min_size, max_size=6, unique=True))
    return ConnectSchema.struct(*((name, draw(primitive_schemas)) for name in names))


key_schemas = st.none() | primitive_schemas | struct_schemas(min_size=1)
value_schemas = st.none() | struct_schemas()

# Header values as record headers carry them: str, UTF-8 bytes, or arbitrary
# (possibly undecodable) bytes
header_values = field_names | field_names.map(str.encode) | st.binary(max_size=4)

headers = st.builds(
    Headers.from_pairs,
    st.lists(st.tuples(field_names, header_values), max_size=3),
)


@dataclass(frozen=True)
class RecordInput:
    """One generated resolve_field_set() call."""

    pk_mode: PrimaryKeyMode
    key_schema: ConnectSchema | None
    value_schema: ConnectSchema | None
    configured_pk_fields: tuple[str, ...]
    fields_whitelist: frozenset[str]
    headers: Headers
    delete_enabled: bool
    insert_mode: InsertMode

    def kwargs(self) -> dict[str, object]:
        return {
            "pk_mode": self.pk_mode,
            "key_schema": self.key_schema,
            "value_schema": self.value_schema,
            "configured_pk_fields": self.configured_pk_fields,
            "fields_whitelist": self.fields_whitelist,
            "headers": self.headers,
            "delete_enabled": self.delete_enabled,
            "insert_mode": self.insert_mode,
        }


@st.composite
def records(draw: st.DrawFn, *, pk_modes: st.SearchStrategy[PrimaryKeyMode] | None = None) -> RecordInput:
    return RecordInput(
        pk_mode=draw(pk_modes if pk_modes is not None else st.sampled_from(PrimaryKeyMode)),
        key_schema=draw(key_schemas),
        value_schema=draw(value_schemas),
        configured_pk_fields=tuple(draw(st.lists(field_names, max_size=3, unique=True))),
        fields_whitelist=frozenset(draw(st.lists(field_names, max_size=3))),
        headers=draw(headers),
        delete_enabled=draw(st.booleans()),
        insert_mode=draw(st.sampled_from(InsertMode)),
    )
