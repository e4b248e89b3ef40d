"""Resolved column metadata for a destination table.

- SinkRecordField: one column's derived shape (name, schema, key flag)
- ResolvedFieldSet: the key / non-key partition of all columns, validated
  at construction so no column is silently dropped or duplicated
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sinkfields.contracts.enums import SchemaType
from sinkfields.contracts.errors import FieldSetInvariantError
from sinkfields.contracts.schema import ConnectSchema


@dataclass(frozen=True, slots=True)
class SinkRecordField:
    """A destination column derived from a record schema.

    Attributes:
        name: Column name
        schema: Schema the column's values follow
        is_primary_key: True if the column is part of the primary key
    """

    name: str
    schema: ConnectSchema
    is_primary_key: bool

    @property
    def schema_type(self) -> SchemaType:
        return self.schema.type

    @property
    def schema_name(self) -> str | None:
        """Logical type name (Decimal, Timestamp, ...), if any."""
        return self.schema.name

    @property
    def is_optional(self) -> bool:
        """Primary-key columns are never nullable, whatever the schema says."""
        return not self.is_primary_key and self.schema.optional

    @property
    def default_value(self) -> Any:
        return self.schema.default

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "type": self.schema_type.value,
            "logical_name": self.schema_name,
            "primary_key": self.is_primary_key,
            "optional": self.is_optional,
            "default": self.default_value,
        }


@dataclass(frozen=True, slots=True)
class ResolvedFieldSet:
    """Immutable mapping between a record's fields and table columns.

    Attributes:
        key_field_names: Primary-key columns in derivation order
        non_key_field_names: Remaining columns in value-schema order
        all_fields: Every column by name (exactly the union of the two above)
        key_field_names_in_key: FLATTEN mode only - key columns whose runtime
            value is read from the record key instead of the record value.
            None for every other mode.
    """

    key_field_names: tuple[str, ...]
    non_key_field_names: tuple[str, ...]
    all_fields: Mapping[str, SinkRecordField]
    key_field_names_in_key: tuple[str, ...] | None = None

    _key_names: frozenset[str] = field(init=False, default_factory=frozenset, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        """Validate the partition and freeze all_fields.

        Raises:
            FieldSetInvariantError: If counts disagree or a name is missing
                from all_fields
        """
        counts_match = len(self.key_field_names) + len(self.non_key_field_names) == len(self.all_fields)
        all_contained = all(name in self.all_fields for name in (*self.key_field_names, *self.non_key_field_names))
        if not counts_match or not all_contained:
            raise FieldSetInvariantError(
                f"Validation fail -- keyFieldNames:{list(self.key_field_names)} "
                f"nonKeyFieldNames:{list(self.non_key_field_names)} "
                f"allFields:{sorted(self.all_fields)}"
            )
        if self.key_field_names_in_key is not None:
            stray = [name for name in self.key_field_names_in_key if name not in self.key_field_names]
            if stray:
                raise FieldSetInvariantError(f"Validation fail -- keyFieldNamesInKey {stray} are not key fields")

        object.__setattr__(self, "all_fields", types.MappingProxyType(dict(self.all_fields)))
        object.__setattr__(self, "_key_names", frozenset(self.key_field_names))

    @property
    def key_fields(self) -> tuple[SinkRecordField, ...]:
        return tuple(self.all_fields[name] for name in self.key_field_names)

    @property
    def non_key_fields(self) -> tuple[SinkRecordField, ...]:
        return tuple(self.all_fields[name] for name in self.non_key_field_names)

    def is_key(self, name: str) -> bool:
        return name in self._key_names

    def is_key_sourced(self, name: str) -> bool:
        """True if the key column's value is read from the record key.

        Only meaningful for FLATTEN mode; always False otherwise.
        """
        return self.key_field_names_in_key is not None and name in self.key_field_names_in_key

    # all_fields is a mappingproxy (unhashable); names determine the fields
    def __hash__(self) -> int:
        return hash((self.key_field_names, self.non_key_field_names, self.key_field_names_in_key))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (columns in key-then-value order)."""
        return {
            "key_field_names": list(self.key_field_names),
            "key_field_names_in_key": None if self.key_field_names_in_key is None else list(self.key_field_names_in_key),
            "non_key_field_names": list(self.non_key_field_names),
            "fields": [f.to_dict() for f in (*self.key_fields, *self.non_key_fields)],
        }

    def __str__(self) -> str:
        return (
            "ResolvedFieldSet{"
            f"key_field_names={list(self.key_field_names)}, "
            f"key_field_names_in_key={self.key_field_names_in_key}, "
            f"non_key_field_names={list(self.non_key_field_names)}, "
            f"all_fields={list(self.all_fields)}"
            "}"
        )
