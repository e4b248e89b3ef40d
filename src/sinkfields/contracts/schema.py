"""Record schema model for key and value payloads.

A record carries two payloads, a key and a value, each described by a
ConnectSchema. Scalar schemas (int64, string, ...) describe a single value;
struct schemas describe a record with ordered, named, typed sub-fields.

Schemas can be built in code:

    ConnectSchema.struct(
        ("id", INT64_SCHEMA),
        ("email", ConnectSchema(SchemaType.STRING, optional=True)),
    )

or parsed from the dict form used in YAML record descriptions:

    key_schema: int64
    value_schema:
      type: struct
      fields:
        - "id: int64"
        - "email: string?"      # Optional field
        - name: amount
          type: bytes
          logical: org.apache.kafka.connect.data.Decimal
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from sinkfields.contracts.enums import SchemaType

# Logical type names carried in ConnectSchema.name
DECIMAL_LOGICAL_NAME = "org.apache.kafka.connect.data.Decimal"
DATE_LOGICAL_NAME = "org.apache.kafka.connect.data.Date"
TIME_LOGICAL_NAME = "org.apache.kafka.connect.data.Time"
TIMESTAMP_LOGICAL_NAME = "org.apache.kafka.connect.data.Timestamp"

# Shorthand: "int64" or "string?" (trailing ? marks optional)
TYPE_SHORTHAND_PATTERN = re.compile(r"^(\w+)(\?)?$")

# Struct field shorthand: "field_name: type" or "field_name: type?"
FIELD_SHORTHAND_PATTERN = re.compile(r"^([^:\s]+):\s*(\w+)(\?)?$")

_SCHEMA_KEYS = frozenset({"type", "optional", "default", "name", "version", "doc", "fields", "keys", "values", "items"})


@dataclass(frozen=True, slots=True)
class SchemaField:
    """A named sub-field of a struct schema.

    Attributes:
        name: Field name as it appears in the payload
        index: Zero-based position in the struct's declared order
        schema: Schema of the field's value
    """

    name: str
    index: int
    schema: ConnectSchema


@dataclass(frozen=True, slots=True)
class ConnectSchema:
    """Immutable description of a payload or field shape.

    Attributes:
        type: Shape classification
        optional: True if the value may be null
        default: Default value, None if the schema declares none
        name: Logical type name (e.g. Decimal, Timestamp) or struct name
        version: Optional schema version
        doc: Optional documentation string
        fields: Ordered sub-fields, only for STRUCT
        key_schema: Key schema, only for MAP
        value_schema: Element schema for ARRAY, value schema for MAP
    """

    type: SchemaType
    optional: bool = False
    default: Any = None
    name: str | None = None
    version: int | None = None
    doc: str | None = None
    fields: tuple[SchemaField, ...] = ()
    key_schema: ConnectSchema | None = None
    value_schema: ConnectSchema | None = None

    _by_name: dict[str, SchemaField] = field(init=False, default_factory=dict, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        """Validate shape-specific attributes and index fields by name.

        Raises:
            TypeError: If type is not a SchemaType
            ValueError: If fields are given for a non-struct schema, or names repeat
        """
        if not isinstance(self.type, SchemaType):
            raise TypeError(f"ConnectSchema.type must be a SchemaType, got {type(self.type).__name__}")

        if self.fields and self.type is not SchemaType.STRUCT:
            raise ValueError(f"Only struct schemas have fields, got fields for type {self.type}")

        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate field names in struct schema: {', '.join(duplicates)}")

        object.__setattr__(self, "_by_name", {f.name: f for f in self.fields})

    @classmethod
    def struct(
        cls,
        *fields: tuple[str, ConnectSchema],
        optional: bool = False,
        name: str | None = None,
    ) -> ConnectSchema:
        """Build a struct schema from (name, schema) pairs in declared order."""
        return cls(
            type=SchemaType.STRUCT,
            optional=optional,
            name=name,
            fields=tuple(SchemaField(name=n, index=i, schema=s) for i, (n, s) in enumerate(fields)),
        )

    def field(self, name: str) -> SchemaField | None:
        """Get a struct sub-field by name.

        Returns:
            The SchemaField, or None if absent (always None for non-struct schemas)
        """
        return self._by_name.get(name)

    def field_names(self) -> tuple[str, ...]:
        """Sub-field names in declared order."""
        return tuple(f.name for f in self.fields)

    @property
    def is_struct(self) -> bool:
        return self.type is SchemaType.STRUCT

    @classmethod
    def from_dict(cls, spec: str | dict[str, Any]) -> ConnectSchema:
        """Parse a schema from its textual/YAML form.

        Args:
            spec: Either a type shorthand ("int64", "string?") or a dict with
                "type" plus optional "optional", "default", "name", "version",
                "doc", "fields" (struct), "items" (array), "keys"/"values" (map)

        Returns:
            Parsed ConnectSchema

        Raises:
            ValueError: If the spec is malformed or names an unknown type
        """
        if isinstance(spec, str):
            type_name, optional = _parse_type_shorthand(spec)
            return cls(type=type_name, optional=optional)

        if not isinstance(spec, dict):
            raise ValueError(f"Schema spec must be a string or dict, got {type(spec).__name__}")

        unknown = set(spec) - _SCHEMA_KEYS
        if unknown:
            raise ValueError(f"Unknown schema keys: {', '.join(sorted(unknown))}")
        if "type" not in spec:
            raise ValueError(f"Schema spec is missing 'type': {spec!r}")

        schema_type, optional = _parse_type_shorthand(spec["type"])
        if "optional" in spec:
            optional = bool(spec["optional"])

        fields: tuple[SchemaField, ...] = ()
        if "fields" in spec:
            raw_fields = spec["fields"]
            if not isinstance(raw_fields, list):
                raise ValueError(f"'fields' must be a list, got {type(raw_fields).__name__}")
            fields = tuple(_parse_field(entry, index) for index, entry in enumerate(raw_fields))

        key_schema = cls.from_dict(spec["keys"]) if "keys" in spec else None
        if "items" in spec and "values" in spec:
            raise ValueError("Schema spec cannot define both 'items' and 'values'")
        element = spec.get("items", spec.get("values"))
        value_schema = cls.from_dict(element) if element is not None else None

        return cls(
            type=schema_type,
            optional=optional,
            default=spec.get("default"),
            name=spec.get("name"),
            version=spec.get("version"),
            doc=spec.get("doc"),
            fields=fields,
            key_schema=key_schema,
            value_schema=value_schema,
        )


def _parse_type_shorthand(spec: Any) -> tuple[SchemaType, bool]:
    if not isinstance(spec, str):
        raise ValueError(f"Schema type must be a string, got {type(spec).__name__}")
    match = TYPE_SHORTHAND_PATTERN.match(spec.strip())
    if not match:
        raise ValueError(f"Invalid schema type '{spec}'. Expected a type name such as 'int64' or 'string?'")
    type_name, optional_marker = match.groups()
    try:
        schema_type = SchemaType(type_name.lower())
    except ValueError:
        supported = ", ".join(t.value for t in SchemaType)
        raise ValueError(f"Unknown schema type '{type_name}'. Supported types: {supported}") from None
    return schema_type, optional_marker is not None


def _parse_field(entry: Any, index: int) -> SchemaField:
    """Parse one struct field entry ("name: type?" string or dict)."""
    if isinstance(entry, str):
        match = FIELD_SHORTHAND_PATTERN.match(entry.strip())
        if not match:
            raise ValueError(f"Invalid field spec '{entry}'. Expected format: 'field_name: type' or 'field_name: type?'")
        name, type_name, optional_marker = match.groups()
        schema = ConnectSchema.from_dict(f"{type_name}{optional_marker or ''}")
        return SchemaField(name=name, index=index, schema=schema)

    if not isinstance(entry, dict):
        raise ValueError(f"fields[{index}] must be a string or dict, got {type(entry).__name__}")

    # "name" is the field name; a logical type name goes under "logical"
    entry = dict(entry)
    field_name = entry.pop("name", None)
    if "logical" in entry:
        entry["name"] = entry.pop("logical")
    if not isinstance(field_name, str) or not field_name:
        raise ValueError(f"fields[{index}] must have a non-empty 'name'")

    if "schema" in entry:
        if len(entry) != 1:
            raise ValueError(f"fields[{index}] ('{field_name}') mixes 'schema' with inline schema keys")
        schema = ConnectSchema.from_dict(entry["schema"])
    else:
        schema = ConnectSchema.from_dict(entry)
    return SchemaField(name=field_name, index=index, schema=schema)


@dataclass(frozen=True, slots=True)
class SchemaPair:
    """Key and value schemas of a record; either may be absent."""

    key_schema: ConnectSchema | None = None
    value_schema: ConnectSchema | None = None


STRING_SCHEMA = ConnectSchema(SchemaType.STRING)
INT32_SCHEMA = ConnectSchema(SchemaType.INT32)
INT64_SCHEMA = ConnectSchema(SchemaType.INT64)
