"""Error taxonomy for field set resolution.

Every user-correctable failure derives from FieldResolutionError and carries
the table name and the active primary-key mode, so operators can fix the
sink configuration from the message alone. Resolution errors abort the whole
record; nothing here is retried.

FieldSetInvariantError is NOT part of that hierarchy. It signals a defect in
a key strategy and must not be caught alongside configuration mistakes.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from sinkfields.contracts.enums import PrimaryKeyMode


class FieldResolutionError(Exception):
    """Base error for a record whose fields cannot be mapped to table columns.

    Attributes:
        table_name: Destination table being resolved
        pk_mode: Active primary-key mode (None if the mode itself is invalid)
    """

    def __init__(self, message: str, *, table_name: str, pk_mode: PrimaryKeyMode | str | None) -> None:
        super().__init__(message)
        self.table_name = table_name
        self.pk_mode = pk_mode


class ConfigurationError(FieldResolutionError):
    """Primary-key configuration is invalid for this table or record shape."""

    pass


class SchemaShapeError(FieldResolutionError):
    """A payload or field schema has a shape the active mode cannot use."""

    pass


class MissingPayloadError(FieldResolutionError):
    """The key or value payload required by the active mode is absent."""

    def __init__(
        self,
        *,
        table_name: str,
        pk_mode: PrimaryKeyMode,
        payload: Literal["key", "value"],
    ) -> None:
        super().__init__(
            f"PK mode for table '{table_name}' is {pk_mode}, but record {payload} schema is missing",
            table_name=table_name,
            pk_mode=pk_mode,
        )
        self.payload = payload


class MissingFieldError(FieldResolutionError):
    """A configured or header-referenced field is absent from a schema.

    Attributes:
        field_name: The field that could not be found
        payload: Which schema was searched ("key" or "value")
        available: Field names the schema does declare
    """

    def __init__(
        self,
        *,
        table_name: str,
        pk_mode: PrimaryKeyMode,
        field_name: str,
        payload: Literal["key", "value"],
        configured: Iterable[str] | str,
        available: Iterable[str],
    ) -> None:
        configured_repr = configured if isinstance(configured, str) else list(configured)
        super().__init__(
            f"PK mode for table '{table_name}' is {pk_mode} with configured PK fields {configured_repr}, "
            f"but record {payload} schema does not contain field: {field_name}",
            table_name=table_name,
            pk_mode=pk_mode,
        )
        self.field_name = field_name
        self.payload = payload
        self.available = tuple(available)


class EmptyFieldSetError(FieldResolutionError):
    """Resolution produced no columns; a table needs at least one."""

    def __init__(self, *, table_name: str, pk_mode: PrimaryKeyMode) -> None:
        super().__init__(
            f"No fields found using key and value schemas for table: {table_name} (PK mode {pk_mode})",
            table_name=table_name,
            pk_mode=pk_mode,
        )


class FieldSetInvariantError(RuntimeError):
    """Key and non-key partitions disagree with the all-fields mapping.

    Raised by ResolvedFieldSet construction. Indicates a bug in a key
    strategy or in non-key extraction, never bad user input.
    """

    pass
