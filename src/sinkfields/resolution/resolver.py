"""Field set resolution: the primary-key / column split for one record.

resolve_field_set() is the single entry algorithm:

1. Reject a value schema that is not a struct.
2. Dispatch to the key strategy for the primary-key mode.
3. Append every value field not already claimed as a key column (outside
   FLATTEN, also dropping fields absent from a non-empty whitelist).
4. Reject an empty result and freeze everything into a ResolvedFieldSet.

FieldSetResolver binds ResolverSettings so a sink can resolve records
without re-passing its configuration. Both are pure: no I/O, no shared
mutable state, safe to call from any thread. Callers that see the same
schemas repeatedly should cache results themselves.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

from sinkfields.contracts.enums import InsertMode, PrimaryKeyMode
from sinkfields.contracts.errors import EmptyFieldSetError, FieldResolutionError, SchemaShapeError
from sinkfields.contracts.fields import ResolvedFieldSet, SinkRecordField
from sinkfields.contracts.headers import EMPTY_HEADERS, Headers
from sinkfields.contracts.schema import ConnectSchema, SchemaPair
from sinkfields.core.config import ResolverSettings
from sinkfields.core.logging import get_logger
from sinkfields.resolution.registry import strategy_for
from sinkfields.resolution.strategies import KeyDerivationInput

logger = get_logger(__name__)


def extract_non_key_fields(
    value_schema: ConnectSchema | None,
    key_field_names: Set[str],
    fields_whitelist: Set[str] = frozenset(),
) -> tuple[SinkRecordField, ...]:
    """Value fields that become ordinary columns, in declared order.

    Args:
        value_schema: Record value schema (no columns if None)
        key_field_names: Names already claimed as key columns
        fields_whitelist: If non-empty, only these names are kept

    Returns:
        Non-key columns (is_primary_key=False)
    """
    if value_schema is None:
        return ()
    return tuple(
        SinkRecordField(name=f.name, schema=f.schema, is_primary_key=False)
        for f in value_schema.fields
        if f.name not in key_field_names and (not fields_whitelist or f.name in fields_whitelist)
    )


def resolve_field_set(
    table_name: str,
    *,
    pk_mode: PrimaryKeyMode | str,
    key_schema: ConnectSchema | None = None,
    value_schema: ConnectSchema | None = None,
    configured_pk_fields: Iterable[str] = (),
    fields_whitelist: Set[str] = frozenset(),
    headers: Headers | None = None,
    delete_enabled: bool = False,
    insert_mode: InsertMode = InsertMode.INSERT,
) -> ResolvedFieldSet:
    """Resolve the key and non-key columns of a destination table for one record.

    Args:
        table_name: Destination table
        pk_mode: Primary-key derivation mode
        key_schema: Record key schema, if any
        value_schema: Record value schema, if any (must be a struct)
        configured_pk_fields: pk_fields setting, in configured order
        fields_whitelist: Value fields to keep; empty keeps all (ignored for FLATTEN)
        headers: Record headers (FLATTEN only)
        delete_enabled: Null-value records are deletes (FLATTEN only)
        insert_mode: Sink write mode (FLATTEN only)

    Returns:
        Validated, immutable ResolvedFieldSet

    Raises:
        FieldResolutionError: If the record cannot be mapped to columns
        FieldSetInvariantError: If a key strategy produced an inconsistent
            partition (a bug, not bad input)
    """
    try:
        strategy = strategy_for(pk_mode, table_name=table_name)

        if value_schema is not None and not value_schema.is_struct:
            raise SchemaShapeError(
                f"Value schema for table '{table_name}' (PK mode {strategy.mode}) must be of type Struct, "
                f"but is of type: {value_schema.type}",
                table_name=table_name,
                pk_mode=strategy.mode,
            )

        partial = strategy.derive_key_fields(
            KeyDerivationInput(
                table_name=table_name,
                key_schema=key_schema,
                value_schema=value_schema,
                configured_pk_fields=tuple(configured_pk_fields),
                headers=headers if headers is not None else EMPTY_HEADERS,
                delete_enabled=delete_enabled,
                insert_mode=insert_mode,
            )
        )

        key_names = partial.key_field_names
        whitelist = frozenset() if strategy.mode is PrimaryKeyMode.FLATTEN else fields_whitelist
        non_key_fields = extract_non_key_fields(value_schema, frozenset(key_names), whitelist)

        all_fields: dict[str, SinkRecordField] = {f.name: f for f in partial.key_fields}
        all_fields.update((f.name, f) for f in non_key_fields)
        if not all_fields:
            raise EmptyFieldSetError(table_name=table_name, pk_mode=strategy.mode)
    except FieldResolutionError as e:
        logger.warning(
            "field_set_resolution_failed",
            table=table_name,
            pk_mode=str(pk_mode),
            error_type=type(e).__name__,
            error=str(e),
        )
        raise

    field_set = ResolvedFieldSet(
        key_field_names=key_names,
        non_key_field_names=tuple(f.name for f in non_key_fields),
        all_fields=all_fields,
        key_field_names_in_key=partial.key_field_names_in_key,
    )
    logger.debug(
        "field_set_resolved",
        table=table_name,
        pk_mode=str(strategy.mode),
        key_fields=len(field_set.key_field_names),
        non_key_fields=len(field_set.non_key_field_names),
    )
    return field_set


class FieldSetResolver:
    """Resolves records for a sink using fixed ResolverSettings.

    Example:
        resolver = FieldSetResolver(ResolverSettings(pk_mode="record_key", pk_fields=("id",)))
        field_set = resolver.resolve("orders", key_schema=INT64_SCHEMA, value_schema=order_schema)
        field_set.key_field_names      # ("id",)
    """

    def __init__(self, settings: ResolverSettings | None = None) -> None:
        self._settings = settings if settings is not None else ResolverSettings()

    @property
    def settings(self) -> ResolverSettings:
        return self._settings

    def resolve(
        self,
        table_name: str,
        *,
        key_schema: ConnectSchema | None = None,
        value_schema: ConnectSchema | None = None,
        headers: Headers | None = None,
    ) -> ResolvedFieldSet:
        """Resolve one record's schemas (and headers, for FLATTEN) against the settings."""
        settings = self._settings
        return resolve_field_set(
            table_name,
            pk_mode=settings.pk_mode,
            key_schema=key_schema,
            value_schema=value_schema,
            configured_pk_fields=settings.pk_fields,
            fields_whitelist=settings.fields_whitelist,
            headers=headers,
            delete_enabled=settings.delete_enabled,
            insert_mode=settings.insert_mode,
        )

    def resolve_pair(self, table_name: str, schema_pair: SchemaPair, headers: Headers | None = None) -> ResolvedFieldSet:
        return self.resolve(
            table_name,
            key_schema=schema_pair.key_schema,
            value_schema=schema_pair.value_schema,
            headers=headers,
        )
