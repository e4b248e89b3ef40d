# tests/property/resolution/test_field_set_properties.py
"""Property-based tests for field set resolution.

For ANY generated record and settings, resolution either returns a field
set whose key and non-key columns partition all_fields, or raises a
FieldResolutionError. It never raises anything else and never depends on
anything but its inputs.
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from sinkfields.contracts import FieldResolutionError, PrimaryKeyMode, ResolvedFieldSet
from sinkfields.resolution import resolve_field_set
from tests.property.conftest import RecordInput, records
from tests.property.settings import DETERMINISM_SETTINGS, STANDARD_SETTINGS


def _resolve(record: RecordInput) -> ResolvedFieldSet | FieldResolutionError:
    try:
        return resolve_field_set("generated", **record.kwargs())  # type: ignore[arg-type]
    except FieldResolutionError as e:
        return e


class TestPartitionProperties:
    @given(record=records())
    @STANDARD_SETTINGS
    def test_key_and_non_key_partition_all_fields(self, record: RecordInput) -> None:
        result = _resolve(record)
        if isinstance(result, FieldResolutionError):
            return

        key_names = set(result.key_field_names)
        non_key_names = set(result.non_key_field_names)
        assert key_names.isdisjoint(non_key_names)
        assert key_names | non_key_names == set(result.all_fields)
        assert len(result.key_field_names) == len(key_names)
        assert len(result.non_key_field_names) == len(non_key_names)
        assert result.all_fields

    @given(record=records())
    @STANDARD_SETTINGS
    def test_primary_key_flag_matches_partition(self, record: RecordInput) -> None:
        result = _resolve(record)
        if isinstance(result, FieldResolutionError):
            return

        assert all(f.is_primary_key for f in result.key_fields)
        assert not any(f.is_primary_key for f in result.non_key_fields)
        assert not any(f.is_optional for f in result.key_fields)

    @given(record=records())
    @STANDARD_SETTINGS
    def test_in_key_names_only_for_flatten(self, record: RecordInput) -> None:
        result = _resolve(record)
        if isinstance(result, FieldResolutionError):
            return

        if record.pk_mode is PrimaryKeyMode.FLATTEN:
            assert result.key_field_names_in_key is not None
            assert set(result.key_field_names_in_key) <= set(result.key_field_names)
        else:
            assert result.key_field_names_in_key is None

    @given(record=records())
    @STANDARD_SETTINGS
    def test_non_key_columns_come_from_value_in_order(self, record: RecordInput) -> None:
        result = _resolve(record)
        if isinstance(result, FieldResolutionError) or record.value_schema is None:
            return

        value_order = [name for name in record.value_schema.field_names() if name in set(result.non_key_field_names)]
        assert list(result.non_key_field_names) == value_order
        for f in result.non_key_fields:
            assert f.schema == record.value_schema.field(f.name).schema  # type: ignore[union-attr]

    @given(record=records(pk_modes=st.sampled_from([m for m in PrimaryKeyMode if m is not PrimaryKeyMode.FLATTEN])))
    @STANDARD_SETTINGS
    def test_whitelist_bounds_non_key_columns(self, record: RecordInput) -> None:
        result = _resolve(record)
        if isinstance(result, FieldResolutionError) or not record.fields_whitelist:
            return

        assert set(result.non_key_field_names) <= record.fields_whitelist


class TestDeterminismProperties:
    @given(record=records())
    @DETERMINISM_SETTINGS
    def test_same_input_same_outcome(self, record: RecordInput) -> None:
        first = _resolve(record)
        second = _resolve(record)

        if isinstance(first, FieldResolutionError):
            assert type(second) is type(first)
            assert str(second) == str(first)
        else:
            assert first == second
            assert hash(first) == hash(second)
