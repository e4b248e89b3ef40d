"""Closed mapping from primary-key mode to key strategy."""

from __future__ import annotations

import types
from collections.abc import Mapping

from sinkfields.contracts.enums import PrimaryKeyMode
from sinkfields.contracts.errors import ConfigurationError
from sinkfields.resolution.flatten import FlattenStrategy
from sinkfields.resolution.strategies import (
    KafkaStrategy,
    KeyStrategy,
    NoneStrategy,
    RecordKeyStrategy,
    RecordValueStrategy,
)


def _build_registry() -> Mapping[PrimaryKeyMode, KeyStrategy]:
    strategies: tuple[KeyStrategy, ...] = (
        NoneStrategy(),
        KafkaStrategy(),
        RecordKeyStrategy(),
        RecordValueStrategy(),
        FlattenStrategy(),
    )
    registry = {s.mode: s for s in strategies}
    # Every PrimaryKeyMode must have a strategy
    missing = set(PrimaryKeyMode) - set(registry)
    if missing:
        raise RuntimeError(f"No key strategy registered for modes: {sorted(missing)}")
    return types.MappingProxyType(registry)


KEY_STRATEGIES: Mapping[PrimaryKeyMode, KeyStrategy] = _build_registry()


def strategy_for(pk_mode: PrimaryKeyMode | str, *, table_name: str) -> KeyStrategy:
    """Look up the strategy for a primary-key mode.

    Raises:
        ConfigurationError: If the mode is unknown
    """
    try:
        return KEY_STRATEGIES[PrimaryKeyMode(pk_mode)]
    except ValueError:
        raise ConfigurationError(
            f"Unknown primary key mode for table '{table_name}': {pk_mode!r}. "
            f"Supported modes: {', '.join(m.value for m in PrimaryKeyMode)}",
            table_name=table_name,
            pk_mode=str(pk_mode),
        ) from None
