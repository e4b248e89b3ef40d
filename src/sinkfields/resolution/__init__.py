"""Primary-key strategies and the field set resolver.

    from sinkfields.resolution import FieldSetResolver, resolve_field_set
"""

from sinkfields.resolution.flatten import FlattenBranch, FlattenStrategy, select_flatten_branch
from sinkfields.resolution.registry import KEY_STRATEGIES, strategy_for
from sinkfields.resolution.resolver import FieldSetResolver, extract_non_key_fields, resolve_field_set
from sinkfields.resolution.strategies import (
    DEFAULT_KAFKA_PK_NAMES,
    KafkaStrategy,
    KeyDerivationInput,
    KeyStrategy,
    NoneStrategy,
    PartialKeyResult,
    RecordKeyStrategy,
    RecordValueStrategy,
)

__all__ = [
    "DEFAULT_KAFKA_PK_NAMES",
    "KEY_STRATEGIES",
    "FieldSetResolver",
    "FlattenBranch",
    "FlattenStrategy",
    "KafkaStrategy",
    "KeyDerivationInput",
    "KeyStrategy",
    "NoneStrategy",
    "PartialKeyResult",
    "RecordKeyStrategy",
    "RecordValueStrategy",
    "extract_non_key_fields",
    "resolve_field_set",
    "select_flatten_branch",
    "strategy_for",
]
