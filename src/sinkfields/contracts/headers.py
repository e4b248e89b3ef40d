"""Record headers: ordered key/value attributes attached to a record.

FLATTEN primary-key mode reads the headers as a name-translation table: each
header key names a source field (in the record key, or a reference marked
with the ".key" suffix) and each header value names the destination column.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Header:
    """A single record header."""

    key: str
    value: Any

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise TypeError(f"Header key must be a string, got {type(self.key).__name__}")

    def value_as_str(self) -> str:
        """Render the header value as a column name.

        Bytes are decoded as UTF-8; everything else goes through str().

        Raises:
            UnicodeDecodeError: If a bytes value is not valid UTF-8
        """
        if isinstance(self.value, str):
            return self.value
        if isinstance(self.value, bytes | bytearray):
            return bytes(self.value).decode("utf-8")
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Headers:
    """Immutable, ordered sequence of record headers.

    Repeated keys are allowed and kept in insertion order.
    """

    entries: tuple[Header, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Any]]) -> Headers:
        return cls(tuple(Header(key=k, value=v) for k, v in pairs))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Headers:
        return cls.from_pairs(mapping.items())

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Header]:
        return iter(self.entries)

    def __str__(self) -> str:
        return "[" + ", ".join(f"{h.key}={_display_value(h)}" for h in self.entries) + "]"


def _display_value(header: Header) -> str:
    # Undecodable bytes still need to render inside error messages
    try:
        return header.value_as_str()
    except UnicodeDecodeError:
        return repr(header.value)


EMPTY_HEADERS = Headers()
