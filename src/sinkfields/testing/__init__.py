"""Test infrastructure for sinkfields.

Factories for constructing schemas, headers and settings with sensible
defaults. When a backbone type's constructor changes, update the factory
here; tests that use the factories need no changes.

Usage:
    from sinkfields.testing import make_struct, make_headers, make_settings

    value = make_struct("id: int64", "name: string", "email: string?")
    headers = make_headers(("pk", "id"))
"""

from __future__ import annotations

from typing import Any

from sinkfields.contracts.headers import Headers
from sinkfields.contracts.schema import ConnectSchema
from sinkfields.core.config import ResolverSettings


def make_schema(spec: str | dict[str, Any]) -> ConnectSchema:
    """Parse a schema from shorthand ("int64", "string?") or dict form."""
    return ConnectSchema.from_dict(spec)


def make_struct(
    *fields: str | tuple[str, ConnectSchema | str],
    optional: bool = False,
    name: str | None = None,
) -> ConnectSchema:
    """Build a struct schema.

    Each field is either a "name: type?" shorthand string or a
    (name, schema) tuple where schema may itself be a shorthand string.
    """
    pairs: list[tuple[str, ConnectSchema]] = []
    for entry in fields:
        if isinstance(entry, str):
            field_name, _, type_spec = entry.partition(":")
            pairs.append((field_name.strip(), ConnectSchema.from_dict(type_spec.strip())))
        else:
            field_name, schema = entry
            pairs.append((field_name, schema if isinstance(schema, ConnectSchema) else ConnectSchema.from_dict(schema)))
    return ConnectSchema.struct(*pairs, optional=optional, name=name)


def make_headers(*pairs: tuple[str, Any]) -> Headers:
    """Build headers from (key, value) pairs, keeping order."""
    return Headers.from_pairs(pairs)


def make_settings(**overrides: Any) -> ResolverSettings:
    """Build ResolverSettings, validating overrides like a config file would."""
    return ResolverSettings.model_validate(overrides)
