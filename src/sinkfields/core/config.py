"""
Configuration schema and loading for field set resolution.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Example YAML:
    pk_mode: record_value
    pk_fields: [tenant_id, order_id]
    fields_whitelist: "tenant_id, order_id, amount, status"
    delete_enabled: false
    insert_mode: upsert
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from sinkfields.contracts.enums import InsertMode, PrimaryKeyMode

# delete_enabled needs a key that can be read from a tombstone (null value) record
_DELETE_CAPABLE_MODES = frozenset({PrimaryKeyMode.RECORD_KEY, PrimaryKeyMode.FLATTEN})


class SettingsError(Exception):
    """Raised when a settings file cannot be loaded or fails validation."""

    pass


def _split_names(value: Any, setting: str) -> list[str]:
    """Accept a comma-separated string or a list of names."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",") if value.strip() else []
    if not isinstance(value, list | tuple | set | frozenset):
        raise ValueError(f"'{setting}' must be a list of field names or a comma-separated string, got {type(value).__name__}")

    names: list[str] = []
    for i, name in enumerate(value):
        if not isinstance(name, str):
            raise ValueError(f"'{setting}[{i}]' must be a string, got {type(name).__name__}")
        name = name.strip()
        if not name:
            raise ValueError(f"'{setting}[{i}]' cannot be empty or whitespace-only")
        names.append(name)
    return names


class ResolverSettings(BaseModel):
    """Primary-key and column settings for one sink.

    Attributes:
        pk_mode: Strategy deriving the primary-key columns
        pk_fields: Configured primary-key field names (meaning depends on mode)
        fields_whitelist: Value fields to keep as columns; empty keeps all.
            Ignored in FLATTEN mode.
        delete_enabled: Treat null-value records as deletes
        insert_mode: Write statement used by the sink
    """

    model_config = {"frozen": True, "extra": "forbid"}

    pk_mode: PrimaryKeyMode = PrimaryKeyMode.NONE
    pk_fields: tuple[str, ...] = ()
    fields_whitelist: frozenset[str] = frozenset()
    delete_enabled: bool = False
    insert_mode: InsertMode = InsertMode.INSERT

    @field_validator("pk_mode", "insert_mode", mode="before")
    @classmethod
    def normalize_enum_case(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("pk_fields", mode="before")
    @classmethod
    def parse_pk_fields(cls, v: Any) -> tuple[str, ...]:
        names = _split_names(v, "pk_fields")
        if len(names) != len(set(names)):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate field names in 'pk_fields': {', '.join(duplicates)}")
        return tuple(names)

    @field_validator("fields_whitelist", mode="before")
    @classmethod
    def parse_fields_whitelist(cls, v: Any) -> frozenset[str]:
        return frozenset(_split_names(v, "fields_whitelist"))

    @model_validator(mode="after")
    def validate_delete_mode(self) -> ResolverSettings:
        if self.delete_enabled and self.pk_mode not in _DELETE_CAPABLE_MODES:
            allowed = ", ".join(sorted(m.value for m in _DELETE_CAPABLE_MODES))
            raise ValueError(f"delete_enabled requires pk_mode to be one of: {allowed} (got '{self.pk_mode}')")
        return self

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ResolverSettings:
        """Create settings from a dict with a clear error on validation failure.

        Raises:
            SettingsError: If the configuration is invalid
        """
        if not isinstance(config, dict):
            raise SettingsError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")
        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise SettingsError(f"Invalid configuration for {cls.__name__}: {e}") from e


def load_settings(config_path: Path) -> ResolverSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (SINKFIELDS_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated ResolverSettings instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        SettingsError: If configuration fails validation
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="SINKFIELDS",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
    )

    # Dynaconf returns uppercase keys; filter out its internal settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return ResolverSettings.from_dict(raw_config)
