"""sinkfields Command Line Interface.

Entry point for the sinkfields CLI tool. The `resolve` command explains how
a record would be mapped onto a destination table:

    sinkfields resolve record.yaml --table orders --pk-mode record_key --pk-fields id

Record files are YAML:

    key_schema: int64
    value_schema:
      type: struct
      fields:
        - "id: int64"
        - "status: string?"
    headers:            # mapping, or list of [key, value] pairs
      pk: id
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml

from sinkfields import __version__
from sinkfields.contracts.errors import FieldResolutionError
from sinkfields.contracts.fields import ResolvedFieldSet
from sinkfields.contracts.headers import Headers
from sinkfields.contracts.schema import ConnectSchema, SchemaPair
from sinkfields.core.config import ResolverSettings, SettingsError, load_settings

__all__ = ["app"]

app = typer.Typer(
    name="sinkfields",
    help="sinkfields: primary-key and column resolution for table sinks.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sinkfields version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """sinkfields: primary-key and column resolution for table sinks."""
    from sinkfields.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


def _parse_headers(raw: Any) -> Headers:
    """Parse headers from a mapping or a list of [key, value] / {key, value} entries."""
    if raw is None:
        return Headers()
    if isinstance(raw, dict):
        # YAML keys may load as int or bool; header keys are always strings
        return Headers.from_pairs((str(k), v) for k, v in raw.items())
    if not isinstance(raw, list):
        raise ValueError(f"'headers' must be a mapping or a list, got {type(raw).__name__}")

    pairs: list[tuple[str, Any]] = []
    for i, entry in enumerate(raw):
        if isinstance(entry, dict) and set(entry) == {"key", "value"}:
            pairs.append((str(entry["key"]), entry["value"]))
        elif isinstance(entry, list) and len(entry) == 2:
            pairs.append((str(entry[0]), entry[1]))
        else:
            raise ValueError(f"headers[{i}] must be a [key, value] pair or a {{key, value}} mapping")
    return Headers.from_pairs(pairs)


def load_record(path: Path) -> tuple[SchemaPair, Headers]:
    """Load a record description (schemas and headers) from YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Record file not found: {path}")

    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Record file must contain a mapping, got {type(raw).__name__}")

    unknown = set(raw) - {"key_schema", "value_schema", "headers"}
    if unknown:
        raise ValueError(f"Unknown keys in record file: {', '.join(sorted(unknown))}")

    key_schema = ConnectSchema.from_dict(raw["key_schema"]) if raw.get("key_schema") is not None else None
    value_schema = ConnectSchema.from_dict(raw["value_schema"]) if raw.get("value_schema") is not None else None
    return SchemaPair(key_schema=key_schema, value_schema=value_schema), _parse_headers(raw.get("headers"))


def _format_text(table: str, settings: ResolverSettings, field_set: ResolvedFieldSet) -> str:
    lines = [f"Table: {table} (pk_mode={settings.pk_mode})"]
    width = max(len(name) for name in field_set.all_fields)
    for f in (*field_set.key_fields, *field_set.non_key_fields):
        type_label = f.schema_type.value if f.schema_name is None else f"{f.schema_type.value} ({f.schema_name})"
        flags: list[str] = []
        if f.is_primary_key:
            flags.append("PRIMARY KEY")
            if field_set.key_field_names_in_key is not None:
                flags.append("from key" if field_set.is_key_sourced(f.name) else "from value")
        elif f.is_optional:
            flags.append("nullable")
        if f.default_value is not None:
            flags.append(f"default={f.default_value!r}")
        lines.append(f"  {f.name.ljust(width)}  {type_label}  {', '.join(flags)}".rstrip())
    return "\n".join(lines)


@app.command()
def resolve(
    record_file: Path = typer.Argument(..., help="YAML file with key_schema, value_schema and headers."),
    table: str = typer.Option(..., "--table", "-t", help="Destination table name."),
    settings_path: Path | None = typer.Option(None, "--settings", "-s", help="Settings YAML file."),
    pk_mode: str | None = typer.Option(None, "--pk-mode", help="Override pk_mode."),
    pk_fields: str | None = typer.Option(None, "--pk-fields", help="Override pk_fields (comma-separated)."),
    fields_whitelist: str | None = typer.Option(None, "--fields-whitelist", help="Override fields_whitelist (comma-separated)."),
    delete_enabled: bool | None = typer.Option(None, "--delete-enabled/--no-delete-enabled", help="Override delete_enabled."),
    insert_mode: str | None = typer.Option(None, "--insert-mode", help="Override insert_mode."),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
) -> None:
    """Resolve the primary-key and column layout for a record."""
    if output_format not in ("text", "json"):
        raise _fail(f"Unknown format '{output_format}'. Expected 'text' or 'json'.")

    overrides = {
        key: value
        for key, value in {
            "pk_mode": pk_mode,
            "pk_fields": pk_fields,
            "fields_whitelist": fields_whitelist,
            "delete_enabled": delete_enabled,
            "insert_mode": insert_mode,
        }.items()
        if value is not None
    }

    try:
        base = load_settings(settings_path.expanduser()) if settings_path is not None else ResolverSettings()
        settings = ResolverSettings.from_dict({**base.model_dump(), **overrides}) if overrides else base
        schema_pair, headers = load_record(record_file.expanduser())
    except (FileNotFoundError, SettingsError, ValueError, yaml.YAMLError) as e:
        raise _fail(str(e)) from e

    from sinkfields.resolution.resolver import FieldSetResolver

    try:
        field_set = FieldSetResolver(settings).resolve_pair(table, schema_pair, headers)
    except FieldResolutionError as e:
        raise _fail(str(e)) from e

    if output_format == "json":
        typer.echo(json.dumps({"table": table, "pk_mode": str(settings.pk_mode), **field_set.to_dict()}, indent=2, default=str))
    else:
        typer.echo(_format_text(table, settings, field_set))


if __name__ == "__main__":
    app()
