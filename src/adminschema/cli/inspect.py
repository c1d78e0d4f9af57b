"""
Inspection commands for adminschema CLI.

- schemas: table of registered schemas
- show: table of the fields of a schema, resolved against empty values
- resolve: visible sections and fields for a set of ``key=value`` pairs
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from adminschema.core.errors import AdminSchemaError, SchemaNotFoundError
from adminschema.core.ir import FieldSpec, SchemaSpec
from adminschema.core.manifest import load_project_manifest
from adminschema.core.registry import SchemaRegistry
from adminschema.core.values import ValueSource
from adminschema.logging import setup_logging

console = Console()


def _load_registry(project_dir: Path) -> SchemaRegistry:
    """Load the project manifest, set up logging and build the registry."""
    from adminschema.schemas import build_registry

    try:
        manifest = load_project_manifest(project_dir.resolve())
        setup_logging(manifest.logging.level, manifest.logging.log_dir)
        return build_registry(manifest.registry.bundles, manifest.registry.page_size)
    except AdminSchemaError as e:
        typer.echo(f"Error loading schemas: {e}", err=True)
        raise typer.Exit(code=1)


def _get_schema(registry: SchemaRegistry, schema_id: str) -> SchemaSpec:
    try:
        return registry.get(schema_id)
    except SchemaNotFoundError:
        typer.echo(
            f"Unknown schema {schema_id!r}. Available: {', '.join(registry.ids())}",
            err=True,
        )
        raise typer.Exit(code=1)


def _parse_assignments(assignments: list[str]) -> list[tuple[str, str]]:
    pairs = []
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {assignment!r}", param_hint="--set")
        pairs.append((key.strip(), value))
    return pairs


def _field_summary(field: FieldSpec, values: ValueSource) -> dict[str, Any]:
    return {
        "id": field.id,
        "label": field.label_form,
        "kind": field.type.kind.value,
        "value": field.current_value(values),
        "display": field.display_label(values),
        "default": field.resolve_default(values),
        "placeholder": field.resolve_placeholder(values),
        "required": field.is_required(values),
        "readonly": field.readonly,
    }


def schemas_command(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
) -> None:
    """List registered schemas."""
    registry = _load_registry(project_dir)

    table = Table(title="Schemas")
    table.add_column("Id", style="bold")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Prefix", style="dim")
    table.add_column("Suffix", style="dim")
    table.add_column("Fields", justify="right")

    for schema in registry:
        table.add_row(
            schema.id,
            schema.name_plural,
            schema.type.kind.value,
            schema.type.prefix or "",
            schema.type.suffix or "",
            str(len(schema.fields)),
        )

    console.print(table)


def show_command(
    schema_id: str = typer.Argument(..., help="Schema id"),
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
) -> None:
    """List the fields of a schema with their unconditional defaults."""
    registry = _load_registry(project_dir)
    schema = _get_schema(registry, schema_id)
    empty: dict[str, str] = {}

    table = Table(title=f"{schema.name_singular or schema.id} fields")
    table.add_column("Field", style="bold")
    table.add_column("Label")
    table.add_column("Kind")
    table.add_column("Required")
    table.add_column("Default")
    table.add_column("Placeholder", style="dim")

    for field in schema.fields.values():
        table.add_row(
            field.id,
            field.label_form,
            field.type.kind.value,
            "[green]yes[/green]" if field.is_required(empty) else "no",
            field.resolve_default(empty) or "",
            field.resolve_placeholder(empty) or "",
        )

    console.print(table)


def resolve_command(
    schema_id: str = typer.Argument(..., help="Schema id"),
    assignments: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--set",
        "-s",
        help="Current field value as key=value (repeatable)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-p",
        help="Project directory (default: current directory)",
    ),
) -> None:
    """
    Resolve a schema's form against a set of current values.

    Prints the visible sections and fields with their resolved defaults,
    placeholders and required flags.

    Examples:
        adminschema resolve listener --set protocol=imap
        adminschema resolve listener -s tls.override=true --json
    """
    pairs = _parse_assignments(assignments or [])
    registry = _load_registry(project_dir)
    _get_schema(registry, schema_id)

    form = registry.build_form(schema_id)
    for key, value in pairs:
        form.set_value(key, value)

    sections = [
        {
            "title": section.title,
            "fields": [_field_summary(f, form) for f in section.visible_fields(form)],
        }
        for section in form.visible_sections()
    ]

    if as_json:
        typer.echo(json.dumps({"schema": schema_id, "sections": sections}, indent=2))
        return

    for section in sections:
        table = Table(title=section["title"] or schema_id)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_column("Default")
        table.add_column("Placeholder", style="dim")
        table.add_column("Required")
        for field in section["fields"]:
            table.add_row(
                field["id"],
                field["display"],
                field["default"] or "",
                field["placeholder"] or "",
                "[green]yes[/green]" if field["required"] else "no",
            )
        console.print(table)
