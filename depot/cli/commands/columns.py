"""``depot columns`` — show the warehouse columns a message schema maps to."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.tree import Tree

from depot.config import DepotConfig
from depot.errors import ConfigurationError
from depot.models.schema import Column, MessageSchema
from depot.warehouse.column_mapper import ColumnMapper
from depot.warehouse.metadata import parse_metadata_columns_types, with_metadata_columns

console = Console()


def _add_column(tree: Tree, column: Column) -> None:
    label = f"[cyan]{column.name}[/cyan] [green]{column.type.value}[/green] [dim]{column.mode.value}[/dim]"
    branch = tree.add(label)
    for sub in column.fields:
        _add_column(branch, sub)


def columns_cmd(
    schema_path: Path = typer.Argument(..., help="JSON file with the message schema."),
    with_metadata: bool = typer.Option(
        False, "--with-metadata", help="Append the configured metadata columns."
    ),
) -> None:
    """Map a message schema to warehouse columns and print the column tree."""
    schema = MessageSchema.from_dict(json.loads(schema_path.read_text(encoding="utf-8")))
    try:
        columns = ColumnMapper().map_all(schema.fields)
        if with_metadata:
            settings = DepotConfig().warehouse
            columns = with_metadata_columns(
                columns,
                parse_metadata_columns_types(settings.metadata_columns_types),
                settings.metadata_namespace,
            )
    except ConfigurationError as exc:
        console.print(f"[red]Schema mapping failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    tree = Tree(f"[bold]{schema.name}[/bold]")
    for column in columns:
        _add_column(tree, column)
    console.print(tree)
