"""``depot template`` — expand a key template against a sample message."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console

from depot.errors import ConfigurationError
from depot.keyvalue.templating import parse_template
from depot.message import DictParsedMessage
from depot.models.schema import MessageSchema

console = Console()


def template_cmd(
    template: str = typer.Argument(..., help='Key template, e.g. "order-%s,order_number".'),
    message_path: Path = typer.Argument(..., help="JSON file with the sample message."),
    schema_path: Path = typer.Argument(..., help="JSON file with the message schema."),
) -> None:
    """Print the key a template produces for a sample message."""
    schema = MessageSchema.from_dict(json.loads(schema_path.read_text(encoding="utf-8")))
    message = DictParsedMessage(json.loads(message_path.read_text(encoding="utf-8")))
    try:
        key = parse_template(template, message, schema)
    except ConfigurationError as exc:
        console.print(f"[red]Invalid template:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(key, markup=False, highlight=False)
