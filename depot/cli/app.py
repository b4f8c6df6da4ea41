"""Main Typer application — registers all CLI commands.

Entry point: ``depot`` (configured via pyproject.toml console scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from depot.cli.commands.columns import columns_cmd
from depot.cli.commands.config_cmd import config_cmd
from depot.cli.commands.template import template_cmd
from depot.config import DepotConfig

app = typer.Typer(
    name="depot",
    help="depot: schema reconciliation and partial-failure writes for sink connectors.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="columns", help="Show the warehouse columns for a message schema.")(columns_cmd)
app.command(name="template", help="Expand a key template against a sample message.")(template_cmd)
app.command(name="config", help="Print the effective configuration.")(config_cmd)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


@app.callback()
def main_callback() -> None:
    """Configure logging from DEPOT_LOG_LEVEL before running a command."""
    configure_logging(DepotConfig().log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
