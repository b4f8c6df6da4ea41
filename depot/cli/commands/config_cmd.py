"""``depot config`` — print the effective configuration."""

from __future__ import annotations

import json

from rich.console import Console
from rich.syntax import Syntax

from depot.config import DepotConfig

console = Console()


def config_cmd() -> None:
    """Print the configuration resolved from DEPOT_* variables and .env."""
    config = DepotConfig()
    rendered = json.dumps(config.model_dump(mode="json"), indent=2, sort_keys=True)
    console.print(Syntax(rendered, "json", theme="ansi_dark"))
