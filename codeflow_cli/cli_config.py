"""Configuration commands: show, set, and reset CodeFlow settings."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from . import config
from .config_manager import DEFAULT_SECTIONS, load_section, reset_config, set_value

console = Console()

config_app = typer.Typer(
    help="⚙️  Configuration — scan policy and export settings.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@config_app.command("show")
def show():
    """Show effective settings."""
    table = Table(title=f"CodeFlow config ({config.CONFIG_FILE})")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for section in DEFAULT_SECTIONS:
        for key, value in load_section(section).items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value) or "-"
            table.add_row(f"{section}.{key}", str(value))
    console.print(table)


@config_app.command("set")
def set_key(
    key: str = typer.Argument(..., help="Setting name, e.g. export.max_text_size."),
    value: str = typer.Argument(..., help="New value (comma-separated for lists)."),
):
    """Change one setting."""
    try:
        stored = set_value(key, value)
    except KeyError:
        known = ", ".join(f"{s}.{k}" for s, keys in DEFAULT_SECTIONS.items() for k in keys)
        raise typer.BadParameter(f"Unknown key '{key}'. Known keys: {known}")
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    console.print(f"[green]✓[/green] {key} = {stored}")


@config_app.command("reset")
def reset():
    """Delete the config file and restore defaults."""
    if reset_config():
        console.print("[green]✓[/green] Config reset to defaults.")
    else:
        console.print("Already using defaults.")
