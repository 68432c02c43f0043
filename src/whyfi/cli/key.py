"""API key management commands."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from whyfi.config import WhyFiConfig
from whyfi.settings_store import JsonFileSettingsStore, clear_api_key, store_api_key

app = typer.Typer(no_args_is_help=True)

console = Console()


def _store() -> JsonFileSettingsStore:
    return JsonFileSettingsStore(WhyFiConfig().settings_path)


@app.command("set")
def set_key(
    api_key: Annotated[
        str, typer.Option(prompt=True, hide_input=True, help="OpenAI API key")
    ],
) -> None:
    """Store the OpenAI API key used for AI diagnosis."""
    store = _store()
    try:
        store_api_key(store, api_key)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not save settings: {e}")
        raise typer.Exit(1) from None
    console.print(f"[green]✓[/green] API key saved to [cyan]{store.path}[/cyan]")


@app.command("clear")
def clear_key() -> None:
    """Remove the stored API key."""
    try:
        clear_api_key(_store())
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not save settings: {e}")
        raise typer.Exit(1) from None
    console.print("[green]✓[/green] API key cleared")


@app.command("status")
def key_status() -> None:
    """Show whether AI diagnosis is available."""
    if _store().load().has_api_key:
        console.print("[green]✓[/green] API key configured")
    else:
        console.print("[yellow]No API key configured[/yellow]")
