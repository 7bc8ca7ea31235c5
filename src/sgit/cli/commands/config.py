"""Configure the API key, model and response language."""

from typing import Annotated

import typer
from rich.table import Table

from sgit.cli.runtime import AppState, cancelled, console, fail
from sgit.config.settings import LANGUAGES
from sgit.config.wizard import run_setup
from sgit.errors import ConfigurationError, SetupCancelled


def config(
    ctx: typer.Context,
    show: Annotated[
        bool,
        typer.Option("--show", help="Print the current settings and exit"),
    ] = False,
) -> None:
    """Set up sgit interactively.

    Asks for your Upstage API key, the model name and the language AI
    responses should be written in.

    Examples:
        sgit config
        sgit config --show
    """
    state = ctx.ensure_object(AppState)
    store = state.store

    if show:
        settings = store.load()
        table = Table(show_header=False, box=None)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        table.add_row("Config file", str(store.path))
        table.add_row("API key", settings.masked_api_key or "[red]not set[/red]")
        table.add_row("Model", settings.model_name)
        table.add_row("Language", LANGUAGES.get(settings.language, settings.language))
        table.add_row("Endpoint", settings.base_url)
        console.print(table)
        return

    try:
        run_setup(store, store.load(apply_env=False), console)
    except SetupCancelled:
        cancelled()
    except ConfigurationError as e:
        fail(e)
