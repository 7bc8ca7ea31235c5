"""Interactive first-run and `sgit config` setup."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sgit.config.settings import DEFAULT_LANGUAGE, LANGUAGES, Settings, SettingsStore
from sgit.errors import ConfigurationError, SetupCancelled

logger = logging.getLogger(__name__)

API_KEY_URL = "https://console.upstage.ai/"


def _language_table(current: str) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Code", style="cyan")
    table.add_column("Language")
    for code, name in LANGUAGES.items():
        marker = " [green](current)[/green]" if code == current else ""
        table.add_row(code, f"{name}{marker}")
    return table


def run_setup(store: SettingsStore, current: Settings, console: Console) -> Settings:
    """Ask for credential, model and language, then save.

    Nothing is written until every answer is in.

    Args:
        store: Where the settings are saved.
        current: Existing settings, offered as defaults.
        console: Console for prompts and messages.

    Returns:
        The saved settings.

    Raises:
        SetupCancelled: If the user interrupts with Ctrl-C.
        ConfigurationError: If no API key was provided.
    """
    console.print(
        Panel(
            "sgit needs an Upstage API key to use its AI features.\n"
            f"Get one at [link={API_KEY_URL}]{API_KEY_URL}[/link]",
            title="sgit configuration",
            border_style="cyan",
        )
    )

    try:
        if current.api_key:
            console.print(f"[dim]Current API key: {current.masked_api_key}[/dim]")
            api_key = typer.prompt(
                "API key (Enter to keep current)",
                default="",
                show_default=False,
                hide_input=True,
            )
            api_key = api_key.strip() or current.api_key
        else:
            api_key = typer.prompt("API key", hide_input=True).strip()

        if not api_key:
            raise ConfigurationError("API key cannot be empty")

        model_name = typer.prompt("Model name", default=current.model_name).strip()

        console.print()
        console.print(_language_table(current.language))
        language = typer.prompt("Response language", default=current.language or DEFAULT_LANGUAGE)
        language = language.strip().lower()
        if language not in LANGUAGES:
            console.print(
                f"[yellow]Warning:[/yellow] Unknown language '{language}', using '{DEFAULT_LANGUAGE}'"
            )
            language = DEFAULT_LANGUAGE
    except (KeyboardInterrupt, typer.Abort) as e:
        raise SetupCancelled() from e

    settings = current.model_copy(
        update={"api_key": api_key, "model_name": model_name or current.model_name, "language": language}
    )
    store.save(settings)

    console.print(f"\n[green]Configuration saved to {store.path}[/green]")
    console.print(f"[dim]Model: {settings.model_name}  Language: {LANGUAGES[language]}[/dim]")
    return settings


def ensure_configuration(store: SettingsStore, current: Settings, console: Console) -> Settings:
    """Return usable settings, running setup first when no API key is known.

    Raises:
        SetupCancelled: If the user interrupts setup.
        ConfigurationError: If setup finished without a key.
    """
    if current.has_api_key:
        return current

    console.print("[yellow]sgit is not configured yet.[/yellow] Let's set it up.\n")
    try:
        settings = run_setup(store, current, console)
    except ConfigurationError as e:
        raise ConfigurationError(f"configuration setup failed or was cancelled: {e}") from e

    if not settings.has_api_key:
        raise ConfigurationError("configuration setup failed or was cancelled")
    return settings
