"""Per-invocation state shared by the CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape

from sgit.config.settings import SettingsStore, language_name, resolve_language
from sgit.config.wizard import ensure_configuration
from sgit.errors import FlagError, SetupCancelled, SgitError
from sgit.git.runner import GitRunner
from sgit.router.engine import Router

logger = logging.getLogger(__name__)

RAW_ARGS_KEY = "sgit.raw_args"
GLOBAL_OPTIONS = ("--lang", "--config")

console = Console()
err_console = Console(stderr=True)


@dataclass
class AppState:
    """Global options plus the lazily built router."""

    config_path: Optional[Path] = None
    language: Optional[str] = None
    router: Optional[Router] = None

    def apply_options(self, options: dict[str, str]) -> None:
        """Apply global options given after the subcommand name."""
        if "--lang" in options:
            self.language = options["--lang"]
        if "--config" in options:
            self.config_path = Path(options["--config"])

    @property
    def store(self) -> SettingsStore:
        return SettingsStore(self.config_path)

    def get_router(self) -> Router:
        if self.router is not None:
            return self.router

        store = self.store
        settings = store.load()
        code, warning = resolve_language(self.language, settings.language)
        if warning:
            err_console.print(f"[yellow]Warning:[/yellow] {warning}")

        self.router = Router(
            settings,
            GitRunner(),
            console=console,
            language_name=language_name(code),
            setup=lambda current: ensure_configuration(store, current, console),
        )
        return self.router


def raw_args(ctx: typer.Context) -> list[str]:
    """Arguments after the subcommand name, exactly as typed."""
    return list(ctx.meta.get(RAW_ARGS_KEY, ctx.args))


def split_global_options(argv: Sequence[str]) -> tuple[list[str], dict[str, str]]:
    """Pull ``--lang`` and ``--config`` out of a subcommand's arguments.

    Both are accepted in ``--name value`` and ``--name=value`` form. Parsing
    stops at ``--``.

    Returns:
        Tuple of (remaining arguments, option values keyed by option name).

    Raises:
        FlagError: If an option is missing its value.
    """
    rest: list[str] = []
    options: dict[str, str] = {}
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "--":
            rest.extend(argv[index:])
            break
        name, has_value, value = token.partition("=")
        if name in GLOBAL_OPTIONS:
            if not has_value:
                if index + 1 >= len(argv):
                    raise FlagError(f"flag needs an argument: {name}")
                index += 1
                value = argv[index]
            options[name] = value
        else:
            rest.append(token)
        index += 1
    return rest, options


def cancelled() -> None:
    console.print("\n[yellow]Configuration cancelled by user[/yellow]")
    console.print("[dim]Run 'sgit config' when you are ready[/dim]")


def fail(error: Exception) -> None:
    """Print a one-line error and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
    raise typer.Exit(1)


def run_augmented(ctx: typer.Context, command: str) -> None:
    """Run an augmented subcommand and exit with its status."""
    state = ctx.ensure_object(AppState)
    try:
        argv, options = split_global_options(raw_args(ctx))
        state.apply_options(options)
        code = state.get_router().dispatch(command, argv)
    except SetupCancelled:
        cancelled()
        code = 0
    except SgitError as e:
        logger.debug(f"{command} failed", exc_info=True)
        fail(e)
    raise typer.Exit(code)
