"""CLI module for sgit."""

import logging
import os
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler
from typer.core import TyperGroup

from sgit import __version__
from sgit.cli.runtime import RAW_ARGS_KEY, AppState, console, err_console

PASSTHROUGH_COMMAND = "git"

# Commands that read their arguments raw instead of through click's parser.
RAW_CONTEXT = {"allow_extra_args": True, "ignore_unknown_options": True}
VERBATIM_CONTEXT = {**RAW_CONTEXT, "help_option_names": []}


class PassthroughGroup(TyperGroup):
    """Command group that hands unknown subcommands to git.

    Also records each subcommand's arguments exactly as typed, so flags git
    understands but sgit does not, and ``--`` separators, survive intact.
    """

    def resolve_command(self, ctx, args):
        name = args[0]
        if (
            self.get_command(ctx, name) is None
            and not name.startswith("-")
            and not ctx.resilient_parsing
        ):
            ctx.meta[RAW_ARGS_KEY] = list(args)
            return PASSTHROUGH_COMMAND, self.get_command(ctx, PASSTHROUGH_COMMAND), list(args)

        ctx.meta[RAW_ARGS_KEY] = list(args[1:])
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="sgit",
    cls=PassthroughGroup,
    help="git with AI assistance. Unknown commands are passed to git unchanged.",
    add_completion=True,
    no_args_is_help=False,
)


def configure_logging() -> None:
    """Send log records to stderr through rich. ``SGIT_DEBUG`` enables debug output."""
    level = logging.DEBUG if os.environ.get("SGIT_DEBUG") else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"sgit version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    lang: Annotated[
        Optional[str],
        typer.Option("--lang", help="Response language (en, ko, ja, zh, es, fr, de)"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="Config file (default ~/.config/sgit/config.json)", dir_okay=False),
    ] = None,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit."),
    ] = None,
) -> None:
    """git with AI assistance. Unknown commands are passed to git unchanged."""
    configure_logging()

    state = ctx.ensure_object(AppState)
    if config is not None:
        state.config_path = config
    if lang is not None:
        state.language = lang

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


from sgit.cli.commands import (
    add,
    commit,
    diff,
    git,
    log,
    merge,
    version,
)
from sgit.cli.commands import (
    config as config_cmd,
)
from sgit.router.catalog import ADD_FLAGS, COMMIT_FLAGS, DIFF_FLAGS, LOG_FLAGS, MERGE_FLAGS
from sgit.router.flags import describe

app.command(context_settings=RAW_CONTEXT, epilog=describe(ADD_FLAGS))(add.add)
app.command(context_settings=RAW_CONTEXT, epilog=describe(COMMIT_FLAGS))(commit.commit)
app.command(context_settings=RAW_CONTEXT, epilog=describe(DIFF_FLAGS))(diff.diff)
app.command(context_settings=RAW_CONTEXT, epilog=describe(LOG_FLAGS))(log.log)
app.command(context_settings=RAW_CONTEXT, epilog=describe(MERGE_FLAGS))(merge.merge)

app.command(name=PASSTHROUGH_COMMAND, context_settings=VERBATIM_CONTEXT)(git.git)
app.command(name="config")(config_cmd.config)
app.command()(version.version)


if __name__ == "__main__":
    app()
