"""Run any git command unchanged."""

import typer

from sgit.cli.runtime import AppState, fail, raw_args
from sgit.errors import SgitError


def git(ctx: typer.Context) -> None:
    """Run a git command directly, e.g. `sgit git status`.

    Unknown sgit commands end up here as well, so `sgit status` works too.
    """
    state = ctx.ensure_object(AppState)
    try:
        code = state.get_router().forward(raw_args(ctx))
    except SgitError as e:
        fail(e)
    raise typer.Exit(code)
