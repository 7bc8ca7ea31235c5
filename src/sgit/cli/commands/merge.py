"""Merge with AI conflict guidance and merge messages."""

import typer

from sgit.cli.runtime import run_augmented


def merge(ctx: typer.Context) -> None:
    """Join histories, with optional AI help.

    --ai-help explains conflicts when the merge stops; --ai-message writes
    the merge commit message. Without them this is plain `git merge`.

    Examples:
        sgit merge feature/login
        sgit merge --ai-help feature/login
        sgit merge --ai-message --no-ff feature/login
        sgit merge --continue
    """
    run_augmented(ctx, "merge")
