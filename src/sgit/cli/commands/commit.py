"""Commit with an AI-generated message."""

import typer

from sgit.cli.runtime import run_augmented


def commit(ctx: typer.Context) -> None:
    """Record staged changes, drafting the message with AI.

    The message is generated from the staged diff, the branch name, recent
    commits and the list of changed files, then opened in your editor.
    Passing -m, -F or --no-ai commits exactly like git.

    Examples:
        sgit commit
        sgit commit -a --skip-editor
        sgit commit -i
        sgit commit -m "fix: handle empty input"
    """
    run_augmented(ctx, "commit")
