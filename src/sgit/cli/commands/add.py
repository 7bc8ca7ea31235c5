"""Stage files, optionally letting the model pick untracked files."""

import typer

from sgit.cli.runtime import run_augmented


def add(ctx: typer.Context) -> None:
    """Add file contents to the index, with optional AI file selection.

    Without sgit flags this is plain `git add`. With --all-ai every
    untracked file is reviewed by the model before you confirm.

    Examples:
        sgit add src/main.py
        sgit add --all-ai
        sgit add --all-ai --dry-run-ai
        sgit add --ai notes.txt build.log
    """
    run_augmented(ctx, "add")
