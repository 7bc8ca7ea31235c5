"""Show changes followed by an AI summary."""

import typer

from sgit.cli.runtime import run_augmented


def diff(ctx: typer.Context) -> None:
    """Show changes and summarize them with AI.

    Examples:
        sgit diff
        sgit diff --cached
        sgit diff HEAD~3 -- src/
        sgit diff --no-ai
    """
    run_augmented(ctx, "diff")
