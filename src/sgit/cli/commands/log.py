"""Commit history, optionally analyzed by the model."""

import typer

from sgit.cli.runtime import run_augmented


def log(ctx: typer.Context) -> None:
    """Show commit logs, with optional AI analysis.

    Examples:
        sgit log --oneline
        sgit log --ai-analysis
        sgit log --ai-analysis --since="2 weeks ago" --ai-timeframe="last two weeks"
    """
    run_augmented(ctx, "log")
