"""Print version information."""

from sgit import __version__
from sgit.cli.runtime import console


def version() -> None:
    """Show the sgit version."""
    console.print(f"sgit version {__version__}")
    console.print("Solar LLM-powered git wrapper")
