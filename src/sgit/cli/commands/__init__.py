"""CLI commands for sgit."""

from sgit.cli.commands import (
    add,
    commit,
    config,
    diff,
    git,
    log,
    merge,
    version,
)

__all__ = [
    "add",
    "commit",
    "config",
    "diff",
    "git",
    "log",
    "merge",
    "version",
]
