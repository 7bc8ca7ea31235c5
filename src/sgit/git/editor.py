"""Commit message editing in the user's configured editor."""

from __future__ import annotations

import logging
import os
import shutil
from typing import Optional

import click

from sgit.errors import EditorError
from sgit.git.runner import GitRunner

logger = logging.getLogger(__name__)

FALLBACK_EDITORS = ("nano", "vim", "vi")

MESSAGE_TEMPLATE = """\
{message}

# Please review the AI-generated commit message above. Lines starting
# with '#' will be ignored, and an empty message aborts the commit.
"""


def default_editor(git: GitRunner) -> str:
    """Resolve the editor the way git does.

    Order: ``GIT_EDITOR``, ``core.editor``, ``VISUAL``, ``EDITOR``, then the
    first of nano, vim or vi found on PATH.

    Raises:
        EditorError: If no editor can be found.
    """
    editor: Optional[str] = os.environ.get("GIT_EDITOR") or git.config_value("core.editor")
    editor = editor or os.environ.get("VISUAL") or os.environ.get("EDITOR")
    if editor:
        return editor

    for candidate in FALLBACK_EDITORS:
        if shutil.which(candidate):
            return candidate

    raise EditorError(
        "no editor found. Set GIT_EDITOR, VISUAL or EDITOR, or configure core.editor"
    )


def strip_comments(text: str) -> str:
    """Drop ``#`` comment lines and surrounding whitespace."""
    lines = [line for line in text.splitlines() if not line.lstrip().startswith("#")]
    return "\n".join(lines).strip()


def edit_message(message: str, editor: str) -> str:
    """Open ``editor`` on ``message`` and return the edited text without comments.

    Raises:
        EditorError: If the editor cannot be started or exits with an error.
    """
    logger.debug(f"Opening editor: {editor}")
    try:
        edited = click.edit(
            MESSAGE_TEMPLATE.format(message=message),
            editor=editor,
            extension=".gitcommit",
            require_save=False,
        )
    except click.ClickException as e:
        raise EditorError(f"editor failed: {e.format_message()}") from e
    return strip_comments(edited or "")
