"""Turning a generated commit message into the one the user accepts."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

import typer

from sgit.git.editor import edit_message


class ResolveMode(str, Enum):
    """How the user reviews a generated message."""

    EDITOR = "editor"
    CONFIRM = "confirm"
    FREEFORM = "freeform"


class MessageResolver:
    """Asks the user to accept, replace or edit a generated message.

    The interaction primitives are injectable so flows can be driven
    without a terminal.
    """

    def __init__(
        self,
        prompt: Callable[..., str] = typer.prompt,
        confirm: Callable[..., bool] = typer.confirm,
        edit: Callable[[str, str], str] = edit_message,
    ):
        self.prompt = prompt
        self.confirm = confirm
        self.edit = edit

    def resolve(self, mode: ResolveMode, message: str, editor: Optional[str] = None) -> Optional[str]:
        """Return the final message, or ``None`` when the user declines.

        Ctrl-C or end of input at any prompt counts as declining.

        Args:
            mode: Review style.
            message: Generated message.
            editor: Editor command, required for ``ResolveMode.EDITOR``.
        """
        try:
            return self._resolve(mode, message, editor)
        except (KeyboardInterrupt, typer.Abort):
            return None

    def _resolve(self, mode: ResolveMode, message: str, editor: Optional[str]) -> Optional[str]:
        if mode is ResolveMode.FREEFORM:
            reply = self.prompt(
                "Enter your commit message (Enter to use the generated one)",
                default="",
                show_default=False,
            )
            return reply.strip() or message

        if mode is ResolveMode.CONFIRM:
            return message if self.confirm("Use this commit message?", default=False) else None

        edited = self.edit(message, editor or "")
        return edited or None

    def ask(self, question: str) -> bool:
        """Yes/no question. Ctrl-C or end of input answers no."""
        try:
            return self.confirm(question, default=False)
        except (KeyboardInterrupt, typer.Abort):
            return False
