"""Progress indicator shown while waiting for the first streamed chunk."""

from typing import Optional

from rich.console import Console
from rich.status import Status


class ThinkingIndicator:
    """Spinner drawn by a background refresh thread.

    The owner starts it before issuing a request and stops it on the first
    chunk or on error. Both calls are idempotent.
    """

    def __init__(self, console: Console, message: str = "Thinking..."):
        self.console = console
        self.message = message
        self._status: Optional[Status] = None

    @property
    def spinner(self) -> str:
        """Braille frames on UTF-8 consoles, ``|/-\\`` elsewhere."""
        encoding = (self.console.encoding or "").lower()
        return "dots" if encoding.startswith("utf") else "line"

    @property
    def running(self) -> bool:
        return self._status is not None

    def start(self) -> None:
        if self._status is not None:
            return
        self._status = self.console.status(self.message, spinner=self.spinner)
        self._status.start()

    def stop(self) -> None:
        if self._status is None:
            return
        status, self._status = self._status, None
        status.stop()

    def __enter__(self) -> "ThinkingIndicator":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
