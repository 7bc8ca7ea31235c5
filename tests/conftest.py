from __future__ import annotations

import io
import subprocess
from typing import Optional

import pytest
from rich.console import Console

from sgit.config.settings import Settings
from sgit.git.runner import CommandOutcome, GitRunner
from sgit.router.engine import Router
from sgit.router.resolve import MessageResolver


class FakeGit(GitRunner):
    """Git runner that records calls and replays scripted results.

    ``responses`` maps an exact argument tuple to (returncode, stdout) for
    captured runs. ``run_codes`` maps an exact argument tuple, or just the
    subcommand name, to the exit code of an interactive run. Anything not
    scripted succeeds with no output.
    """

    def __init__(self) -> None:
        super().__init__()
        self.responses: dict[tuple[str, ...], tuple[int, str]] = {}
        self.run_codes: dict = {}
        self.captured: list[list[str]] = []
        self.interactive: list[list[str]] = []

    def script(self, *args: str, stdout: str = "", returncode: int = 0) -> None:
        self.responses[args] = (returncode, stdout)

    def _capture(self, args):
        self.captured.append(list(args))
        returncode, stdout = self.responses.get(tuple(args), (0, ""))
        return subprocess.CompletedProcess(list(args), returncode, stdout, "")

    def run(self, args):
        self.interactive.append(list(args))
        key = tuple(args)
        if key in self.run_codes:
            return CommandOutcome(self.run_codes[key])
        return CommandOutcome(self.run_codes.get(args[0] if args else "", 0))


class FakeClient:
    """Stands in for SolarClient, replaying replies in order."""

    def __init__(self, *replies: str) -> None:
        self.replies = list(replies) or ["feat: add a thing"]
        self.completed: list[str] = []
        self.streamed: list[str] = []

    def _next(self) -> str:
        return self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]

    def complete(self, prompt: str) -> str:
        self.completed.append(prompt)
        return self._next()

    def stream(self, prompt: str, *, label: Optional[str] = None, on_delta=None) -> str:
        self.streamed.append(prompt)
        return self._next()


def _resolver(reply: str = "", confirm: bool = True, edited: Optional[str] = None) -> MessageResolver:
    return MessageResolver(
        prompt=lambda *args, **kwargs: reply,
        confirm=lambda *args, **kwargs: confirm,
        edit=lambda message, editor: message if edited is None else edited,
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("UPSTAGE_API_KEY", "UPSTAGE_MODEL_NAME", "UPSTAGE_BASE_URL", "SGIT_LANGUAGE", "SGIT_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GIT_EDITOR", "true")


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def output(console):
    """Everything written to the test console so far."""
    return lambda: console.file.getvalue()


@pytest.fixture
def git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def make_resolver():
    return _resolver


@pytest.fixture
def make_router(git, client, console):
    def factory(resolver: Optional[MessageResolver] = None, settings: Optional[Settings] = None, **options) -> Router:
        options.setdefault("client_factory", lambda _settings: client)
        return Router(
            settings or Settings(api_key="up_test_key"),
            git,
            console=console,
            resolver=resolver or _resolver(),
            **options,
        )

    return factory
