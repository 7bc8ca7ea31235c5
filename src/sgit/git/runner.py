"""Subprocess access to the git binary."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from sgit.errors import SgitError
from sgit.git.files import content_preview, format_size, is_binary_file

logger = logging.getLogger(__name__)

PREVIEW_MAX_BYTES = 50 * 1024
PREVIEW_MAX_LINES = 20


class GitError(SgitError):
    """Exception raised for git command failures."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


@dataclass
class CommandOutcome:
    """Result of an interactive git run.

    Output went straight to the user's terminal, so only the exit code is
    known.
    """

    exit_code: int
    stdout_relayed: bool = True
    stderr_relayed: bool = True

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class GitRunner:
    """Runs git either interactively or with captured output.

    Interactive runs inherit the terminal so pagers, editors and prompts
    work as they do under plain git. Captured runs buffer stdout fully
    before returning it.
    """

    def __init__(self, program: str = "git", cwd: Optional[Path] = None):
        """Initialize the runner.

        Args:
            program: Git executable to invoke.
            cwd: Working directory (defaults to the process's).
        """
        self.program = program
        self.cwd = cwd

    def _argv(self, args: Sequence[str]) -> list[str]:
        return [self.program, *args]

    def run(self, args: Sequence[str]) -> CommandOutcome:
        """Run git with inherited stdin, stdout and stderr.

        Args:
            args: Arguments after the program name.

        Returns:
            CommandOutcome carrying git's exit code.

        Raises:
            GitError: If the executable cannot be started.
        """
        logger.debug(f"git (interactive): {list(args)}")
        try:
            result = subprocess.run(self._argv(args), cwd=self.cwd)
        except OSError as e:
            raise GitError(f"failed to execute {self.program}: {e}") from e
        logger.debug(f"git exited with {result.returncode}")
        return CommandOutcome(result.returncode)

    def _capture(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        logger.debug(f"git (captured): {list(args)}")
        try:
            result = subprocess.run(
                self._argv(args),
                cwd=self.cwd,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise GitError(f"failed to execute {self.program}: {e}") from e
        logger.debug(f"git exited with {result.returncode}")
        return result

    def capture(self, args: Sequence[str], check: bool = True) -> str:
        """Run git and return its stdout.

        Args:
            args: Arguments after the program name.
            check: Whether to raise on non-zero exit.

        Returns:
            Command stdout with surrounding whitespace removed.

        Raises:
            GitError: If the command fails and check is True.
        """
        result = self._capture(args)
        if check and result.returncode != 0:
            stderr = result.stderr.strip()
            raise GitError(
                f"git {' '.join(args[:1])} failed: {stderr or f'exit status {result.returncode}'}",
                returncode=result.returncode,
                stderr=stderr,
            )
        return result.stdout.strip()

    def returncode(self, args: Sequence[str]) -> int:
        """Run git quietly and return only its exit code."""
        return self._capture(args).returncode

    def is_repository(self) -> bool:
        return self.returncode(["rev-parse", "--git-dir"]) == 0

    def toplevel(self) -> Path:
        return Path(self.capture(["rev-parse", "--show-toplevel"]))

    def has_staged_changes(self) -> bool:
        """Check the index against HEAD.

        Raises:
            GitError: If git reports anything other than "same" or "different".
        """
        code = self.returncode(["diff", "--cached", "--quiet"])
        if code not in (0, 1):
            raise GitError("unable to check staged changes", returncode=code)
        return code == 1

    def staged_diff(self) -> str:
        return self.capture(["diff", "--cached"])

    def current_branch(self) -> str:
        """Current branch name, or ``HEAD`` when detached."""
        return self.capture(["branch", "--show-current"], check=False) or "HEAD"

    def recent_commits(self, count: int = 5) -> str:
        """One-line summaries of the latest non-merge commits."""
        return self.capture(["log", f"-{count}", "--oneline", "--no-merges"], check=False)

    def staged_file_summary(self) -> str:
        """Describe staged files with status, size and a preview of new text files.

        Returns:
            One entry per staged path, or an empty string when nothing is
            staged.
        """
        output = self.capture(["diff", "--cached", "--name-status"])
        if not output:
            return ""

        root = self.toplevel()
        entries = []
        for line in output.splitlines():
            fields = line.split("\t")
            if len(fields) < 2:
                continue
            status, path = fields[0], fields[-1]
            entry = f"{status}\t{path}"

            full_path = root / path
            if full_path.is_file():
                size = full_path.stat().st_size
                entry += f" ({format_size(size)})"
                if status == "A" and size <= PREVIEW_MAX_BYTES and not is_binary_file(full_path):
                    preview = content_preview(full_path, PREVIEW_MAX_LINES)
                    if preview:
                        indented = "\n".join(f"    {preview_line}" for preview_line in preview.splitlines())
                        entry += f"\n  Preview:\n{indented}"
            entries.append(entry)

        return "\n".join(entries)

    def untracked_files(self) -> list[str]:
        output = self.capture(["ls-files", "--others", "--exclude-standard"])
        return [line for line in output.splitlines() if line.strip()]

    def conflicted_files(self) -> list[str]:
        output = self.capture(["diff", "--name-only", "--diff-filter=U"], check=False)
        return [line for line in output.splitlines() if line.strip()]

    def merge_in_progress(self) -> bool:
        return self.returncode(["rev-parse", "-q", "--verify", "MERGE_HEAD"]) == 0

    def commits_between(self, target: str, source: str) -> str:
        """One-line summaries of commits on ``source`` that ``target`` lacks."""
        return self.capture(["log", "--oneline", "--no-merges", f"{target}..{source}"], check=False)

    def config_value(self, key: str) -> Optional[str]:
        value = self.capture(["config", "--get", key], check=False)
        return value or None
