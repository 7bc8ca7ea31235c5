"""Routing of augmented subcommands between git passthrough and AI flows."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from sgit.config.settings import Settings
from sgit.errors import ConfigurationError, NotARepositoryError
from sgit.git.editor import default_editor
from sgit.git.files import is_binary_file, is_large_file, read_excerpt
from sgit.git.runner import GitError, GitRunner
from sgit.llm.budget import count_words, split_budget, truncate_content
from sgit.llm.client import LLMError, SolarClient
from sgit.llm.prompts import STAGE_DECISION_MAX_CHARS, PromptAssembler, parse_stage_decision
from sgit.router.catalog import CATALOG, DEFAULT_TIMEFRAME
from sgit.router.flags import FlagSet, ParsedArgs, parse_flags
from sgit.router.resolve import MessageResolver, ResolveMode

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LOG_LIMIT = 20
RECENT_COMMIT_COUNT = 5
COUNT_SHORTHAND = re.compile(r"-\d+")


def should_bypass(flags: FlagSet, force: Optional[str] = None) -> bool:
    """Decide whether a command goes straight to git.

    sgit's own disable flags always win. Native bypass flags can be
    overridden by the command's ``force`` flag.
    """
    forced = force is not None and flags.is_active(force)
    for flag in flags.bypass_flags():
        if flag.spec.augmentation_only or not forced:
            return True
    return False


class Router:
    """Runs the augmented subcommands.

    Each command either rebuilds its argument vector for git, or runs the
    AI flow: check preconditions, make sure an API key is configured,
    gather context from git, ask the model, let the user review the
    result, and finish by calling git.
    """

    def __init__(
        self,
        settings: Settings,
        git: GitRunner,
        *,
        console: Console,
        resolver: Optional[MessageResolver] = None,
        language_name: Optional[str] = None,
        client_factory: Optional[Callable[[Settings], SolarClient]] = None,
        setup: Optional[Callable[[Settings], Settings]] = None,
    ):
        """Initialize the router.

        Args:
            settings: Settings loaded at startup.
            git: Git process runner.
            console: Console for user-facing output.
            resolver: Interactive review of generated messages.
            language_name: Response language display name, ``None`` for English.
            client_factory: Builds the LLM client once settings are usable.
            setup: Interactive setup, run when no API key is configured.
        """
        self.settings = settings
        self.git = git
        self.console = console
        self.resolver = resolver or MessageResolver()
        self.assembler = PromptAssembler(language_name)
        self._client_factory = client_factory or self._default_client
        self._setup = setup
        self._client: Optional[SolarClient] = None

    def _default_client(self, settings: Settings) -> SolarClient:
        return SolarClient(
            settings.api_key,
            settings.model_name,
            settings.base_url,
            console=self.console,
        )

    def dispatch(self, command: str, argv: Sequence[str]) -> int:
        """Parse ``argv`` for an augmented subcommand and run it.

        Passthrough paths run without a repository check, so git reports
        on its own terms.

        Returns:
            Process exit code.

        Raises:
            NotARepositoryError: If an AI flow runs outside a repository.
        """
        handlers = {
            "add": self.add,
            "commit": self.commit,
            "diff": self.diff,
            "log": self.log,
            "merge": self.merge,
        }
        return handlers[command](parse_flags(CATALOG[command], argv))

    def forward(self, argv: Sequence[str]) -> int:
        """Hand ``argv`` to git as-is and adopt its exit code."""
        logger.debug(f"Passing through to git: {list(argv)}")
        return self.git.run(argv).exit_code

    def passthrough(self, command: str, parsed: ParsedArgs) -> int:
        return self.forward([command, *parsed.to_argv()])

    def _require_repository(self) -> None:
        if not self.git.is_repository():
            raise NotARepositoryError()

    def _client_for_ai(self) -> SolarClient:
        """Return the LLM client, running first-time setup if needed.

        Raises:
            ConfigurationError: If no API key is available.
        """
        if self._client is not None:
            return self._client
        if not self.settings.has_api_key:
            if self._setup is None:
                raise ConfigurationError("no API key configured. Run 'sgit config' to set one")
            self.settings = self._setup(self.settings)
        if not self.settings.has_api_key:
            raise ConfigurationError("configuration setup failed or was cancelled")
        self._client = self._client_factory(self.settings)
        return self._client

    @staticmethod
    def _ask_model(action: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except LLMError as e:
            raise LLMError(f"error {action}: {e}", e.status_code, e.body) from e

    def _finish(self, args: Sequence[str]) -> None:
        outcome = self.git.run(args)
        if not outcome.ok:
            raise GitError(
                f"git {args[0]} failed with exit status {outcome.exit_code}",
                returncode=outcome.exit_code,
            )

    def _report_words(self, label: str, text: str) -> None:
        _, kept, truncated = truncate_content(text)
        suffix = f" (truncated from {count_words(text)})" if truncated else ""
        self.console.print(f"[dim]{label}: {kept} words{suffix}[/dim]")

    # add

    def add(self, parsed: ParsedArgs) -> int:
        flags = parsed.flags
        forced = flags.is_active("ai")
        if should_bypass(flags, force="ai") or (parsed.positionals and not forced):
            return self.passthrough("add", parsed)

        if not (forced or flags.is_active("all-ai")):
            self.console.print("Nothing specified, nothing added.")
            self.console.print("[dim]Use 'sgit add --all-ai' to review all untracked files with AI[/dim]")
            self.console.print("[dim]Use 'sgit add --ai <files>' to review specific files with AI[/dim]")
            self.console.print("[dim]Use 'sgit add <files>' to add files directly[/dim]")
            return 0

        self._require_repository()
        paths = [path for path in parsed.positionals if not path.startswith("-")]
        candidates = paths or self.git.untracked_files()
        if not candidates:
            self.console.print("No untracked files found")
            return 0

        auto = flags.is_active("force-ai")
        client = None if auto else self._client_for_ai()
        self.console.print(f"[cyan]Reviewing {len(candidates)} file(s)...[/cyan]\n")

        selected: list[str] = []
        for path in candidates:
            reason = self._skip_reason(Path(path))
            if reason:
                self.console.print(f"[dim]- {path}: skipped ({reason})[/dim]")
                continue
            if client is None:
                self.console.print(f"[green]+[/green] {path}")
                selected.append(path)
                continue

            try:
                content = read_excerpt(Path(path), STAGE_DECISION_MAX_CHARS)
                reply = client.complete(self.assembler.stage_decision(path, content))
            except (LLMError, OSError) as e:
                self.console.print(f"[red]Error analyzing {path}:[/red] {e}")
                continue

            should_add, why = parse_stage_decision(reply)
            if should_add:
                self.console.print(f"[green]+[/green] {path}: {why}")
                selected.append(path)
            else:
                self.console.print(f"[yellow]-[/yellow] {path}: {why}")

        if not selected:
            self.console.print("\nNo files recommended for adding")
            return 0

        self.console.print(f"\n[bold]Files to add ({len(selected)}):[/bold]")
        for path in selected:
            self.console.print(f"  {path}")

        if flags.is_active("dry-run-ai"):
            self.console.print("\n[yellow][DRY RUN][/yellow] No files were actually added")
            return 0

        if not auto and not self.resolver.ask("Add these files?"):
            self.console.print("Operation cancelled")
            return 0

        self._finish(["add", "--", *selected])
        self.console.print(f"[green]Added {len(selected)} file(s)[/green]")
        return 0

    @staticmethod
    def _skip_reason(path: Path) -> Optional[str]:
        if not path.is_file():
            return "not a regular file"
        if is_binary_file(path):
            return "binary file"
        if is_large_file(path):
            return "larger than 1 MB"
        return None

    # commit

    def commit(self, parsed: ParsedArgs) -> int:
        flags = parsed.flags
        if should_bypass(flags, force="ai"):
            return self.passthrough("commit", parsed)

        self._require_repository()
        if flags.is_active("all"):
            self.console.print("[dim]Staging modified and deleted files...[/dim]")
            self.git.capture(["add", "-u"])

        if not self.git.has_staged_changes():
            self.console.print("No changes to commit")
            return 0
        diff = self.git.staged_diff()
        if not diff:
            self.console.print("No changes to commit")
            return 0

        client = self._client_for_ai()
        branch = self.git.current_branch()
        recent = self.git.recent_commits(RECENT_COMMIT_COUNT)
        file_list = self.git.staged_file_summary()

        budget = split_budget(self.assembler.commit_sections(diff, branch, recent, file_list))
        suffix = f" (truncated from {budget.original_words})" if budget.truncated else ""
        self.console.print(f"[dim]Content analysis: {budget.total_words} words{suffix}[/dim]")

        prompt = self.assembler.commit_message(diff, branch, recent, file_list)
        message = self._ask_model(
            "generating commit message",
            lambda: client.stream(prompt, label="Generated commit message:\n"),
        )

        if flags.is_active("interactive"):
            final = self.resolver.resolve(ResolveMode.FREEFORM, message)
            if final is None:
                self.console.print("Commit cancelled")
                return 0
        elif flags.is_active("skip-editor"):
            final = self.resolver.resolve(ResolveMode.CONFIRM, message)
            if final is None:
                self.console.print("Commit cancelled")
                return 0
        else:
            final = self.resolver.resolve(ResolveMode.EDITOR, message, default_editor(self.git))
            if final is None:
                self.console.print("Empty commit message, aborting commit")
                return 0

        self._finish(["commit", "-m", final, *parsed.to_argv(exclude=("message", "file"))])
        return 0

    # diff

    def diff(self, parsed: ParsedArgs) -> int:
        if should_bypass(parsed.flags):
            return self.passthrough("diff", parsed)

        self._require_repository()
        output = self.git.capture(["diff", *parsed.to_argv()])
        if not output:
            self.console.print("No changes found")
            return 0

        client = self._client_for_ai()
        self.console.print("[bold]=== GIT DIFF ===[/bold]")
        self.console.out(output, highlight=False)
        self.console.print()
        self._report_words("Diff analysis", output)
        self.console.print("[bold]=== AI SUMMARY ===[/bold]")

        prompt = self.assembler.diff_summary(output)
        self._ask_model("generating diff summary", lambda: client.stream(prompt))
        return 0

    # log

    @staticmethod
    def _has_limit(parsed: ParsedArgs) -> bool:
        if parsed.flags.is_active("max-count"):
            return True
        for arg in parsed.positionals:
            if arg == "--":
                break
            if COUNT_SHORTHAND.fullmatch(arg):
                return True
        return False

    def log(self, parsed: ParsedArgs) -> int:
        flags = parsed.flags
        if not flags.is_active("ai-analysis"):
            return self.passthrough("log", parsed)

        self._require_repository()
        args = ["log", *flags.to_argv()]
        if not self._has_limit(parsed):
            args.append(f"-{DEFAULT_LOG_LIMIT}")
        args.extend(parsed.positionals)

        output = self.git.capture(args)
        if not output:
            self.console.print("No commits found")
            return 0

        client = self._client_for_ai()
        timeframe = str(flags.value("ai-timeframe")) or DEFAULT_TIMEFRAME
        self.console.print("[bold]=== GIT LOG ===[/bold]")
        self.console.out(output, highlight=False)
        self.console.print()
        self._report_words("Log analysis", output)
        self.console.print("[bold]=== AI ANALYSIS ===[/bold]")

        prompt = self.assembler.log_analysis(output, timeframe)
        self._ask_model("analyzing log", lambda: client.stream(prompt))
        return 0

    # merge

    def merge(self, parsed: ParsedArgs) -> int:
        flags = parsed.flags
        wants_ai = flags.is_active("ai-help") or flags.is_active("ai-message")
        if not wants_ai or should_bypass(flags):
            return self.passthrough("merge", parsed)

        self._require_repository()
        source = next((arg for arg in parsed.positionals if not arg.startswith("-")), None)
        if source is None:
            self.console.print("No branch specified for merge")
            return 0

        client = self._client_for_ai()
        target = self.git.current_branch()
        self.console.print(f"[cyan]Merging {source} into {target}...[/cyan]")

        attempt = self.git.run(["merge", *parsed.to_argv(), "--no-commit"])
        if not attempt.ok:
            conflicts = self.git.conflicted_files()
            if not conflicts:
                raise GitError(
                    f"merge failed with exit status {attempt.exit_code}",
                    returncode=attempt.exit_code,
                )
            self._report_conflicts(conflicts, client if flags.is_active("ai-help") else None)
            return 0

        if not (self.git.merge_in_progress() or self.git.has_staged_changes()):
            self.console.print("[green]Merge completed, no merge commit needed[/green]")
            return 0

        if flags.is_active("ai-message"):
            changes = self.git.commits_between(target, source) or "Unable to list merged commits"
            self.console.print("[cyan]Generating merge commit message...[/cyan]")
            prompt = self.assembler.merge_message(source, target, changes)
            message = self._ask_model("generating merge message", lambda: client.complete(prompt))
            self.console.print(Panel(Text(message), title="Merge commit message", border_style="green"))
            self._finish(["commit", "-m", message])
        else:
            self._finish(["commit", "--no-edit"])

        self.console.print("[green]Merge completed successfully[/green]")
        return 0

    def _report_conflicts(self, conflicts: list[str], client: Optional[SolarClient]) -> None:
        self.console.print("\n[red]Merge conflicts detected![/red]")
        for path in conflicts:
            self.console.print(f"  {path}")

        if client is not None:
            self.console.print("\n[cyan]Asking for resolution guidance...[/cyan]")
            try:
                guidance = client.complete(self.assembler.merge_conflict_guidance(conflicts))
            except LLMError as e:
                self.console.print(f"[yellow]Warning:[/yellow] Could not get AI guidance: {e}")
            else:
                self.console.print(Panel(Text(guidance), title="Resolution guidance", border_style="cyan"))

        self.console.print("\nResolve the conflicts, then run:")
        self.console.print("  git add <resolved-files>")
        self.console.print("  sgit merge --continue")
