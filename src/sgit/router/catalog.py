"""Flag declarations for the augmented subcommands."""

from sgit.router.flags import FlagKind, FlagSpec

VALUED = FlagKind.VALUED


def sgit_flag(name: str, help: str, shorthand=None, **kwargs) -> FlagSpec:
    """Declare one of sgit's own flags. These are never forwarded to git."""
    return FlagSpec(name, shorthand, help=help, augmentation_only=True, **kwargs)


ADD_FLAGS = (
    sgit_flag("all-ai", "analyze all untracked files with AI"),
    sgit_flag("force-ai", "add the analyzed files without asking the model or you"),
    sgit_flag("dry-run-ai", "show the AI recommendations without adding anything"),
    sgit_flag("ai", "use AI even when paths are given"),
    FlagSpec("all", "A", bypasses_ai=True),
    FlagSpec("update", "u", bypasses_ai=True),
    FlagSpec("patch", "p", bypasses_ai=True),
    FlagSpec("interactive", "i", bypasses_ai=True),
    FlagSpec("verbose", "v", bypasses_ai=True),
    FlagSpec("dry-run", "n", bypasses_ai=True),
    FlagSpec("force", "f", bypasses_ai=True),
    FlagSpec("ignore-errors", bypasses_ai=True),
    FlagSpec("ignore-missing", bypasses_ai=True),
    FlagSpec("no-warn-embedded-repo", bypasses_ai=True),
    FlagSpec("renormalize", bypasses_ai=True),
    FlagSpec("chmod", kind=VALUED, bypasses_ai=True),
    FlagSpec("intent-to-add", "N", bypasses_ai=True),
    FlagSpec("refresh", bypasses_ai=True),
    FlagSpec("ignore-removal", bypasses_ai=True),
    FlagSpec("pathspec-from-file", kind=VALUED, bypasses_ai=True),
    FlagSpec("pathspec-file-nul", bypasses_ai=True),
)

COMMIT_FLAGS = (
    sgit_flag("no-ai", "commit without AI assistance", bypasses_ai=True),
    sgit_flag("interactive", "type a replacement for the generated message", shorthand="i"),
    sgit_flag("skip-editor", "confirm the generated message instead of editing it"),
    sgit_flag("ai", "generate a message even when -m or -F is given"),
    FlagSpec("message", "m", VALUED, bypasses_ai=True),
    FlagSpec("file", "F", VALUED, bypasses_ai=True),
    FlagSpec("all", "a"),
    FlagSpec("amend"),
    FlagSpec("verbose", "v"),
    FlagSpec("quiet", "q"),
    FlagSpec("allow-empty"),
    FlagSpec("allow-empty-message"),
    FlagSpec("author", kind=VALUED),
    FlagSpec("date", kind=VALUED),
    FlagSpec("signoff", "s"),
    FlagSpec("no-verify", "n"),
    FlagSpec("patch", "p"),
    FlagSpec("fixup", kind=VALUED),
    FlagSpec("squash", kind=VALUED),
    FlagSpec("reset-author"),
    FlagSpec("template", "t", VALUED),
    FlagSpec("edit", "e"),
    FlagSpec("no-edit"),
)

DIFF_FLAGS = (
    sgit_flag("no-ai", "show the plain git diff", bypasses_ai=True),
    FlagSpec("cached"),
    FlagSpec("staged"),
    FlagSpec("patch", "p"),
    FlagSpec("stat"),
    FlagSpec("numstat"),
    FlagSpec("shortstat"),
    FlagSpec("name-only"),
    FlagSpec("name-status"),
    FlagSpec("unified", "U", VALUED),
    FlagSpec("no-index"),
    FlagSpec("ignore-space-change", "b"),
    FlagSpec("ignore-all-space", "w"),
    FlagSpec("ignore-blank-lines"),
    FlagSpec("word-diff", kind=VALUED, no_opt_value="plain"),
    FlagSpec("color", kind=VALUED, no_opt_value="always"),
    FlagSpec("no-color"),
    FlagSpec("color-words", kind=VALUED, no_opt_value=""),
    FlagSpec("check"),
    FlagSpec("ws-error-highlight", kind=VALUED),
)

DEFAULT_TIMEFRAME = "last 20 commits"

LOG_FLAGS = (
    sgit_flag("ai-analysis", "analyze the listed history with AI"),
    sgit_flag(
        "ai-timeframe",
        "timeframe described to the model",
        kind=VALUED,
        default=DEFAULT_TIMEFRAME,
    ),
    FlagSpec("oneline"),
    FlagSpec("pretty", kind=VALUED, no_opt_value="medium"),
    FlagSpec("format", kind=VALUED),
    FlagSpec("graph"),
    FlagSpec("decorate", kind=VALUED, no_opt_value="short"),
    FlagSpec("all"),
    FlagSpec("since", kind=VALUED),
    FlagSpec("until", kind=VALUED),
    FlagSpec("after", kind=VALUED),
    FlagSpec("before", kind=VALUED),
    FlagSpec("author", kind=VALUED),
    FlagSpec("committer", kind=VALUED),
    FlagSpec("grep", kind=VALUED),
    FlagSpec("max-count", "n", VALUED),
    FlagSpec("skip", kind=VALUED),
    FlagSpec("reverse"),
    FlagSpec("merges"),
    FlagSpec("no-merges"),
    FlagSpec("first-parent"),
    FlagSpec("follow"),
    FlagSpec("patch", "p"),
    FlagSpec("stat"),
    FlagSpec("shortstat"),
    FlagSpec("name-only"),
    FlagSpec("name-status"),
    FlagSpec("abbrev-commit"),
)

MERGE_FLAGS = (
    sgit_flag("ai-help", "ask the model for conflict resolution guidance"),
    sgit_flag("ai-message", "let the model write the merge commit message"),
    FlagSpec("continue", bypasses_ai=True),
    FlagSpec("abort", bypasses_ai=True),
    FlagSpec("quit", bypasses_ai=True),
    FlagSpec("commit"),
    FlagSpec("no-commit"),
    FlagSpec("edit", "e"),
    FlagSpec("no-edit"),
    FlagSpec("ff"),
    FlagSpec("no-ff"),
    FlagSpec("ff-only"),
    FlagSpec("log"),
    FlagSpec("no-log"),
    FlagSpec("stat"),
    FlagSpec("no-stat", "n"),
    FlagSpec("squash"),
    FlagSpec("no-squash"),
    FlagSpec("strategy", "s", VALUED),
    FlagSpec("strategy-option", "X", VALUED),
    FlagSpec("verify-signatures"),
    FlagSpec("no-verify-signatures"),
    FlagSpec("summary"),
    FlagSpec("no-summary"),
    FlagSpec("message", "m", VALUED),
    FlagSpec("quiet", "q"),
    FlagSpec("verbose", "v"),
    FlagSpec("progress"),
    FlagSpec("no-progress"),
    FlagSpec("allow-unrelated-histories"),
)

CATALOG = {
    "add": ADD_FLAGS,
    "commit": COMMIT_FLAGS,
    "diff": DIFF_FLAGS,
    "log": LOG_FLAGS,
    "merge": MERGE_FLAGS,
}
