from __future__ import annotations

import pytest

from sgit.errors import FlagError
from sgit.router.catalog import CATALOG, COMMIT_FLAGS, DIFF_FLAGS, LOG_FLAGS, MERGE_FLAGS
from sgit.router.engine import should_bypass
from sgit.router.flags import FlagKind, FlagSet, FlagSpec, describe, parse_flags


def test_verbose_is_reconstructed_with_its_shorthand() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["--verbose"])

    assert parsed.to_argv() == ["-v"]


def test_unset_flags_are_never_emitted() -> None:
    parsed = parse_flags(COMMIT_FLAGS, [])

    assert parsed.to_argv() == []
    assert parsed.flags.explicit() == []


def test_augmentation_flags_are_never_forwarded() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["--no-ai", "--skip-editor", "-i", "--amend"])

    assert parsed.flags.is_active("no-ai")
    assert parsed.flags.is_active("interactive")
    assert parsed.to_argv() == ["--amend"]


def test_valued_flag_forms() -> None:
    for argv in (["-m", "fix bug"], ["-mfix bug"], ["--message", "fix bug"], ["--message=fix bug"]):
        parsed = parse_flags(COMMIT_FLAGS, argv)
        assert parsed.flags.value("message") == "fix bug"
        assert parsed.to_argv() == ["-m", "fix bug"]


def test_valued_flag_without_shorthand_uses_equals_form() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["--author", "Ann <ann@example.com>"])

    assert parsed.to_argv() == ["--author=Ann <ann@example.com>"]


def test_empty_valued_flag_is_not_emitted() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["--author="])

    assert parsed.flags["author"].explicitly_set
    assert parsed.to_argv() == []


def test_short_cluster_with_trailing_valued_flag() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["-am", "wip"])

    assert parsed.flags.is_active("all")
    assert parsed.flags.value("message") == "wip"
    assert parsed.to_argv() == ["-m", "wip", "-a"]


def test_cluster_with_unknown_character_is_kept_verbatim() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["-az"])

    assert not parsed.flags.is_active("all")
    assert parsed.positionals == ["-az"]


def test_unknown_options_and_counts_are_positionals() -> None:
    parsed = parse_flags(LOG_FLAGS, ["-20", "--topo-order", "--oneline", "main"])

    assert parsed.positionals == ["-20", "--topo-order", "main"]
    assert parsed.to_argv() == ["--oneline", "-20", "--topo-order", "main"]


def test_double_dash_ends_flag_parsing() -> None:
    parsed = parse_flags(DIFF_FLAGS, ["HEAD~1", "--stat", "--", "--cached"])

    assert not parsed.flags.is_active("cached")
    assert parsed.to_argv() == ["--stat", "HEAD~1", "--", "--cached"]


def test_valued_flag_missing_value_raises() -> None:
    with pytest.raises(FlagError, match="flag needs an argument: --author"):
        parse_flags(COMMIT_FLAGS, ["--author"])

    with pytest.raises(FlagError, match="-m"):
        parse_flags(COMMIT_FLAGS, ["-m"])


def test_boolean_accepts_explicit_value() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["--amend=false", "--signoff=true"])

    assert parsed.flags["amend"].explicitly_set
    assert parsed.to_argv() == ["-s"]

    with pytest.raises(FlagError):
        parse_flags(COMMIT_FLAGS, ["--amend=maybe"])


def test_bare_valued_flag_uses_its_implicit_value() -> None:
    parsed = parse_flags(DIFF_FLAGS, ["--word-diff", "src/app.py"])

    assert parsed.flags.value("word-diff") == "plain"
    assert parsed.positionals == ["src/app.py"]
    assert parsed.to_argv() == ["--word-diff", "src/app.py"]

    assert parse_flags(DIFF_FLAGS, ["--word-diff=color"]).to_argv() == ["--word-diff=color"]
    assert parse_flags(DIFF_FLAGS, ["--color-words"]).to_argv() == ["--color-words"]


def test_last_repeated_value_wins() -> None:
    parsed = parse_flags(LOG_FLAGS, ["--author=ann", "--author=bob"])

    assert parsed.to_argv() == ["--author=bob"]


def test_exclude_drops_named_native_flags() -> None:
    parsed = parse_flags(COMMIT_FLAGS, ["-m", "msg", "--amend"])

    assert parsed.to_argv(exclude=("message",)) == ["--amend"]


@pytest.mark.parametrize("command", sorted(CATALOG))
def test_catalog_round_trip(command: str) -> None:
    specs = CATALOG[command]
    argv = []
    for index, spec in enumerate(specs):
        if spec.kind is FlagKind.BOOLEAN:
            argv.append(f"--{spec.name}")
        else:
            argv.append(f"--{spec.name}=value{index}")
    argv += ["--", "path with spaces"]

    first = parse_flags(specs, argv).to_argv()
    second = parse_flags(specs, first).to_argv()

    assert first == second
    own = {f"--{spec.name}" for spec in specs if spec.augmentation_only}
    assert not own & {token.split("=")[0] for token in first}


@pytest.mark.parametrize("command", sorted(CATALOG))
def test_catalog_names_and_shorthands_are_unique(command: str) -> None:
    FlagSet(CATALOG[command])


def test_duplicate_shorthand_is_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate shorthand"):
        FlagSet([FlagSpec("all", "a"), FlagSpec("amend", "a")])


def test_message_bypasses_unless_forced() -> None:
    assert should_bypass(parse_flags(COMMIT_FLAGS, ["-m", "msg"]).flags, force="ai")
    assert not should_bypass(parse_flags(COMMIT_FLAGS, ["-m", "msg", "--ai"]).flags, force="ai")
    assert not should_bypass(parse_flags(COMMIT_FLAGS, ["--amend"]).flags, force="ai")


def test_disable_flag_beats_force_flag() -> None:
    flags = parse_flags(COMMIT_FLAGS, ["--no-ai", "--ai"]).flags

    assert should_bypass(flags, force="ai")


def test_merge_continue_always_bypasses() -> None:
    assert should_bypass(parse_flags(MERGE_FLAGS, ["--continue", "--ai-help"]).flags)


def test_describe_lists_both_flag_groups() -> None:
    text = describe(COMMIT_FLAGS)

    assert "sgit flags: --no-ai (commit without AI assistance)" in text
    assert "-m, --message=<value>" in text
    assert "git flags forwarded:" in text
