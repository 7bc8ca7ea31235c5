from __future__ import annotations

from sgit.config.settings import language_name, resolve_language
from sgit.llm.prompts import UNCLEAR_DECISION, PromptAssembler, parse_stage_decision


def test_korean_directive_prefixes_prompt() -> None:
    assembler = PromptAssembler(language_name("ko"))

    prompt = assembler.diff_summary("diff --git a/x b/x")

    assert prompt.startswith(
        "IMPORTANT: Please respond in Korean (한국어). All explanations, commit messages, "
        "summaries, and analysis should be written in Korean (한국어).\n\n"
    )
    assert "diff --git a/x b/x" in prompt


def test_english_has_no_directive() -> None:
    assert language_name("en") is None
    assert "IMPORTANT" not in PromptAssembler().log_analysis("abc123 init", "last 20 commits")


def test_invalid_language_flag_warns_and_falls_back() -> None:
    code, warning = resolve_language("xx", "ko")

    assert code == "en"
    assert warning == "Invalid language code 'xx'. Using default 'en'."


def test_language_flag_beats_configuration() -> None:
    assert resolve_language("JA", "ko") == ("ja", None)
    assert resolve_language(None, "ko") == ("ko", None)
    assert resolve_language(None, "klingon") == ("en", None)


def test_commit_prompt_carries_every_section() -> None:
    prompt = PromptAssembler().commit_message(
        diff="+print('hi')",
        branch="feature/greeting",
        recent_commits="abc123 feat: scaffold",
        file_list="A\thello.py (12 B)",
    )

    assert "=== GIT DIFF ===\n+print('hi')" in prompt
    assert "=== CURRENT BRANCH ===\nfeature/greeting" in prompt
    assert "=== RECENT COMMITS (last 5) ===\nabc123 feat: scaffold" in prompt
    assert "=== FILES CHANGED ===\nA\thello.py (12 B)" in prompt


def test_stage_decision_is_not_localized_and_caps_content() -> None:
    prompt = PromptAssembler(language_name("fr")).stage_decision("big.txt", "x" * 5000)

    assert not prompt.startswith("IMPORTANT")
    assert "File: big.txt" in prompt
    assert "x" * 4096 + "\n... [truncated]" in prompt
    assert "x" * 4097 not in prompt


def test_merge_prompts_name_branches_and_paths() -> None:
    assembler = PromptAssembler()

    assert "merging 'feature' into 'main'" in assembler.merge_message("feature", "main", "abc fix")
    assert "- a.py\n- b.py" in assembler.merge_conflict_guidance(["a.py", "b.py"])


def test_parse_stage_decision() -> None:
    assert parse_stage_decision("YES: source file") == (True, "source file")
    assert parse_stage_decision("  no: build artifact\n") == (False, "build artifact")
    assert parse_stage_decision("YES: YES: config") == (True, "config")
    assert parse_stage_decision("Maybe?") == (False, UNCLEAR_DECISION)
