from __future__ import annotations

import pytest
from typer.testing import CliRunner

from sgit import __version__
from sgit.cli import app
from sgit.cli.runtime import AppState, split_global_options
from sgit.config.settings import Settings, SettingsStore
from sgit.errors import FlagError
from sgit.router.resolve import MessageResolver

from conftest import FakeGit

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.json"


@pytest.fixture
def fake_git(monkeypatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr("sgit.cli.runtime.GitRunner", lambda: fake)
    return fake


def invoke(args, config_path, **kwargs):
    return runner.invoke(app, ["--config", str(config_path), *args], **kwargs)


def test_unknown_command_is_forwarded_with_exit_code(make_router, git) -> None:
    git.run_codes["foo"] = 3

    result = runner.invoke(app, ["foo", "--bar"], obj=AppState(router=make_router()))

    assert result.exit_code == 3
    assert git.interactive == [["foo", "--bar"]]


def test_git_command_forwards_help_verbatim(make_router, git) -> None:
    result = runner.invoke(app, ["git", "status", "--help"], obj=AppState(router=make_router()))

    assert result.exit_code == 0
    assert git.interactive == [["status", "--help"]]


def test_double_dash_survives_for_augmented_commands(make_router, git) -> None:
    result = runner.invoke(app, ["diff", "--no-ai", "--", "a.py"], obj=AppState(router=make_router()))

    assert result.exit_code == 0
    assert git.interactive == [["diff", "--", "a.py"]]


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert f"sgit version {__version__}" in result.output

    assert f"sgit version {__version__}" in runner.invoke(app, ["--version"]).output


def test_invalid_language_warns_and_continues(config_path, fake_git) -> None:
    result = invoke(["--lang", "xx", "log", "--oneline"], config_path)

    assert result.exit_code == 0
    assert "Invalid language code 'xx'" in result.output
    assert fake_git.interactive == [["log", "--oneline"]]


def test_language_flag_reaches_prompts(config_path, fake_git) -> None:
    state = AppState()

    invoke(["--lang", "ko", "status"], config_path, obj=state)

    assert state.router.assembler.language_name == "Korean (한국어)"


def test_global_options_after_subcommand(tmp_path, fake_git) -> None:
    config_path = tmp_path / "after.json"
    state = AppState()

    result = runner.invoke(app, ["diff", "--lang", "ko", f"--config={config_path}"], obj=state)

    assert result.exit_code == 0
    assert fake_git.captured == [["rev-parse", "--git-dir"], ["diff"]]
    assert state.config_path == config_path
    assert state.router.assembler.language_name == "Korean (한국어)"


def test_global_option_without_value(config_path, fake_git) -> None:
    result = invoke(["log", "--ai-analysis", "--lang"], config_path)

    assert result.exit_code == 1
    assert "flag needs an argument: --lang" in result.output


def test_split_global_options_stops_at_double_dash() -> None:
    argv, options = split_global_options(["--lang=ja", "--stat", "--", "--config", "x"])

    assert argv == ["--stat", "--", "--config", "x"]
    assert options == {"--lang": "ja"}

    with pytest.raises(FlagError):
        split_global_options(["--config"])


def test_end_of_input_at_review_cancels_commit(make_router, git, output) -> None:
    git.script("diff", "--cached", "--quiet", returncode=1)
    git.script("diff", "--cached", stdout="+print('hi')")
    router = make_router(resolver=MessageResolver())

    result = runner.invoke(app, ["commit", "--skip-editor"], input="", obj=AppState(router=router))

    assert result.exit_code == 0
    assert "Aborted" not in result.output
    assert "Commit cancelled" in output()
    assert git.interactive == []


def test_outside_repository_exits_with_error(config_path, fake_git) -> None:
    fake_git.script("rev-parse", "--git-dir", returncode=128)

    result = invoke(["commit"], config_path)

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "not a git repository" in result.output


def test_flag_error_exits_with_error(config_path, fake_git) -> None:
    result = invoke(["commit", "-m"], config_path)

    assert result.exit_code == 1
    assert "flag needs an argument: -m" in result.output


def test_config_show_masks_key(config_path) -> None:
    SettingsStore(config_path).save(Settings(api_key="up_abcdef", language="ja"))

    result = invoke(["config", "--show"], config_path)

    assert result.exit_code == 0
    assert "up_******" in result.output
    assert "up_abcdef" not in result.output
    assert "Japanese" in result.output


def test_config_setup_cancelled(config_path, monkeypatch) -> None:
    def cancel(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr("sgit.config.wizard.typer.prompt", cancel)

    result = invoke(["config"], config_path)

    assert result.exit_code == 0
    assert "Configuration cancelled by user" in result.output
    assert not config_path.exists()
