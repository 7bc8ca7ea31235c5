from __future__ import annotations

import click
import pytest

from sgit.errors import EditorError
from sgit.git import editor
from sgit.git.files import format_size, is_binary_file, is_large_file, read_excerpt
from sgit.git.runner import GitError, GitRunner


def test_staged_file_summary_describes_each_path(git, tmp_path) -> None:
    (tmp_path / "new.py").write_text("".join(f"line {n}\n" for n in range(25)))
    (tmp_path / "old.py").write_text("x" * 2048)
    git.script("diff", "--cached", "--name-status", stdout="A\tnew.py\nM\told.py\nD\tgone.py\n")
    git.script("rev-parse", "--show-toplevel", stdout=str(tmp_path))

    summary = git.staged_file_summary()

    assert summary.startswith("A\tnew.py (")
    assert "  Preview:\n    line 0\n" in summary
    assert "    line 19\n    ... (more lines)" in summary
    assert "line 20" not in summary
    assert "M\told.py (2.0 KB)" in summary
    assert summary.endswith("D\tgone.py")


def test_staged_file_summary_empty_index(git) -> None:
    assert git.staged_file_summary() == ""
    assert ["rev-parse", "--show-toplevel"] not in git.captured


def test_has_staged_changes(git) -> None:
    assert not git.has_staged_changes()

    git.script("diff", "--cached", "--quiet", returncode=1)
    assert git.has_staged_changes()

    git.script("diff", "--cached", "--quiet", returncode=128)
    with pytest.raises(GitError):
        git.has_staged_changes()


def test_detached_head_reports_head(git) -> None:
    assert git.current_branch() == "HEAD"


def test_conflicted_files(git) -> None:
    git.script("diff", "--name-only", "--diff-filter=U", stdout="a.py\n\nb.py\n")

    assert git.conflicted_files() == ["a.py", "b.py"]


def test_missing_program_is_a_git_error(tmp_path) -> None:
    runner = GitRunner(program=str(tmp_path / "no-such-git"))

    with pytest.raises(GitError, match="failed to execute"):
        runner.run(["status"])
    with pytest.raises(GitError, match="failed to execute"):
        runner.capture(["status"])


def test_capture_checks_exit_status() -> None:
    runner = GitRunner(program="false")

    with pytest.raises(GitError) as excinfo:
        runner.capture(["status"])

    assert excinfo.value.returncode == 1
    assert runner.capture(["status"], check=False) == ""
    assert runner.run(["status"]).exit_code == 1


def test_binary_detection(tmp_path) -> None:
    text = tmp_path / "notes.txt"
    text.write_text("hello\n")
    blob = tmp_path / "data.raw"
    blob.write_bytes(b"abc\x00def")
    image = tmp_path / "logo.PNG"
    image.write_text("not really an image")

    assert not is_binary_file(text)
    assert is_binary_file(blob)
    assert is_binary_file(image)
    assert not is_large_file(text)
    assert is_large_file(text, limit=3)


def test_read_excerpt_reads_one_past_limit(tmp_path) -> None:
    path = tmp_path / "long.txt"
    path.write_text("a" * 100)

    assert read_excerpt(path, 10) == "a" * 11


def test_format_size() -> None:
    assert format_size(12) == "12 B"
    assert format_size(1536) == "1.5 KB"
    assert format_size(3 * 1024 * 1024) == "3.0 MB"


def test_editor_resolution_order(git, monkeypatch) -> None:
    for name in ("GIT_EDITOR", "VISUAL", "EDITOR"):
        monkeypatch.delenv(name, raising=False)
    git.script("config", "--get", "core.editor", stdout="code --wait")
    monkeypatch.setenv("VISUAL", "emacs")

    assert editor.default_editor(git) == "code --wait"

    monkeypatch.setenv("GIT_EDITOR", "vim")
    assert editor.default_editor(git) == "vim"


def test_editor_fallbacks(git, monkeypatch) -> None:
    for name in ("GIT_EDITOR", "VISUAL", "EDITOR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(editor.shutil, "which", lambda name: "/usr/bin/vi" if name == "vi" else None)

    assert editor.default_editor(git) == "vi"

    monkeypatch.setattr(editor.shutil, "which", lambda name: None)
    with pytest.raises(EditorError, match="no editor found"):
        editor.default_editor(git)


def test_edit_message_strips_comments(monkeypatch) -> None:
    seen = {}

    def fake_edit(text, **kwargs):
        seen.update(kwargs, text=text)
        return "feat: edited\n\n# a comment\n  # indented comment\nbody line\n"

    monkeypatch.setattr(editor.click, "edit", fake_edit)

    assert editor.edit_message("feat: draft", "nano") == "feat: edited\n\nbody line"
    assert seen["text"].startswith("feat: draft\n")
    assert seen["editor"] == "nano"


def test_edit_message_failure(monkeypatch) -> None:
    def broken(text, **kwargs):
        raise click.ClickException("Editing failed")

    monkeypatch.setattr(editor.click, "edit", broken)

    with pytest.raises(EditorError, match="Editing failed"):
        editor.edit_message("x", "nano")
