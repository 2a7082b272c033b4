"""
Tests for CLI helpers and output formatting.

Shows sample output for each scenario. Run with:
    pytest tests/test_cli_utils.py -v
    pytest tests/test_cli_utils.py -v -s   # see actual terminal output
"""

import re

import pytest

from aicommit.cli.utils import (
    commit_text, confirm, format_changes, format_diff_summary, parse_selection, select_files_to_stage,
)
from aicommit.git.analyzer import FileChange, FileStatus, StagedChanges, UnstagedFile

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    def _strip(text: str) -> str:
        return ANSI_RE.sub('', text)
    return _strip


@pytest.fixture
def answers(monkeypatch):
    """Feed scripted answers to input()."""
    def _feed(*values):
        it = iter(values)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(it))
    return _feed


def _changes(*entries, diff=""):
    files = tuple(FileChange(status=FileStatus.from_code(code), path=path, code=code) for code, path in entries)
    return StagedChanges(files=files, diff=diff)


class TestCommitText:

    def test_subject_only(self):
        assert commit_text("feat: add x") == "feat: add x"

    def test_inserts_blank_line_before_body(self):
        assert commit_text("feat: add x\n- one\n- two") == "feat: add x\n\n- one\n- two"

    def test_existing_blank_line_not_doubled(self):
        assert commit_text("fix: y\n\nbody") == "fix: y\n\nbody"

    def test_strips_surrounding_whitespace(self):
        assert commit_text("\n  docs: z\n\n") == "docs: z"


class TestParseSelection:

    @pytest.mark.parametrize("text, expected", [
        ("1", [0]),
        ("1,3", [0, 2]),
        ("2-4", [1, 2, 3]),
        ("1, 3-5", [0, 2, 3, 4]),
        ("3,3,1-3", [2, 0, 1]),
    ])
    def test_valid(self, text, expected):
        assert parse_selection(text, 5) == expected

    @pytest.mark.parametrize("text", ["", "0", "6", "a", "1-x", ",,"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_selection(text, 5)


class TestFormatChanges:

    def test_groups_and_summary(self, strip_ansi):
        changes = _changes(("A", "new.py"), ("M", "app.py"), ("M", "cli.py"), ("D", "old.py"), ("R100", "moved.py"))
        out = strip_ansi(format_changes(changes))

        assert "Added Files:\n   + new.py" in out
        assert "Modified Files:\n   ~ app.py\n   ~ cli.py" in out
        assert "Deleted Files:\n   - old.py" in out
        assert "Renamed Files:" in out
        assert "Summary: 1 added, 2 modified, 1 deleted, 1 renamed (5 total files)" in out

    def test_collapses_long_groups(self, strip_ansi):
        changes = _changes(*(("M", f"f{i}.py") for i in range(25)))
        out = strip_ansi(format_changes(changes, max_per_group=20))
        assert "f19.py" in out
        assert "f20.py" not in out
        assert "... and 5 more" in out

    def test_other_status_shows_code(self, strip_ansi):
        out = strip_ansi(format_changes(_changes(("T", "link"))))
        assert "Other Changes:" in out
        assert "T\tlink" in out


class TestFormatDiffSummary:

    def test_counts(self, strip_ansi):
        diff = (
            "diff --git a/a.py b/a.py\n"
            "--- a/a.py\n"
            "+++ b/a.py\n"
            "@@ -1,2 +1,2 @@\n"
            "-old\n"
            "+new\n"
            "+more\n"
            "diff --git a/b.py b/b.py\n"
            "+b\n"
        )
        assert strip_ansi(format_diff_summary(diff)) == "+3 additions, -1 deletions, 2 files changed"

    def test_empty(self, strip_ansi):
        assert strip_ansi(format_diff_summary("")) == "+0 additions, -0 deletions, 0 files changed"


class TestPrompts:

    @pytest.mark.parametrize("answer, default, expected", [
        ("y", False, True),
        ("YES", False, True),
        ("n", True, False),
        ("", True, True),
        ("", False, False),
    ])
    def test_confirm(self, answers, answer, default, expected):
        answers(answer)
        assert confirm("Continue?", default=default) is expected

    def test_stage_all(self, answers):
        answers("1")
        assert select_files_to_stage([UnstagedFile("a.py")]) == []

    def test_stage_cancel(self, answers):
        answers("3")
        assert select_files_to_stage([UnstagedFile("a.py")]) is None

    def test_stage_selected(self, answers, capsys):
        files = [UnstagedFile("a.py"), UnstagedFile("b.py", untracked=True), UnstagedFile("c.py")]
        answers("2", "9", "2-3")
        assert select_files_to_stage(files) == ["b.py", "c.py"]
        assert "9 is out of range 1-3" in capsys.readouterr().out
