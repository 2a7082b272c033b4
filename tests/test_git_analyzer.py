"""
Tests for GitAnalyzer: output parsing, plus a real throwaway repository.

Run with:
    pytest tests/test_git_analyzer.py -v
"""

import os
import shutil
import subprocess

import pytest

from aicommit.config import Config
from aicommit.git import ContextBudgeter, GitAnalyzer, GitError
from aicommit.git.analyzer import FileStatus, parse_name_status

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde"


class TestParseNameStatus:

    def test_basic_statuses(self):
        files = parse_name_status("M\tsrc/app.py\nA\tREADME.md\nD\told.txt\n")
        assert [(f.status, f.path) for f in files] == [
            (FileStatus.MODIFIED, "src/app.py"),
            (FileStatus.ADDED, "README.md"),
            (FileStatus.DELETED, "old.txt"),
        ]

    def test_rename_keeps_new_path_and_score(self):
        (change,) = parse_name_status("R087\tsrc/old_name.py\tsrc/new_name.py")
        assert change.status is FileStatus.RENAMED
        assert change.path == "src/new_name.py"
        assert change.status_code == "R087"

    def test_copy(self):
        (change,) = parse_name_status("C100\ta.py\tb.py")
        assert change.status is FileStatus.COPIED
        assert change.path == "b.py"

    def test_unknown_code_is_other(self):
        (change,) = parse_name_status("T\tlink")
        assert change.status is FileStatus.OTHER
        assert change.status_code == "T"

    def test_path_with_spaces(self):
        (change,) = parse_name_status("M\tdocs/user guide.md")
        assert change.path == "docs/user guide.md"

    def test_empty_output(self):
        assert parse_name_status("") == ()
        assert parse_name_status("\n\n") == ()


def _git(repo, *args):
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True)


@pytest.fixture
def repo(tmp_path, monkeypatch):
    """Empty repository with one commit, cwd set to it."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    path = tmp_path / "repo"
    path.mkdir()
    _git(path, "init", "-q")
    _git(path, "config", "user.email", "dev@example.com")
    _git(path, "config", "user.name", "Dev")
    _git(path, "config", "commit.gpgsign", "false")
    (path / "app.py").write_text("def main():\n    return 1\n")
    (path / "old.txt").write_text("bye\n")
    _git(path, "add", ".")
    _git(path, "commit", "-q", "-m", "chore: initial commit")
    monkeypatch.chdir(path)
    return path


@requires_git
class TestGitAnalyzerRepo:

    def test_outside_repository(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
        outside = tmp_path / "plain"
        outside.mkdir()
        monkeypatch.chdir(outside)
        with pytest.raises(GitError, match="Not inside a git repository"):
            GitAnalyzer()

    def test_nothing_staged(self, repo):
        changes = GitAnalyzer().get_staged_changes()
        assert changes.is_empty
        assert changes.diff == ""

    def test_staged_changes(self, repo):
        (repo / "app.py").write_text("def main():\n    return 2\n")
        (repo / "new.py").write_text("print('hi')\n")
        (repo / "old.txt").unlink()
        _git(repo, "add", "-A")

        changes = GitAnalyzer().get_staged_changes()
        statuses = {f.path: f.status for f in changes.files}
        assert statuses == {
            "app.py": FileStatus.MODIFIED,
            "new.py": FileStatus.ADDED,
            "old.txt": FileStatus.DELETED,
        }
        assert "+    return 2" in changes.diff

    def test_unstaged_and_untracked(self, repo):
        (repo / "app.py").write_text("changed\n")
        (repo / "fresh.py").write_text("x\n")
        files = GitAnalyzer().get_unstaged_files()
        assert [(f.path, f.untracked) for f in files] == [("app.py", False), ("fresh.py", True)]

    def test_stage_selected_paths(self, repo):
        (repo / "a.py").write_text("a\n")
        (repo / "b.py").write_text("b\n")
        analyzer = GitAnalyzer()
        analyzer.stage(["a.py"])
        assert [f.path for f in analyzer.get_staged_changes().files] == ["a.py"]

    def test_stage_everything(self, repo):
        (repo / "a.py").write_text("a\n")
        (repo / "b.py").write_text("b\n")
        analyzer = GitAnalyzer()
        analyzer.stage()
        assert {f.path for f in analyzer.get_staged_changes().files} == {"a.py", "b.py"}

    def test_content_reads(self, repo):
        (repo / "app.py").write_text("def main():\n    return 3\n")
        _git(repo, "add", "app.py")
        analyzer = GitAnalyzer()

        assert analyzer.show_head("app.py") == "def main():\n    return 1\n"
        assert analyzer.show_staged("app.py") == "def main():\n    return 3\n"
        assert analyzer.file_size("app.py") == len("def main():\n    return 3\n")
        assert "-    return 1" in analyzer.file_diff("app.py")

    def test_show_head_of_new_file_fails(self, repo):
        (repo / "new.py").write_text("x\n")
        _git(repo, "add", "new.py")
        with pytest.raises(GitError):
            GitAnalyzer().show_head("new.py")

    def test_commit_message_via_stdin(self, repo):
        (repo / "app.py").write_text("updated\n")
        _git(repo, "add", "app.py")
        message = 'fix(app): handle "quoted" input\n\n- keep `backticks` and $VARS'
        analyzer = GitAnalyzer()
        analyzer.commit(message)

        logged = subprocess.run(
            ["git", "log", "-1", "--format=%B"], cwd=repo, capture_output=True, text=True, check=True,
        ).stdout.strip()
        assert logged == message
        assert "fix(app)" in analyzer.recent_commits()

    def test_budgeter_against_real_repo(self, repo):
        (repo / "app.py").write_text("def main():\n    return 42\n")
        (repo / "old.txt").unlink()
        _git(repo, "add", "-A")
        analyzer = GitAnalyzer()

        context = ContextBudgeter(analyzer, Config(), binary_probe=lambda p: False).build(
            analyzer.get_staged_changes()
        )
        assert "=== app.py (M) ===" in context.text
        assert "ORIGINAL FILE (before changes):\ndef main():\n    return 1" in context.text
        assert "=== old.txt (D) ===\n[DELETED FILE]" in context.text

    def test_staged_binary_without_worktree_copy(self, repo):
        (repo / "logo.png").write_bytes(PNG_BYTES)
        _git(repo, "add", "logo.png")
        (repo / "logo.png").unlink()
        analyzer = GitAnalyzer()

        assert analyzer.is_binary("logo.png")
        context = ContextBudgeter(analyzer, Config()).build(analyzer.get_staged_changes())
        assert "=== logo.png (A) ===\n[BINARY FILE - SKIPPED FOR CONTEXT]" in context.text
        assert "PNG" not in context.text.split("=== logo.png (A) ===")[1]

    def test_text_file_is_not_binary(self, repo):
        (repo / "app.py").write_text("def main():\n    return 5\n")
        _git(repo, "add", "app.py")
        assert not GitAnalyzer().is_binary("app.py")


@requires_git
class TestGitAnalyzerFromSubdirectory:

    @pytest.fixture
    def subdir(self, repo, monkeypatch):
        pkg = repo / "pkg"
        pkg.mkdir()
        (pkg / "mod.py").write_text("VALUE = 1\n")
        _git(repo, "add", "pkg/mod.py")
        _git(repo, "commit", "-q", "-m", "feat: add pkg")
        monkeypatch.chdir(pkg)
        return pkg

    def test_root_is_top_level(self, repo, subdir):
        assert os.path.samefile(GitAnalyzer().root, repo)

    def test_budgeter_sees_diffs_and_binaries(self, repo, subdir):
        (subdir / "mod.py").write_text("VALUE = 2\n")
        (subdir / "logo.png").write_bytes(PNG_BYTES)
        _git(repo, "add", "-A")
        analyzer = GitAnalyzer()

        context = ContextBudgeter(analyzer, Config()).build(analyzer.get_staged_changes())
        assert "=== pkg/logo.png (A) ===\n[BINARY FILE - SKIPPED FOR CONTEXT]" in context.text
        assert "DETAILED DIFF:\ndiff --git a/pkg/mod.py b/pkg/mod.py" in context.text
        assert "+VALUE = 2" in context.text

    def test_stage_listed_files(self, repo, subdir):
        (repo / "app.py").write_text("changed\n")
        (subdir / "mod.py").write_text("VALUE = 3\n")
        (subdir / "extra.py").write_text("x\n")
        analyzer = GitAnalyzer()

        unstaged = analyzer.get_unstaged_files()
        assert [f.path for f in unstaged] == ["app.py", "pkg/mod.py", "pkg/extra.py"]
        analyzer.stage([f.path for f in unstaged])
        assert {f.path for f in analyzer.get_staged_changes().files} == {"app.py", "pkg/mod.py", "pkg/extra.py"}
