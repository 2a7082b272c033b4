"""Git Analyzer - Extract staged changes from git and commit them."""

import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum


class FileStatus(Enum):
    """Staging-area status of a changed file."""
    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    OTHER = "?"

    @classmethod
    def from_code(cls, code: str) -> 'FileStatus':
        """Map a --name-status code (M, A, R100, ...) to a status."""
        letter = code[:1].upper()
        for status in cls:
            if status.value == letter and status is not cls.OTHER:
                return status
        return cls.OTHER

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class FileChange:
    """A single staged file."""
    status: FileStatus
    path: str
    code: str = ""  # raw status code as reported by git

    @property
    def status_code(self) -> str:
        return self.code or self.status.value


@dataclass(frozen=True)
class StagedChanges:
    """Complete picture of what's staged for commit."""
    files: tuple[FileChange, ...] = field(default_factory=tuple)
    diff: str = ""

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def is_empty(self) -> bool:
        return len(self.files) == 0

    def name_status(self) -> str:
        """Render the file list the way 'git diff --cached --name-status' does."""
        return "\n".join(f"{f.status_code}\t{f.path}" for f in self.files)


@dataclass(frozen=True)
class UnstagedFile:
    """A candidate for staging."""
    path: str
    untracked: bool = False

    @property
    def label(self) -> str:
        return "untracked" if self.untracked else "modified"


class GitError(Exception):
    """Raised when git operations fail."""
    pass


def parse_name_status(output: str) -> tuple[FileChange, ...]:
    """Parse 'git diff --cached --name-status' output, keeping git's order."""
    files = []
    for line in output.strip().split('\n'):
        if not line.strip():
            continue
        code, _, rest = line.partition('\t')
        # Renames and copies list "old<TAB>new"; the new path is what's staged
        path = rest.split('\t')[-1]
        files.append(FileChange(status=FileStatus.from_code(code), path=path, code=code))
    return tuple(files)


class GitAnalyzer:
    """Thin wrapper over the git command line."""

    MAX_OUTPUT = 1024 * 1024  # 1MB cap on blob reads

    def __init__(self):
        self.root: str | None = None
        self._verify_git_available()
        # name-status paths are relative to the top level, so every command runs there
        self.root = self._verify_in_repo()

    def _run_git(self, *args: str, input_text: str | None = None) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                input=input_text,
                cwd=self.root,
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> str:
        """Fail fast if we're not in a git repository. Returns the top level."""
        try:
            return self._run_git('rev-parse', '--show-toplevel').strip()
        except GitError:
            raise GitError("Not inside a git repository. Run 'git init' or cd into a repository.")

    # -- collection --------------------------------------------------------

    def get_staged_changes(self) -> StagedChanges:
        """Get staged files (in git's order) and the full staged diff."""
        files = parse_name_status(self._run_git('diff', '--cached', '--name-status'))
        diff = self._run_git('diff', '--cached').strip() if files else ""
        return StagedChanges(files=files, diff=diff)

    def get_unstaged_files(self) -> list[UnstagedFile]:
        """Modified-but-unstaged files followed by untracked files."""
        modified = self._run_git('diff', '--name-only').strip()
        untracked = self._run_git('ls-files', '--others', '--exclude-standard').strip()
        files = [UnstagedFile(path=p) for p in modified.split('\n') if p]
        files.extend(UnstagedFile(path=p, untracked=True) for p in untracked.split('\n') if p)
        return files

    def recent_commits(self, limit: int = 10) -> str:
        return self._run_git('log', '--oneline', '-n', str(limit)).strip()

    # -- per-file content (used by the context budgeter) -------------------

    def show_head(self, path: str) -> str:
        """File content at HEAD. Raises GitError when the file is new."""
        return self._capped(self._run_git('show', f'HEAD:{path}'))

    def show_staged(self, path: str) -> str:
        """File content in the index."""
        return self._capped(self._run_git('show', f':{path}'))

    def file_diff(self, path: str) -> str:
        return self._capped(self._run_git('diff', '--cached', '--', path))

    def file_size(self, path: str) -> int:
        """Size in bytes of the staged blob."""
        output = self._run_git('cat-file', '-s', f':{path}').strip()
        try:
            return int(output)
        except ValueError:
            raise GitError(f"Unexpected size for {path}: {output!r}")

    def is_binary(self, path: str) -> bool:
        """Whether git treats the staged blob as binary (numstat prints "-\\t-")."""
        numstat = self._run_git('diff', '--cached', '--numstat', '--', path)
        return numstat.startswith('-\t-\t')

    def abspath(self, path: str) -> str:
        """Working tree location of a repo-relative path."""
        return os.path.join(self.root or os.getcwd(), path)

    def _capped(self, text: str) -> str:
        if len(text) > self.MAX_OUTPUT:
            raise GitError(f"Output exceeds {self.MAX_OUTPUT // 1024}KB")
        return text

    # -- mutation ------------------------------------------------------------

    def stage(self, paths: list[str] | None = None) -> None:
        """Stage the given paths, or everything when paths is None."""
        if paths is None:
            self._run_git('add', '.')
        elif paths:
            self._run_git('add', '--', *paths)

    def commit(self, message: str) -> None:
        # Message goes over stdin so quotes and newlines survive untouched
        self._run_git('commit', '-F', '-', input_text=message)

    def push(self, remote: str = 'origin') -> None:
        self._run_git('push', remote)
