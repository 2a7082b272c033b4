"""Context Budgeter - Fit per-file content for staged changes into a token budget.

The model sees three things: the file list, the full staged diff, and this
"detailed file analysis" blob. The blob is the only part we shrink. Each
file gets an equal share of a reserved token pool, deleted and binary files
get a placeholder, large files get their diff only, and everything else gets
original/staged/diff sections cut to a line allowance.
"""

import math
import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Protocol

from aicommit.config import Config
from aicommit.git.analyzer import FileChange, FileStatus, GitError, StagedChanges

CHARS_PER_TOKEN = 4
MIN_TOKENS_PER_FILE = 10
MIN_LINES_PER_FILE = 5
MIN_LINES_PER_SECTION = 3
MIN_LARGE_DIFF_LINES = 10
UNKNOWN_FILE_SIZE = 1_000_000  # unreadable size counts as large

CONTEXT_HEADER = "DETAILED FILE ANALYSIS:\n\n"
TRUNCATED_MARKER = "\n\n[CONTEXT TRUNCATED DUE TO SIZE LIMITS]"
DELETED_PLACEHOLDER = "[DELETED FILE]"
BINARY_PLACEHOLDER = "[BINARY FILE - SKIPPED FOR CONTEXT]"
NEW_FILE_PLACEHOLDER = "[NEW FILE - DID NOT EXIST BEFORE]"
NO_DIFF_PLACEHOLDER = "[UNABLE TO GET DIFF]"

BINARY_EXTENSIONS = frozenset({
    '.exe', '.dll', '.so', '.dylib', '.bin', '.dat', '.zip', '.tar', '.gz', '.rar', '.7z',
    '.png', '.jpg', '.jpeg', '.gif', '.bmp', '.ico', '.svg', '.webp', '.tiff',
    '.pdf', '.doc', '.docx', '.xls', '.xlsx', '.ppt', '.pptx',
    '.mp3', '.mp4', '.avi', '.mov', '.wmv', '.flv', '.mkv',
    '.db', '.sqlite', '.sqlite3', '.mdb', '.accdb',
    '.jar', '.war', '.ear', '.class', '.pyc', '.o', '.a', '.lib',
    '.psd', '.ai', '.eps', '.indd', '.sketch', '.xcf', '.heic', '.apng',
    '.wav', '.aiff', '.flac', '.ogg', '.m4a', '.mid', '.midi',
    '.iso', '.img', '.vmdk', '.vhd', '.dmg', '.pkg', '.msi',
    '.swf', '.fla', '.3gp', '.webm', '.m2ts', '.mts',
    '.arj', '.bz2', '.lz', '.lzma', '.xz', '.cab', '.rpm', '.deb', '.z', '.cpio',
    '.ttf', '.otf', '.woff', '.woff2', '.eot',
    '.cr2', '.nef', '.orf', '.sr2', '.raw', '.dng', '.rw2', '.pef', '.arw',
    '.ics', '.pst', '.ost', '.msg', '.eml',
})

# Substrings of `file -b` output that mark a file as binary
BINARY_PROBE_KEYWORDS = ("binary", "executable", "image", "archive")


def estimate_tokens(text: str) -> int:
    """Rough token estimate (~4 chars per token)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def has_binary_extension(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in BINARY_EXTENSIONS


def is_binary_file(path: str) -> bool:
    """Ask `file` what the path is; fall back to the extension list."""
    if not os.path.isfile(path):
        return has_binary_extension(path)
    try:
        result = subprocess.run(
            ['file', '-b', '--', path],
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, OSError):
        return has_binary_extension(path)
    description = result.stdout.strip().lower()
    if not description or description.startswith('cannot open'):
        return has_binary_extension(path)
    keywords = BINARY_PROBE_KEYWORDS
    if 'text' in description:
        # shebang scripts: "Python script, ASCII text executable"
        keywords = tuple(k for k in keywords if k != 'executable')
    return any(keyword in description for keyword in keywords)


def truncate_lines(text: str, max_lines: int, suffix: str = "") -> str:
    """Keep the first max_lines lines, saying so when anything was cut."""
    lines = text.split('\n')
    if len(lines) <= max_lines:
        return text
    kept = '\n'.join(lines[:max_lines])
    return f"{kept}\n... (truncated, showing first {max_lines} lines{suffix})"


def limit_context_size(context: str, max_tokens: int) -> str:
    """Hard-truncate so the result, marker included, stays within max_tokens."""
    if estimate_tokens(context) <= max_tokens:
        return context
    max_chars = max_tokens * CHARS_PER_TOKEN
    keep = max(0, max_chars - len(TRUNCATED_MARKER))
    return (context[:keep] + TRUNCATED_MARKER)[:max_chars]


class ContentSource(Protocol):
    """What the budgeter needs from version control."""

    def show_head(self, path: str) -> str: ...

    def show_staged(self, path: str) -> str: ...

    def file_diff(self, path: str) -> str: ...

    def file_size(self, path: str) -> int: ...

    def is_binary(self, path: str) -> bool: ...

    def abspath(self, path: str) -> str: ...


@dataclass(frozen=True)
class PromptBudget:
    """Token ceiling and the per-file allowance derived from it."""
    ceiling: int
    reserve: int
    file_count: int

    @classmethod
    def from_config(cls, config: Config, file_count: int) -> 'PromptBudget':
        ceiling = config.context_size_limit
        return cls(
            ceiling=ceiling,
            reserve=min(config.context_reserve_tokens, ceiling),
            file_count=file_count,
        )

    @property
    def per_file_tokens(self) -> int:
        return max(MIN_TOKENS_PER_FILE, self.reserve // max(self.file_count, 1))

    @property
    def lines_per_file(self) -> int:
        return max(MIN_LINES_PER_FILE, self.per_file_tokens // CHARS_PER_TOKEN)

    @property
    def lines_per_section(self) -> int:
        """Original, staged and diff sections share a file's allowance."""
        return max(MIN_LINES_PER_SECTION, self.lines_per_file // 3)

    @property
    def large_diff_lines(self) -> int:
        return max(MIN_LARGE_DIFF_LINES, self.lines_per_file // 2)


@dataclass
class FileContext:
    """Everything gathered about one staged file."""
    path: str
    status: FileStatus
    status_code: str
    original_content: str | None = None
    staged_content: str | None = None
    file_diff: str = ""
    size_bytes: int = 0
    is_binary: bool = False
    is_large: bool = False
    error: str | None = None


@dataclass
class BudgetedContext:
    """Result of a budgeting pass."""
    text: str
    files_included: int = 0
    total_files: int = 0
    stopped_early: bool = False

    @property
    def estimated_tokens(self) -> int:
        return estimate_tokens(self.text)

    @property
    def truncated(self) -> bool:
        return self.stopped_early or TRUNCATED_MARKER.strip() in self.text


class ContextBudgeter:
    """Builds the detailed file analysis blob within a token budget."""

    def __init__(
        self,
        source: ContentSource,
        config: Config | None = None,
        binary_probe: Callable[[str], bool] | None = None,
    ):
        self.source = source
        self.config = config or Config()
        self.binary_probe = binary_probe or self.probe_binary

    def probe_binary(self, path: str) -> bool:
        """Staged blob first, then `file` on the working tree copy."""
        return self.source.is_binary(path) or is_binary_file(self.source.abspath(path))

    def build(self, changes: StagedChanges) -> BudgetedContext:
        budget = PromptBudget.from_config(self.config, changes.total_files)
        context = CONTEXT_HEADER
        included = 0
        stopped_early = False

        for change in changes.files:
            file_context = self.collect(change, budget)
            context += self.render(file_context, budget)
            included += 1

            if estimate_tokens(context) > budget.reserve:
                stopped_early = included < changes.total_files
                break

        return BudgetedContext(
            text=limit_context_size(context, budget.ceiling),
            files_included=included,
            total_files=changes.total_files,
            stopped_early=stopped_early,
        )

    def collect(self, change: FileChange, budget: PromptBudget) -> FileContext:
        """Gather what the budget allows for one file. Never raises."""
        ctx = FileContext(path=change.path, status=change.status, status_code=change.status_code)

        if change.status is FileStatus.DELETED:
            return ctx

        try:
            if self.binary_probe(change.path):
                ctx.is_binary = True
                return ctx

            try:
                ctx.size_bytes = self.source.file_size(change.path)
            except (GitError, OSError):
                ctx.size_bytes = UNKNOWN_FILE_SIZE
            ctx.is_large = ctx.size_bytes > self.config.large_file_threshold

            if not ctx.is_large:
                try:
                    ctx.original_content = self.source.show_head(change.path)
                except GitError:
                    ctx.original_content = NEW_FILE_PLACEHOLDER
                ctx.staged_content = self.source.show_staged(change.path)

            try:
                ctx.file_diff = self.source.file_diff(change.path)
            except (GitError, OSError):
                ctx.file_diff = NO_DIFF_PLACEHOLDER
        except (GitError, OSError, UnicodeError) as e:
            ctx.error = str(e).strip() or e.__class__.__name__

        return ctx

    def render(self, ctx: FileContext, budget: PromptBudget) -> str:
        header = f"=== {ctx.path} ({ctx.status_code}) ===\n"

        if ctx.status is FileStatus.DELETED:
            return f"{header}{DELETED_PLACEHOLDER}\n\n"
        if ctx.error is not None:
            return f"{header}[UNABLE TO READ CONTENT: {ctx.error}]\n\n"
        if ctx.is_binary:
            return f"{header}{BINARY_PLACEHOLDER}\n\n"

        if ctx.is_large:
            diff = truncate_lines(ctx.file_diff, budget.large_diff_lines, " of diff")
            return (
                f"{header}[LARGE FILE - DIFF ONLY]\n"
                f"File size: {ctx.size_bytes / 1024:.1f}KB\n"
                f"DIFF:\n{diff}\n\n"
            )

        n = budget.lines_per_section
        return (
            f"{header}"
            f"ORIGINAL FILE (before changes):\n{truncate_lines(ctx.original_content or '', n)}\n\n"
            f"STAGED FILE (after changes):\n{truncate_lines(ctx.staged_content or '', n)}\n\n"
            f"DETAILED DIFF:\n{truncate_lines(ctx.file_diff, n)}\n\n"
        )
