"""CLI Utility Functions"""

import os
import re
import subprocess
import sys
import tempfile

from aicommit.git import FileStatus, StagedChanges, UnstagedFile
from aicommit.message import ValidationResult
from aicommit.output import (
    accent, bold, colorize_commit_type, dim, error, heading, highlight, success, warning, ARROW,
)

# status -> (group title, marker, color function)
STATUS_STYLES = {
    FileStatus.ADDED: ("Added Files", "+", success),
    FileStatus.MODIFIED: ("Modified Files", "~", warning),
    FileStatus.DELETED: ("Deleted Files", "-", error),
    FileStatus.RENAMED: ("Renamed Files", ARROW, accent),
    FileStatus.COPIED: ("Copied Files", "C", highlight),
    FileStatus.OTHER: ("Other Changes", "?", dim),
}


def ask(question: str, default: str = "") -> str:
    """input() that treats Ctrl-D as the default answer."""
    try:
        return input(question).strip() or default
    except EOFError:
        return default


def confirm(question: str, default: bool = False) -> bool:
    hint = "[Y/n]" if default else "[y/N]"
    answer = ask(f"{question} {dim(hint)} ").lower()
    if not answer:
        return default
    return answer in ('y', 'yes')


def format_changes(changes: StagedChanges, max_per_group: int = 20) -> str:
    """Staged files grouped by status, with a summary line."""
    grouped: dict[FileStatus, list[str]] = {status: [] for status in STATUS_STYLES}
    for change in changes.files:
        label = change.path if change.status is not FileStatus.OTHER else f"{change.code}\t{change.path}"
        grouped[change.status].append(label)

    output = []
    counts = []
    for status, paths in grouped.items():
        if not paths:
            continue
        title, marker, color = STATUS_STYLES[status]
        output.append(bold(color(f"{title}:")))
        for path in paths[:max_per_group]:
            output.append(f"   {color(marker)} {color(path)}")
        if len(paths) > max_per_group:
            output.append(dim(f"   ... and {len(paths) - max_per_group} more"))
        output.append("")
        if status is not FileStatus.OTHER:
            counts.append(color(f"{len(paths)} {status.label}"))

    if counts:
        output.append(bold(f"Summary: {', '.join(counts)} ({changes.total_files} total files)"))
    return "\n".join(output)


def format_diff_summary(diff: str) -> str:
    """'+N additions, -N deletions, N files changed' for a unified diff."""
    added = removed = 0
    files = set()
    for line in diff.split('\n'):
        if line.startswith('+') and not line.startswith('+++'):
            added += 1
        elif line.startswith('-') and not line.startswith('---'):
            removed += 1
        elif line.startswith('diff --git'):
            match = re.match(r'diff --git a/(.+) b/(.+)', line)
            if match:
                files.add(match.group(1))
    return ", ".join([
        success(f"+{added} additions"),
        error(f"-{removed} deletions"),
        accent(f"{len(files)} files changed"),
    ])


def display_message(message: str) -> None:
    """Display commit message with horizontal rules and colored type."""
    colored = colorize_commit_type(message)
    lines = colored.split('\n')
    # Use raw message for width calculation (no ANSI codes)
    width = max((len(line) for line in message.split('\n')), default=40)
    print(f"\n{heading('Generated Commit Message:')}")
    print(dim('─' * width))
    print(bold(lines[0]))
    for line in lines[1:]:
        print(dim(line))
    print(dim('─' * width))


def display_warnings(result: ValidationResult) -> None:
    if not result.warnings:
        return
    for message in result.warnings:
        print(f"  {warning('!')} {dim(message)}")


def commit_text(message: str) -> str:
    """Put the blank line git expects between subject and body."""
    lines = message.strip().split('\n')
    body = '\n'.join(lines[1:]).strip('\n')
    return f"{lines[0]}\n\n{body}" if body else lines[0]


def parse_selection(text: str, count: int) -> list[int]:
    """Parse '1,3-5' into zero-based indexes. Raises ValueError on bad input."""
    indexes: list[int] = []
    for part in text.replace(' ', '').split(','):
        if not part:
            continue
        if '-' in part:
            start, _, end = part.partition('-')
            numbers = range(int(start), int(end) + 1)
        else:
            numbers = [int(part)]
        for n in numbers:
            if not 1 <= n <= count:
                raise ValueError(f"{n} is out of range 1-{count}")
            if n - 1 not in indexes:
                indexes.append(n - 1)
    if not indexes:
        raise ValueError("choose at least one file")
    return indexes


def select_files_to_stage(files: list[UnstagedFile]) -> list[str] | None:
    """Ask what to stage. Returns paths, [] for "everything", None for cancel."""
    print(heading("Available Files:"))
    for i, f in enumerate(files, 1):
        marker = success('+') if f.untracked else warning('~')
        print(f"  {dim(f'{i:>3}.')} {marker} {f.path} {dim(f'({f.label})')}")
    print()
    print("  1. Stage all files for commit")
    print("  2. Select specific files to stage")
    print("  3. Cancel\n")

    while True:
        choice = ask("How would you like to stage files for commit? [1-3]: ", default="3")
        if choice == '1':
            return []
        if choice == '3':
            return None
        if choice == '2':
            break

    while True:
        text = ask(f"Files to stage (e.g. 1,3-5) [1-{len(files)}]: ")
        try:
            return [files[i].path for i in parse_selection(text, len(files))]
        except ValueError as e:
            print(dim(f"  {e}"))


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        subprocess.run([*editor.split(), tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = f.read().strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)
