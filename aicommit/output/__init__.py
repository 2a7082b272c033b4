"""Terminal Output Formatting Package

Colour and symbol helpers for everything the CLI prints. Colour is decided
once per stream at import time: NO_COLOR wins, FORCE_COLOR forces it on,
otherwise only real terminals get escape codes.
"""

import os
import re
import sys
import threading
import time
from typing import Callable, TextIO

ANSI_RE = re.compile(r'\033\[[0-9;]*[A-Za-z]')


class Ansi:
    """SGR escape codes."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    CLEAR_LINE = '\r\033[K'


def _enable_windows_ansi() -> bool:
    try:
        import ctypes
        kernel32 = ctypes.windll.kernel32
        # ENABLE_PROCESSED_OUTPUT | ENABLE_WRAP_AT_EOL_OUTPUT | ENABLE_VIRTUAL_TERMINAL_PROCESSING
        return bool(kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7))
    except (AttributeError, OSError):
        return False


def stream_supports_color(stream: TextIO) -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    isatty = getattr(stream, 'isatty', None)
    if isatty is None or not isatty():
        return False
    return _enable_windows_ansi() if sys.platform == 'win32' else True


def stream_supports_unicode(stream: TextIO) -> bool:
    try:
        '✓━⠋'.encode(getattr(stream, 'encoding', None) or 'utf-8')
    except (UnicodeEncodeError, LookupError):
        return False
    return True


COLORS_ENABLED = stream_supports_color(sys.stdout)
UNICODE_ENABLED = stream_supports_unicode(sys.stdout)


def _symbol(fancy: str, plain: str) -> str:
    return fancy if UNICODE_ENABLED else plain


CHECK = _symbol('✓', '[OK]')
CROSS = _symbol('✗', '[X]')
WARN = _symbol('⚠', '[!]')
ARROW = _symbol('→', '->')
BULLET = _symbol('•', '*')
RULE = _symbol('━', '=')


def paint(text: str, *codes: str) -> str:
    """Wrap text in escape codes, or return it untouched when colour is off."""
    if not COLORS_ENABLED or not codes or not text:
        return text
    return f"{''.join(codes)}{text}{Ansi.RESET}"


def _painter(*codes: str) -> Callable[[str], str]:
    def _paint(text: str) -> str:
        return paint(text, *codes)
    return _paint


success = _painter(Ansi.GREEN)
error = _painter(Ansi.RED)
warning = _painter(Ansi.YELLOW)
info = _painter(Ansi.CYAN)
dim = _painter(Ansi.DIM)
bold = _painter(Ansi.BOLD)
highlight = _painter(Ansi.MAGENTA)
accent = _painter(Ansi.BLUE)
heading = _painter(Ansi.BOLD, Ansi.CYAN)


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub('', text)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning(WARN)} {warning(message)}", file=sys.stderr)


# type -> colour of the "type(scope)!:" prefix
COMMIT_TYPE_COLORS = {
    'feat': Ansi.GREEN,
    'fix': Ansi.RED,
    'perf': Ansi.GREEN,
    'refactor': Ansi.YELLOW,
    'revert': Ansi.YELLOW,
    'docs': Ansi.CYAN,
    'ci': Ansi.CYAN,
    'build': Ansi.CYAN,
    'test': Ansi.MAGENTA,
    'chore': Ansi.DIM,
    'style': Ansi.DIM,
}

_PREFIX_RE = re.compile(
    r"^(?P<emoji>\W*)(?P<type>\w+)(?P<bang1>!)?(?P<scope>\([^)]*\))?(?P<bang2>!)?:"
)


def colorize_commit_type(message: str) -> str:
    """Colour the type prefix of the subject; a breaking "!" is shown in red."""
    if not COLORS_ENABLED:
        return message
    subject, sep, body = message.partition('\n')
    match = _PREFIX_RE.match(subject)
    color = COMMIT_TYPE_COLORS.get(match.group('type')) if match else None
    if not color:
        return message

    prefix = (
        match.group('emoji')
        + paint(match.group('type'), Ansi.BOLD, color)
        + paint(match.group('bang1') or '', Ansi.BOLD, Ansi.RED)
        + paint(match.group('scope') or '', color)
        + paint(match.group('bang2') or '', Ansi.BOLD, Ansi.RED)
        + paint(':', color)
    )
    return prefix + subject[match.end():] + sep + body


class Spinner:
    """Animated spinner with elapsed seconds. Use as context manager.

    Draws only when stdout is a terminal, so piped output stays clean.
    """
    FRAMES_UNICODE = '⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏'
    FRAMES_ASCII = '-\\|/'
    INTERVAL = 0.08

    def __init__(self, label: str = ""):
        self.label = label
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._started = 0.0

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._started

    def _spin(self) -> None:
        tick = 0
        while not self._stop.is_set():
            frame = self._frames[tick % len(self._frames)]
            print(f"{Ansi.CLEAR_LINE}{frame} {self.label} {dim(f'{self.elapsed:.0f}s')}", end='', flush=True)
            tick += 1
            self._stop.wait(self.INTERVAL)

    def __enter__(self) -> 'Spinner':
        self._started = time.monotonic()
        if sys.stdout.isatty():
            self._stop.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
            print(Ansi.CLEAR_LINE, end='', flush=True)


__all__ = [
    "Ansi", "ANSI_RE", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "WARN", "ARROW", "BULLET", "RULE",
    "paint", "success", "error", "warning", "info", "dim", "bold", "highlight", "accent", "heading",
    "strip_ansi", "print_success", "print_error", "print_warning",
    "colorize_commit_type", "Spinner", "COMMIT_TYPE_COLORS",
]
