"""Message Sanitizer - Strip markdown artifacts from raw model output.

Each step is a plain ``str -> str`` function so it can be tested on its own.
`sanitize` runs them in order and repeats until the text stops changing,
which makes it idempotent even when removing one marker exposes another.
"""

import re
from typing import Callable

_FENCE_LINE_RE = re.compile(r'^[ \t]*```[\w+.-]*[ \t]*$', re.MULTILINE)
_BOLD_RE = re.compile(r'\*\*(.*?)\*\*')
_ITALIC_RE = re.compile(r'\*(.*?)\*')
_INLINE_CODE_RE = re.compile(r'`([^`]*)`')
_HEADER_RE = re.compile(r'^[ \t]*#{1,6}[ \t]+', re.MULTILINE)


def strip_code_fences(text: str) -> str:
    """Drop ``` fence lines (with or without a language tag) and stray fences."""
    return _FENCE_LINE_RE.sub('', text).replace('```', '')


def strip_bold(text: str) -> str:
    return _BOLD_RE.sub(r'\1', text)


def strip_italic(text: str) -> str:
    return _ITALIC_RE.sub(r'\1', text)


def strip_inline_code(text: str) -> str:
    return _INLINE_CODE_RE.sub(r'\1', text)


def strip_headers(text: str) -> str:
    return _HEADER_RE.sub('', text)


def trim_lines(text: str) -> str:
    """Trim every line, drop blank ones, rejoin with newlines."""
    return '\n'.join(line.strip() for line in text.split('\n') if line.strip())


TRANSFORMS: list[Callable[[str], str]] = [
    strip_code_fences,
    strip_bold,
    strip_italic,
    strip_inline_code,
    strip_headers,
    trim_lines,
]


def _apply(text: str) -> str:
    for transform in TRANSFORMS:
        text = transform(text)
    return text


def sanitize(text: str) -> str:
    """Clean a raw model response into a bare commit message."""
    # Every transform only removes characters, so this terminates
    cleaned = _apply(text)
    while cleaned != text:
        text, cleaned = cleaned, _apply(cleaned)
    return cleaned
