"""Commit message linting. Advisory only: nothing here blocks a commit."""

import re
from dataclasses import dataclass, field

# Leading gitmoji (or any non-word prefix), then type, optional scope, optional "!"
SUBJECT_RE = re.compile(
    r'^(?P<emoji>[^\w\s]*\s*)'
    r'(?P<type>[a-z]+)'
    r'(?P<bang1>!)?'
    r'(?:\((?P<scope>[^)]*)\))?'
    r'(?P<bang2>!)?'
    r':\s*(?P<description>.*)$'
)

BREAKING_FOOTER_RE = re.compile(r'^BREAKING[ -]CHANGE:', re.MULTILINE)

PAST_TENSE_VERBS = frozenset({
    'added', 'adjusted', 'bumped', 'changed', 'cleaned', 'converted', 'corrected',
    'created', 'deleted', 'deprecated', 'disabled', 'documented', 'dropped',
    'enabled', 'extracted', 'fixed', 'handled', 'implemented', 'improved',
    'introduced', 'merged', 'migrated', 'modified', 'moved', 'optimized',
    'patched', 'prevented', 'refactored', 'reformatted', 'removed', 'renamed',
    'reorganized', 'replaced', 'resolved', 'restored', 'restructured',
    'reverted', 'rewrote', 'simplified', 'split', 'switched', 'tweaked',
    'updated', 'upgraded', 'wrote',
})

# Styles whose subject carries a "type(scope):" prefix
TYPED_STYLES = {"conventional", "detailed"}


@dataclass
class ValidationResult:
    """Outcome of linting a message. Always valid; warnings are advisory."""
    valid: bool = True
    warnings: list[str] = field(default_factory=list)
    breaking: bool = False


def _first_word(text: str) -> str:
    words = text.split()
    return re.sub(r'[^\w]', '', words[0]) if words else ''


def _is_acronym(word: str) -> bool:
    return len(word) > 1 and word.isupper()


def validate_message(
    message: str,
    style: str = "conventional",
    max_subject_length: int = 72,
    max_body_line_length: int = 72,
) -> ValidationResult:
    result = ValidationResult()
    lines = message.strip().split('\n')
    subject = lines[0].strip() if lines else ''
    body = [line for line in lines[1:] if line.strip()]

    if not subject:
        result.warnings.append("Message is empty")
        return result

    match = SUBJECT_RE.match(subject)
    if style in TYPED_STYLES:
        if match:
            description = match.group('description')
        else:
            description = subject
            result.warnings.append("Subject does not follow the type(scope): subject format")
    else:
        description = subject

    if len(subject) > max_subject_length:
        result.warnings.append(
            f"Subject line is {len(subject)} characters (max {max_subject_length})"
        )

    if subject.endswith('.'):
        result.warnings.append("Subject line ends with a trailing period")

    first = _first_word(description)
    if first and not _is_acronym(first):
        if style in TYPED_STYLES and first[0].isupper():
            result.warnings.append("Subject should start with a lowercase verb")
        elif style not in TYPED_STYLES and first[0].islower():
            result.warnings.append("Subject should start with a capital letter")

    if first.lower() in PAST_TENSE_VERBS:
        result.warnings.append(
            f"Subject uses past tense ('{first}'); use the imperative mood instead"
        )

    long_lines = [line for line in body if len(line) > max_body_line_length]
    if long_lines:
        result.warnings.append(
            f"{len(long_lines)} body line(s) exceed {max_body_line_length} characters"
        )

    bang = bool(match and (match.group('bang1') or match.group('bang2')))
    if bang or BREAKING_FOOTER_RE.search('\n'.join(body)):
        result.breaking = True
        result.warnings.append("Message marks a BREAKING CHANGE")

    return result
