"""Commit Message Post-processing Package"""

from aicommit.message.sanitizer import sanitize, TRANSFORMS
from aicommit.message.validator import validate_message, ValidationResult, PAST_TENSE_VERBS
from aicommit.message.gitmoji import add_gitmoji, GITMOJI_MAPPINGS

__all__ = [
    "sanitize",
    "TRANSFORMS",
    "validate_message",
    "ValidationResult",
    "PAST_TENSE_VERBS",
    "add_gitmoji",
    "GITMOJI_MAPPINGS",
]
