"""Prompt Construction Package"""

from aicommit.prompts.builder import (
    PromptBuilder, Prompt, PromptRequest, CommitKind, SYSTEM_PROMPT, FORMAT_TEMPLATES,
)

__all__ = [
    "PromptBuilder",
    "Prompt",
    "PromptRequest",
    "CommitKind",
    "SYSTEM_PROMPT",
    "FORMAT_TEMPLATES",
]
