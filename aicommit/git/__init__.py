"""Git Operations Package"""

from aicommit.git.analyzer import (
    GitAnalyzer, GitError, FileChange, FileStatus, StagedChanges, UnstagedFile, parse_name_status,
)
from aicommit.git.budget import (
    ContextBudgeter, BudgetedContext, FileContext, PromptBudget, estimate_tokens, is_binary_file,
)

__all__ = [
    "GitAnalyzer",
    "GitError",
    "FileChange",
    "FileStatus",
    "StagedChanges",
    "UnstagedFile",
    "parse_name_status",
    "ContextBudgeter",
    "BudgetedContext",
    "FileContext",
    "PromptBudget",
    "estimate_tokens",
    "is_binary_file",
]
