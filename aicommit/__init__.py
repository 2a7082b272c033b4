"""
AI Commit

AI-powered commit message generation from staged git changes.
"""

__version__ = "2.1.0"

# Centralized commit types - single source of truth
# Used by: prompts/builder.py (type list), cli/commands.py (rules)
COMMIT_TYPES = {
    'build': 'Changes that affect the build system or external dependencies',
    'ci': 'Changes to CI configuration files and scripts',
    'docs': 'Documentation only changes',
    'feat': 'A new feature',
    'fix': 'A bug fix',
    'perf': 'A code change that improves performance',
    'refactor': 'A code change that neither fixes a bug nor adds a feature',
    'style': 'Changes that do not affect the meaning of the code (formatting, whitespace)',
    'test': 'Adding missing tests or correcting existing tests',
    'chore': 'Routine tasks, maintenance, or tooling changes',
}

# Note on breaking changes: use "feat!:" or "feat(scope)!:" and a
# "BREAKING CHANGE: <description>" footer
