"""Gitmoji prefixes for commit subjects."""

import re

GITMOJI_MAPPINGS = {
    'feat': '✨',
    'fix': '🐛',
    'docs': '📚',
    'style': '💄',
    'refactor': '🔨',
    'perf': '🐎',
    'test': '🚨',
    'chore': '🔧',
    'build': '📦',
    'ci': '👷',
    'hotfix': '🚑',
    'security': '🔒',
    'breaking': '💥',
    'deps_add': '➕',
    'deps_remove': '➖',
    'upgrade': '⬆️',
    'downgrade': '⬇️',
    'move': '🚚',
    'deploy': '🚀',
    'docker': '🐳',
    'database': '🗃️',
    'auth': '🛂',
    'accessibility': '♿',
    'i18n': '🌐',
    'analytics': '📈',
    'architecture': '🏗️',
    'infrastructure': '🧱',
    'dx': '🧑‍💻',
    'review': '👌',
    'revert': '⏪️',
    'remove': '🔥',
    'format': '🎨',
    'general': '⚡',
    'initial': '🎉',
}

# type(scope):, type!(scope):, type(scope)!:, type: and revert:
_TYPE_RE = re.compile(r'^(\w+)(?:!?\(|!?:)')


def add_gitmoji(message: str) -> str:
    """Prefix the subject with the emoji for its commit type.

    Messages that already start with a non-word character, or whose type has
    no mapping, are returned unchanged.
    """
    lines = message.split('\n')
    subject = lines[0]
    if not subject or re.match(r'^[^\w]', subject):
        return message

    match = _TYPE_RE.match(subject)
    emoji = GITMOJI_MAPPINGS.get(match.group(1)) if match else None
    if not emoji:
        return message

    lines[0] = f"{emoji}{subject}"
    return '\n'.join(lines)


def gitmoji_rules() -> str:
    """Prompt fragment listing every emoji."""
    return '\n'.join(f"  * {name}: {emoji}" for name, emoji in GITMOJI_MAPPINGS.items())
