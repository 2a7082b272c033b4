"""Prompt Builder - Construct LLM prompts for commit message generation."""

from dataclasses import dataclass
from enum import Enum

from aicommit import COMMIT_TYPES
from aicommit.config import Config
from aicommit.git import StagedChanges, estimate_tokens
from aicommit.message.gitmoji import gitmoji_rules

SYSTEM_PROMPT = "You are a git commit message generator. Create conventional commit messages."

SYSTEM_PROMPT_SIMPLE = (
    "You are a git commit message generator. Create clear, concise commit messages "
    "following best practices."
)

# Lookup table: style -> message layout shown to the model
FORMAT_TEMPLATES = {
    "conventional": "<type>(<scope>): <subject>\n<BLANK LINE>\n<body>",
    "simple": "<subject>\n<BLANK LINE>\n<body>",
    "detailed": "<type>(<scope>): <subject>\n<BLANK LINE>\n<body>\n<BLANK LINE>\n<footer>",
}


class CommitKind(Enum):
    NORMAL = "normal"
    BREAKING = "breaking"
    REVERT = "revert"


@dataclass(frozen=True)
class Prompt:
    """System and user halves of a chat prompt."""
    system: str
    user: str
    minimal: bool = False

    @property
    def estimated_tokens(self) -> int:
        return estimate_tokens(self.system) + estimate_tokens(self.user)

    def __len__(self) -> int:
        return len(self.system) + len(self.user)


@dataclass
class PromptRequest:
    """Per-generation inputs that are not part of the config."""
    feedback: str = ""
    kind: CommitKind = CommitKind.NORMAL
    recent_commits: str = ""


class PromptBuilder:
    """Constructs prompts for commit message generation. Pure: no I/O."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config()

    def prepare(self, changes: StagedChanges, context: str,
                request: PromptRequest | None = None) -> Prompt:
        """Full prompt with context, or the minimal prompt if that won't fit."""
        request = request or PromptRequest()
        prompt = self.build(changes, context, request)
        if prompt.estimated_tokens > self.config.max_prompt_tokens:
            return self.build_minimal(changes, request)
        return prompt

    def build(self, changes: StagedChanges, context: str = "",
              request: PromptRequest | None = None) -> Prompt:
        request = request or PromptRequest()
        sections = [
            "Generate a commit message for these changes:",
            self._build_changes_section(changes),
            self._build_analysis_section(has_context=bool(context)),
            self._build_format_section(),
            self._build_context_section(context),
            self._build_custom_section(),
            self._build_kind_section(request),
            self._build_feedback_section(request.feedback),
        ]
        return Prompt(system=self._system_prompt(), user="\n\n".join(filter(None, sections)))

    def build_minimal(self, changes: StagedChanges,
                      request: PromptRequest | None = None) -> Prompt:
        """File-status list and full diff only, no per-file content."""
        request = request or PromptRequest()
        sections = [
            "Generate a commit message for these changes:",
            self._build_changes_section(changes),
            self._build_format_section(),
            self._build_custom_section(),
            self._build_kind_section(request),
            self._build_feedback_section(request.feedback),
        ]
        return Prompt(
            system=self._system_prompt(),
            user="\n\n".join(filter(None, sections)),
            minimal=True,
        )

    def _system_prompt(self) -> str:
        return SYSTEM_PROMPT_SIMPLE if self.config.style == "simple" else SYSTEM_PROMPT

    def _build_changes_section(self, changes: StagedChanges) -> str:
        return f"""## File changes:
<file_changes>
{changes.name_status()}
</file_changes>

## Diff:
<diff>
{changes.diff}
</diff>"""

    def _build_analysis_section(self, has_context: bool) -> str:
        steps = [
            "**Examine the file changes** - understand what files were modified, added, or deleted",
            "**Study the diff** - see exactly what lines were added, removed, or modified",
        ]
        if has_context:
            steps.append("**Review the detailed context** - compare before/after file contents "
                         "to understand the full scope of changes")
        steps += [
            "**Identify the type of change** - determine if it's a new feature, bug fix, refactoring, etc.",
            "**Determine the scope** - identify which component or module is affected",
            "**Write a precise commit message** - be specific about what changed and why",
        ]
        numbered = "\n".join(f"{i}. {step}" for i, step in enumerate(steps, 1))
        return f"## Analysis Instructions:\n{numbered}"

    def _build_format_section(self) -> str:
        style = self.config.style
        max_len = self.config.max_subject_length
        template = FORMAT_TEMPLATES.get(style, FORMAT_TEMPLATES["conventional"])

        rules = []
        if style == "simple":
            rules.append("- Do not use a type prefix")
            rules.append(f"- Subject: max {max_len} characters, imperative mood, no period, "
                         "first character uppercase")
        else:
            types_list = "\n".join(f"  * {t}: {desc}" for t, desc in COMMIT_TYPES.items())
            rules.append(f"- Type must be one of the following with their meanings:\n{types_list}")
            if self.config.use_gitmoji:
                rules.append(self._build_gitmoji_rules())
            rules.append(f"- Subject: max {max_len} characters, imperative mood, no period, "
                         "first character lowercase")
            rules.append("- Scope: max 3 words")
            rules.append("- For minor changes: use 'fix' instead of 'feat'")

        rules.append(f"""- Body formatting:
  * Lists: use "- " prefix for bullet points
  * Paragraphs: no prefix, just plain text
  * Explain what and why, not how
  * Wrap lines at {self.config.max_body_line_length} characters""")
        if style == "detailed":
            rules.append("- Footer: reference issues or note breaking changes when relevant")
        rules.append("- Do not wrap your response in triple backticks")
        rules.append("- Response should be the commit message only, no explanations")

        rules_text = "\n".join(rules)
        return f"""## Format:
{template}

IMPORTANT:
{rules_text}"""

    def _build_gitmoji_rules(self) -> str:
        return f"""- Gitmoji: Use emoji prefix for commit types. All types:
{gitmoji_rules()}
- Format with Gitmoji for all commit types:
  * Normal: <emoji><type>(<scope>): <subject>
  * Breaking: <emoji><type>!(<scope>): <subject>
  * Revert: <emoji>revert: <hash> <subject>"""

    def _build_context_section(self, context: str) -> str:
        if not context:
            return ""
        return f"""## Detailed File Analysis:
{context}

Use this detailed analysis to understand:
- What the original files looked like before changes
- What the files look like after changes
- The specific differences between before and after
- The full context of what was modified, added, or removed"""

    def _build_custom_section(self) -> str:
        custom = self.config.custom_prompt.strip()
        if not custom:
            return ""
        return f"## Additional requirements:\n{custom}"

    def _build_kind_section(self, request: PromptRequest) -> str:
        if request.kind is CommitKind.BREAKING:
            return """## BREAKING CHANGE Instructions:
- Use the format: <type>!(<scope>): <subject>
- Add "BREAKING CHANGE: <description>" in the footer
- Clearly explain what is breaking and why
- Emphasize the impact on existing code"""

        if request.kind is CommitKind.REVERT:
            recent = request.recent_commits or "(no commit history available)"
            return f"""## REVERT Instructions:
- Use the format: revert: <original commit hash> <original subject>
- Explain what is being reverted and why
- Mention the impact of the revert
- If reverting a feature, explain what functionality is lost
- If reverting a fix, explain what issue will resurface
- Analyze the current changes to determine what is being reverted

## Recent Commits for Context:
{recent}"""

        return ""

    def _build_feedback_section(self, feedback: str) -> str:
        if not feedback or not feedback.strip():
            return ""
        return f"""## User feedback:
"{feedback.strip()}"

Please consider this feedback when generating the commit message."""
