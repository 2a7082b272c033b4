"""CLI Main Entry Point"""

import argparse
import sys
import time

from aicommit.config import Config, ConfigManager, env_overrides
from aicommit.git import ContextBudgeter, GitAnalyzer, GitError, StagedChanges
from aicommit.llm import LLMClient, LLMError, get_client
from aicommit.message import add_gitmoji, sanitize
from aicommit.prompts import CommitKind, Prompt, PromptBuilder, PromptRequest
from aicommit.output import (
    CHECK, Spinner, bold, dim, error, info, print_error, print_success, print_warning, success, RULE,
)

from aicommit.cli.args import parse_args
from aicommit.cli.commands import (
    display_config, display_rules, reset_config, run_install_completion, run_setup,
)
from aicommit.cli.interaction import InteractionLoop, Terminal
from aicommit.cli.utils import (
    commit_text, confirm, format_changes, format_diff_summary, select_files_to_stage,
)


def _resolve_config(args: argparse.Namespace, config: Config) -> Config:
    """Apply overrides. Precedence: CLI args > environment variables > config file."""
    overrides = env_overrides()
    for key in ('provider', 'model'):
        value = getattr(args, key, None)
        if value:
            overrides[key] = value

    resolved = config.with_overrides(style=args.style, **overrides)
    if resolved.provider != config.provider and not overrides['model']:
        # Model and endpoint in the file belong to the configured provider
        resolved.model = None
        resolved.base_url = None

    for message in resolved.validate():
        print_warning(f"Config warning: {message}")
    return resolved


def _commit_kind(args: argparse.Namespace) -> CommitKind:
    if args.breaking:
        return CommitKind.BREAKING
    if args.revert:
        return CommitKind.REVERT
    return CommitKind.NORMAL


def _prepare_staged_changes(analyzer: GitAnalyzer) -> tuple[StagedChanges | None, int]:
    """Staged changes, staging interactively when the index is empty.

    Returns:
        tuple: (changes, exit_code) - changes is None when the run should stop
    """
    changes = analyzer.get_staged_changes()
    if not changes.is_empty:
        return changes, 0

    unstaged = analyzer.get_unstaged_files()
    if not unstaged:
        print_error("No unstaged files found. Make some changes first.")
        return None, 1

    print(f"{bold('No staged changes.')} {dim('Choose what to stage:')}\n")
    selection = select_files_to_stage(unstaged)
    if selection is None:
        print(dim("Operation cancelled"))
        return None, 0

    analyzer.stage(selection or None)
    changes = analyzer.get_staged_changes()
    if changes.is_empty:
        print_error("Nothing was staged. Run 'git add' first.")
        return None, 1
    print_success(f"Staged {changes.total_files} file(s)")
    return changes, 0


def _display_changes(changes: StagedChanges, config: Config) -> None:
    print(f"\n{bold('Staged Changes:')}\n")
    print(format_changes(changes, max_per_group=config.max_file_display))
    print(f"{dim('Diff:')} {format_diff_summary(changes.diff)}\n")


def _generate_message(client: LLMClient, prompt: Prompt, config: Config, timings: dict) -> tuple[str, int]:
    """Run LLM generation with spinner. Returns (cleaned message, tokens used)."""
    t_gen = time.time()
    with Spinner(f"Generating commit message with {client.name}..."):
        response = client.generate(prompt)
    timings['generate'] = time.time() - t_gen

    message = sanitize(response.content)
    if not message:
        raise LLMError("The model returned an empty commit message.")
    if config.use_gitmoji:
        message = add_gitmoji(message)
    return message, response.tokens_used


def _print_verbose_stats(prompt: Prompt, context_tokens: int, files_included: int,
                         total_files: int, tokens_used: int, timings: dict) -> None:
    print(dim(f"  Prompt: ~{prompt.estimated_tokens} tokens ({len(prompt)} chars)"
              f"{' [minimal]' if prompt.minimal else ''}"))
    print(dim(f"  Context: ~{context_tokens} tokens from {files_included}/{total_files} files"))
    print(dim(f"  Response: {tokens_used} tokens"))
    print(dim(f"  Timings: git={timings['git']:.2f}s, context={timings['context']:.2f}s, "
              f"prompt={timings['prompt']:.2f}s, generate={timings.get('generate', 0):.2f}s"))


def _generate_commit_flow(args: argparse.Namespace, config: Config) -> int:
    """Main commit flow.

    Returns:
        int: Exit code
    """
    timings = {}
    t0 = time.time()
    try:
        analyzer = GitAnalyzer()
        changes, exit_code = _prepare_staged_changes(analyzer)
    except GitError as e:
        print_error(str(e))
        return 1
    timings['git'] = time.time() - t0
    if changes is None:
        return exit_code

    _display_changes(changes, config)

    if config.confirm_before_commit and not args.yes:
        if not confirm("Generate a commit message for these changes?", default=True):
            print(dim("Operation cancelled"))
            return 0

    kind = _commit_kind(args)
    try:
        recent = analyzer.recent_commits() if kind is CommitKind.REVERT else ""
    except GitError as e:
        print_error(str(e))
        return 1

    t0 = time.time()
    context = ContextBudgeter(analyzer, config).build(changes)
    timings['context'] = time.time() - t0

    builder = PromptBuilder(config)

    def build_prompt(feedback: str = "") -> Prompt:
        request = PromptRequest(feedback=feedback, kind=kind, recent_commits=recent)
        return builder.prepare(changes, context.text, request)

    t0 = time.time()
    prompt = build_prompt()
    timings['prompt'] = time.time() - t0

    try:
        client = get_client(config)
        message, tokens_used = _generate_message(client, prompt, config, timings)
    except LLMError as e:
        print_error(str(e))
        return 1

    if args.verbose:
        _print_verbose_stats(prompt, context.estimated_tokens, context.files_included,
                             context.total_files, tokens_used, timings)

    def regenerate(feedback: str) -> str:
        new_prompt = build_prompt(feedback)
        new_message, used = _generate_message(client, new_prompt, config, timings)
        if args.verbose:
            print(dim(f"  Regenerated: ~{new_prompt.estimated_tokens} prompt tokens, {used} response tokens"))
        return new_message

    outcome = InteractionLoop(Terminal(config), regenerate).run(message, non_interactive=args.yes)
    if not outcome.committed:
        print(dim("Operation cancelled"))
        return 0

    try:
        analyzer.commit(commit_text(outcome.message))
        print(f"\n{success(CHECK)} Committed successfully")
        if outcome.push:
            with Spinner("Pushing to origin..."):
                analyzer.push()
            print(f"{success(CHECK)} Pushed to origin")
    except GitError as e:
        print_error(str(e))
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    # Handle subcommands that don't need config
    if args.command == 'install-completion':
        return run_install_completion()

    manager = ConfigManager()
    config = manager.load()

    if args.command == 'config':
        return run_setup(manager, config)
    if args.command == 'show-config':
        return display_config(manager, config)
    if args.command == 'rules':
        return display_rules(config)
    if args.command == 'reset-config':
        return reset_config(manager)

    print(info(f"{RULE * 3} AI Commit {RULE * 3}"))
    return _generate_commit_flow(args, _resolve_config(args, config))


def run(argv: list[str] | None = None) -> int:
    """Console script wrapper: interrupts and unexpected failures become exit codes."""
    try:
        return main(argv)
    except KeyboardInterrupt:
        print(dim("\nGoodbye!"))
        return 0
    except Exception as e:
        print(f"\n{error(bold('Unexpected error'))}", file=sys.stderr)
        print_error(f"{type(e).__name__}: {e}")
        return 1
