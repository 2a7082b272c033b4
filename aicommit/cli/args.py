"""CLI Argument Parsing"""

import argparse
import argcomplete

from aicommit import __version__
from aicommit.config import VALID_STYLES
from aicommit.llm import PROVIDERS

COMMANDS = {
    'commit': 'Generate a commit message for staged changes and commit (default)',
    'config': 'Configure provider, model and style',
    'show-config': 'Show current configuration',
    'rules': 'Show commit message best practices',
    'reset-config': 'Reset configuration to defaults',
    'install-completion': 'Install shell tab completion',
}


def _add_commit_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    """Generation flags, accepted both before and after the 'commit' subcommand."""
    # Suppressed defaults keep the subparser from overwriting top-level values
    defaults = {'default': argparse.SUPPRESS} if suppress else {}

    parser.add_argument('-y', '--yes', action='store_true', help='Skip confirmations and commit the first message', **defaults)
    parser.add_argument('-p', '--provider', type=str, choices=sorted(PROVIDERS), help='LLM provider', **defaults)
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name', **defaults)
    parser.add_argument('-s', '--style', type=str, choices=sorted(VALID_STYLES), help='Commit message style', **defaults)

    kind = parser.add_mutually_exclusive_group()
    kind.add_argument('--breaking', action='store_true', help='Mark the commit as a breaking change', **defaults)
    kind.add_argument('--revert', action='store_true', help='Write a revert commit message', **defaults)

    parser.add_argument('--verbose', action='store_true', help='Show debug info (prompt size, tokens used, timings)', **defaults)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aicommit',
        description='Generate AI-powered commit messages from staged changes',
        epilog='Example: git add -p && aicommit'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    _add_commit_options(parser)

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    for name, help_text in COMMANDS.items():
        sub = subparsers.add_parser(name, help=help_text, description=help_text)
        if name == 'commit':
            _add_commit_options(sub, suppress=True)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)
    if args.command is None:
        args.command = 'commit'
    return args
