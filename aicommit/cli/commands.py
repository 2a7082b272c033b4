"""CLI Commands"""

import os
import sys

from aicommit import COMMIT_TYPES
from aicommit.cli.utils import ask, confirm
from aicommit.config import Config, ConfigManager
from aicommit.llm import PROVIDERS, get_provider
from aicommit.message import add_gitmoji
from aicommit.output import BULLET, bold, dim, heading, info, print_success

EXAMPLE_MESSAGES = {
    "conventional": """feat(auth): add OAuth2 login support

- implement Google OAuth2 integration
- add user session management
- create secure token handling

This replaces the old password-based system and provides
better security and user experience.""",
    "simple": """Add OAuth2 login support

- implement Google OAuth2 integration
- add user session management""",
    "detailed": """feat(auth): add OAuth2 login support

- implement Google OAuth2 integration
- add user session management
- create secure token handling

This replaces the old password-based system and provides
better security and user experience.

Closes #123""",
}

STYLE_DESCRIPTIONS = {
    "conventional": "type(scope): subject with a body",
    "simple": "plain subject with a body",
    "detailed": "type(scope): subject, body and footer",
}


def display_config(manager: ConfigManager, config: Config) -> int:
    """Display current configuration."""
    config_path = manager.get_config_path()
    provider = PROVIDERS.get(config.provider)

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no {ConfigManager.CONFIG_FILENAME} found)")

    env_provider = os.environ.get('AICOMMIT_PROVIDER')
    env_model = os.environ.get('AICOMMIT_MODEL')
    if env_provider or env_model:
        print(f"  {dim('Environment overrides:')}")
        if env_provider:
            print(f"    AICOMMIT_PROVIDER={env_provider}")
        if env_model:
            print(f"    AICOMMIT_MODEL={env_model}")

    model = config.model or (provider.default_model if provider else 'auto')
    rows = {
        "provider": provider.name if provider else config.provider,
        "model": model,
        "base_url": config.base_url or (provider.base_url if provider else ''),
        "api_key_env": (provider.key_env or 'none') if provider else '',
        "style": config.style,
        "custom_prompt": config.custom_prompt or '(none)',
        "confirm_before_commit": 'yes' if config.confirm_before_commit else 'no',
        "use_gitmoji": 'yes' if config.use_gitmoji else 'no',
        "context_size_limit": f"{config.context_size_limit} tokens",
        "max_prompt_tokens": f"{config.max_prompt_tokens} tokens",
        "large_file_threshold": f"{config.large_file_threshold // 1000}KB",
        "max_subject_length": str(config.max_subject_length),
    }

    print()
    print(f"  {bold('Settings:')}")
    for key, value in rows.items():
        print(f"    {key + ':':<24}{info(str(value))}")

    example = EXAMPLE_MESSAGES.get(config.style, EXAMPLE_MESSAGES["conventional"])
    if config.use_gitmoji:
        example = add_gitmoji(example)
    print(f"\n  {bold('Example commit message:')}")
    for line in example.split('\n'):
        print(f"    {dim(line)}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  {ConfigManager.CONFIG_FILENAME} (in current directory)")
    print(f"    Global: ~/{ConfigManager.CONFIG_FILENAME}")
    print(f"\n  {dim('Run')} aicommit config {dim('to configure')}\n")

    return 0


def display_rules(config: Config) -> int:
    """Show commit message best practices."""
    print(f"\n{bold('Commit Message Best Practices')}\n")

    print(heading("Format:"))
    print("  <type>(<scope>): <subject>")
    print("")
    print("  <body>")

    print(heading("\nTypes (lowercase):"))
    for commit_type, description in COMMIT_TYPES.items():
        print(f"  {BULLET} {commit_type}: {description}")

    print(heading("\nSubject Line Rules:"))
    print(f"  {BULLET} Max {config.max_subject_length} characters")
    print(f"  {BULLET} Use imperative mood (add, fix, update, not added, fixed, updated)")
    print(f"  {BULLET} Start with lowercase letter (except proper nouns like API, OAuth)")
    print(f"  {BULLET} No period at the end")

    print(heading("\nBody Rules:"))
    print(f"  {BULLET} Lists: use '- ' prefix for bullet points")
    print(f"  {BULLET} Paragraphs: no prefix, just plain text")
    print(f"  {BULLET} Explain what and why, not how")
    print(f"  {BULLET} Keep lines under {config.max_body_line_length} characters")

    print(heading("\nScope Rules:"))
    print(f"  {BULLET} Max 3 words")
    print(f"  {BULLET} Common scopes: auth, api, ui, cli, config, db, test, build")

    print(heading("\nExample:"))
    for line in EXAMPLE_MESSAGES["conventional"].split('\n'):
        print(f"  {line}")

    print(heading("\nBreaking Changes:"))
    print(f"  {BULLET} Use \"!\" after type: feat!: or feat(scope)!:")
    print(f"  {BULLET} Or use footer: \"BREAKING CHANGE: <description>\"")
    print(dim("\n  chore!: drop support for Python 3.8\n"))
    print(dim("  BREAKING CHANGE: Python 3.8 is no longer supported"))

    print(heading("\nImportant Guidelines:"))
    print(f"  {BULLET} For minor changes: use 'fix' instead of 'feat'")
    print(f"  {BULLET} Do not wrap the message in triple backticks\n")
    return 0


def _choose(prompt: str, options: list[str], default_index: int = 0) -> int:
    """Numbered menu. Enter picks the default."""
    for i, option in enumerate(options, 1):
        marker = dim(' (current)') if i - 1 == default_index else ''
        print(f"  {i}. {option}{marker}")
    print()
    while True:
        choice = ask(f"{prompt} [1-{len(options)}] (Enter for current): ")
        if not choice:
            return default_index
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return int(choice) - 1


def run_setup(manager: ConfigManager, config: Config) -> int:
    """Interactive configuration wizard."""
    print(f"\n{bold('Configuration Setup')}\n")

    keys = list(PROVIDERS)
    print("Select AI provider:\n")
    current = keys.index(config.provider) if config.provider in keys else 0
    provider = get_provider(keys[_choose("Provider", [PROVIDERS[k].name for k in keys], current)])

    print("\nSelect model:\n")
    models = [*provider.models, "Custom model (type manually)"]
    current_model = provider.models.index(config.model) if config.model in provider.models else 0
    index = _choose("Model", models, current_model)
    if index == len(models) - 1:
        model = ""
        while not model:
            model = ask("Enter custom model name: ")
    else:
        model = provider.models[index]

    print("\nCommit message style:\n")
    styles = list(STYLE_DESCRIPTIONS)
    current_style = styles.index(config.style) if config.style in styles else 0
    style = styles[_choose("Style", [f"{s} - {STYLE_DESCRIPTIONS[s]}" for s in styles], current_style)]

    custom_prompt = ask(
        f"\nCustom prompt requirements (optional){dim(' [' + config.custom_prompt + ']') if config.custom_prompt else ''}: ",
        default=config.custom_prompt,
    )
    confirm_before_commit = confirm("Confirm before committing?", default=config.confirm_before_commit)
    use_gitmoji = confirm("Use Gitmoji in commit messages? (✨ feat, 🐛 fix, etc.)", default=config.use_gitmoji)

    updated = config.with_overrides(
        provider=provider.key,
        model=model,
        style=style,
        custom_prompt=custom_prompt,
        confirm_before_commit=confirm_before_commit,
        use_gitmoji=use_gitmoji,
    )
    if provider.key != config.provider:
        # base_url belongs to the previous provider
        updated.base_url = None

    path = manager.save(updated, global_config=True)
    print_success(f"Configuration saved to {path}")
    return 0


def reset_config(manager: ConfigManager) -> int:
    """Reset configuration to defaults after confirmation."""
    if not confirm("Are you sure you want to reset configuration to defaults?", default=False):
        print(dim("Reset cancelled."))
        return 0
    path = manager.reset()
    print_success(f"Configuration reset to defaults ({path})")
    return 0


def run_install_completion() -> int:
    """Print shell tab completion setup."""
    shell = os.environ.get('SHELL', '')
    line = 'eval "$(register-python-argcomplete aicommit)"'

    print(f"\n{bold('Tab Completion Setup')}\n")

    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ' + rc_file)}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell aicommit | Out-String | Invoke-Expression\n")
        print("To make it permanent, add that line to your $PROFILE")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish aicommit | source")

    print(f"\n{dim('After setup, press TAB to autocomplete commands and flags.')}")
    return 0
