"""LLM Client Package"""

import getpass
import os
import sys
from typing import Callable

from aicommit.config import Config
from aicommit.llm.base import LLMClient, LLMResponse, LLMError
from aicommit.llm.chat import ChatClient
from aicommit.llm.claude import ClaudeClient
from aicommit.llm.providers import PROVIDERS, Provider

TRANSPORTS: dict[str, type[LLMClient]] = {
    "http": ChatClient,
    "anthropic": ClaudeClient,
}


def get_provider(key: str) -> Provider:
    try:
        return PROVIDERS[key]
    except KeyError:
        raise LLMError(f"Unknown provider: {key}. Use one of: {', '.join(PROVIDERS)}.")


def resolve_api_key(
    provider: Provider,
    ask: Callable[[str], str] | None = getpass.getpass,
) -> str:
    """Environment variable first, then a hidden prompt when interactive."""
    if provider.key_env is None:
        return ""

    api_key = os.environ.get(provider.key_env, "").strip()
    if not api_key and ask is not None and sys.stdin.isatty():
        api_key = ask(f"Enter your {provider.name} API key: ").strip()

    if not api_key:
        raise LLMError(
            f"No API key found. Set {provider.key_env} environment variable:\n"
            f"  export {provider.key_env}='your-key-here'"
        )
    return api_key


def get_client(config: Config, api_key: str | None = None,
               ask: Callable[[str], str] | None = getpass.getpass) -> LLMClient:
    """Build the client for config.provider."""
    provider = get_provider(config.provider)
    if api_key is None:
        api_key = resolve_api_key(provider, ask)
    return TRANSPORTS[provider.transport](provider, config, api_key)


__all__ = [
    "LLMClient",
    "LLMResponse",
    "LLMError",
    "ChatClient",
    "ClaudeClient",
    "Provider",
    "PROVIDERS",
    "get_client",
    "get_provider",
    "resolve_api_key",
]
