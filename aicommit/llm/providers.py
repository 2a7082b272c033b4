"""Provider dispatch table.

Each provider is described by data plus three functions: where to send the
request, how to build its body, and how to read the text back out. Adding a
provider means adding an entry here, not another branch in the clients.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from aicommit.config import Config
from aicommit.llm.base import LLMError
from aicommit.prompts import Prompt

RequestBuilder = Callable[[str, Prompt, Config], dict]
ResponseParser = Callable[[dict], str]
UsageParser = Callable[[dict], int]


def build_chat_request(model: str, prompt: Prompt, config: Config) -> dict:
    """OpenAI-style chat/completions body."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": prompt.system},
            {"role": "user", "content": prompt.user},
        ],
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }


def build_messages_request(model: str, prompt: Prompt, config: Config) -> dict:
    """Anthropic messages body: system prompt is a top-level field."""
    return {
        "model": model,
        "max_tokens": config.max_tokens,
        "temperature": min(config.temperature, 1.0),
        "system": prompt.system,
        "messages": [{"role": "user", "content": prompt.user}],
    }


def parse_chat_response(data: dict) -> str:
    """Read choices[0].message.content."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise LLMError(f"Malformed response from provider: {_preview(data)}")
    if not isinstance(content, str):
        raise LLMError(f"Provider returned no text content: {_preview(data)}")
    return content


def parse_messages_response(data: dict) -> str:
    """Read the first text block of content[]."""
    try:
        blocks = data["content"]
        text = next(b["text"] for b in blocks if b.get("type", "text") == "text")
    except (KeyError, TypeError, StopIteration):
        raise LLMError(f"Malformed response from provider: {_preview(data)}")
    return text


def chat_usage(data: dict) -> int:
    usage = data.get("usage") or {}
    return int(usage.get("total_tokens") or 0)


def messages_usage(data: dict) -> int:
    usage = data.get("usage") or {}
    return int(usage.get("input_tokens") or 0) + int(usage.get("output_tokens") or 0)


def _preview(data: Any, limit: int = 200) -> str:
    text = repr(data)
    return text if len(text) <= limit else text[:limit] + "..."


@dataclass(frozen=True)
class Provider:
    """How to talk to one model vendor."""
    key: str
    name: str
    base_url: str
    endpoint: str
    key_env: str | None
    models: tuple[str, ...]
    build_request: RequestBuilder = build_chat_request
    parse_response: ResponseParser = parse_chat_response
    parse_usage: UsageParser = chat_usage
    extra_headers: dict[str, str] = field(default_factory=dict)
    transport: str = "http"  # "http" (urllib) or "anthropic" (SDK)

    @property
    def default_model(self) -> str:
        return self.models[0]

    def url(self, base_url: str | None = None) -> str:
        return f"{(base_url or self.base_url).rstrip('/')}/{self.endpoint}"

    def headers(self, api_key: str) -> dict[str, str]:
        headers = {"Content-Type": "application/json", **self.extra_headers}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers


PROVIDERS: dict[str, Provider] = {
    "openrouter": Provider(
        key="openrouter",
        name="OpenRouter",
        base_url="https://openrouter.ai/api/v1",
        endpoint="chat/completions",
        key_env="OPENROUTER_API_KEY",
        models=(
            "google/gemini-flash-1.5-8b",
            "anthropic/claude-3-haiku",
            "openai/gpt-4o-mini",
            "meta-llama/llama-3.2-3b-instruct",
        ),
        extra_headers={
            "HTTP-Referer": "https://github.com/aicommit/aicommit",
            "X-Title": "aicommit",
        },
    ),
    "openai": Provider(
        key="openai",
        name="OpenAI",
        base_url="https://api.openai.com/v1",
        endpoint="chat/completions",
        key_env="OPENAI_API_KEY",
        models=("gpt-4o-mini", "gpt-4o", "gpt-3.5-turbo"),
    ),
    "deepseek": Provider(
        key="deepseek",
        name="DeepSeek",
        base_url="https://api.deepseek.com/v1",
        endpoint="chat/completions",
        key_env="DEEPSEEK_API_KEY",
        models=("deepseek-chat", "deepseek-reasoner"),
    ),
    "anthropic": Provider(
        key="anthropic",
        name="Anthropic",
        base_url="https://api.anthropic.com/v1",
        endpoint="messages",
        key_env="ANTHROPIC_API_KEY",
        models=("claude-3-5-haiku-latest", "claude-sonnet-4-20250514", "claude-3-haiku-20240307"),
        build_request=build_messages_request,
        parse_response=parse_messages_response,
        parse_usage=messages_usage,
        transport="anthropic",
    ),
    "ollama": Provider(
        key="ollama",
        name="Ollama",
        base_url="http://localhost:11434/v1",
        endpoint="chat/completions",
        key_env=None,
        models=("llama3.2:3b", "mistral:7b", "gemma3:4b"),
    ),
}
