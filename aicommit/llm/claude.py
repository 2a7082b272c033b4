"""Claude (Anthropic) LLM Client"""

import json

from aicommit.config import Config
from aicommit.llm.base import LLMClient, LLMResponse, LLMError
from aicommit.llm.providers import Provider
from aicommit.prompts import Prompt


class ClaudeClient(LLMClient):
    """Anthropic messages API through the official SDK."""

    def __init__(self, provider: Provider, config: Config, api_key: str):
        super().__init__(provider, config)

        try:
            from anthropic import Anthropic
        except ImportError:
            raise LLMError(
                "Anthropic SDK not installed. Run:\n"
                "  pip install anthropic"
            )
        kwargs = {"api_key": api_key, "max_retries": 0}
        if config.base_url:
            kwargs["base_url"] = config.base_url
        self._client = Anthropic(**kwargs)

    def generate(self, prompt: Prompt) -> LLMResponse:
        from anthropic import APIConnectionError, APIError, APIStatusError, AuthenticationError

        payload = self.provider.build_request(self.model, prompt, self.config)
        try:
            response = self._client.messages.create(**payload)
        except AuthenticationError:
            raise LLMError(f"Invalid API key. Check your {self.provider.key_env}.")
        except APIStatusError as e:
            detail = json.dumps(e.body, indent=2, default=str) if e.body else e.message
            raise LLMError(f"API request failed: {e.status_code}\n{detail}")
        except APIConnectionError as e:
            raise LLMError(f"Could not reach {self.provider.name}: {e.message}")
        except APIError as e:
            raise LLMError(f"Claude API error: {e.message}")

        data = response.model_dump()
        return LLMResponse(
            content=self.provider.parse_response(data).strip(),
            model=data.get("model") or self.model,
            tokens_used=self.provider.parse_usage(data),
        )
