"""HTTP client for OpenAI-compatible chat/completions providers."""

import http.client
import json
import os
import socket
import urllib.error
import urllib.request

from aicommit.config import Config
from aicommit.llm.base import LLMClient, LLMResponse, LLMError
from aicommit.llm.providers import Provider
from aicommit.prompts import Prompt


class ChatClient(LLMClient):
    """One POST per generation. No retries: failures surface immediately."""

    DEFAULT_TIMEOUT = 120

    def __init__(self, provider: Provider, config: Config, api_key: str = ""):
        super().__init__(provider, config)
        self.api_key = api_key
        self.url = provider.url(config.base_url)
        try:
            self.timeout = int(os.environ.get("AICOMMIT_TIMEOUT", self.DEFAULT_TIMEOUT))
        except ValueError:
            raise LLMError("AICOMMIT_TIMEOUT must be a whole number of seconds")

    def _call_api(self, payload: dict) -> dict:
        data = json.dumps(payload).encode('utf-8')
        req = urllib.request.Request(
            self.url,
            data=data,
            headers=self.provider.headers(self.api_key),
            method="POST",
        )
        with urllib.request.urlopen(req, timeout=self.timeout) as response:
            return json.loads(response.read().decode('utf-8'))

    def generate(self, prompt: Prompt) -> LLMResponse:
        payload = self.provider.build_request(self.model, prompt, self.config)
        try:
            result = self._call_api(payload)
        except urllib.error.HTTPError as e:
            raise LLMError(self._describe_http_error(e))
        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise LLMError(f"Request timed out after {self.timeout}s. "
                               "Increase it with AICOMMIT_TIMEOUT=300")
            raise LLMError(f"Could not reach {self.provider.name} at {self.url}: {e.reason}")
        except socket.timeout:
            raise LLMError(f"Request timed out after {self.timeout}s. "
                           "Increase it with AICOMMIT_TIMEOUT=300")
        except json.JSONDecodeError:
            raise LLMError(f"Invalid JSON response from {self.provider.name}")
        except http.client.HTTPException as e:
            raise LLMError(f"Incomplete response from {self.provider.name}: {e}")
        except OSError as e:
            raise LLMError(f"Connection to {self.provider.name} lost: {e}")

        content = self.provider.parse_response(result)
        return LLMResponse(
            content=content.strip(),
            model=result.get("model") or self.model,
            tokens_used=self.provider.parse_usage(result),
        )

    def _describe_http_error(self, e: urllib.error.HTTPError) -> str:
        message = f"API request failed: {e.code} {e.reason}"
        try:
            body = e.read().decode('utf-8', errors='replace')
        except OSError:
            body = ""
        if body:
            try:
                message += "\n" + json.dumps(json.loads(body), indent=2)
            except json.JSONDecodeError:
                message += "\n" + body.strip()
        if e.code in (401, 403) and self.provider.key_env:
            message += f"\nCheck your {self.provider.key_env}."
        if e.code == 404 and self.provider.key == "ollama":
            message += f"\nModel '{self.model}' not found. Run: ollama pull {self.model}"
        return message
