"""Shared types for model clients."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aicommit.config import Config
from aicommit.prompts import Prompt

if TYPE_CHECKING:
    from aicommit.llm.providers import Provider


@dataclass
class LLMResponse:
    """Text returned by a provider plus usage, when it reports any."""
    content: str
    model: str = ""
    tokens_used: int = 0


class LLMError(Exception):
    """Provider call failed. The message is shown to the user as-is."""


class LLMClient(ABC):
    """One configured provider/model pair. Subclasses own the transport."""

    def __init__(self, provider: 'Provider', config: Config):
        self.provider = provider
        self.config = config
        self.model = config.model or provider.default_model

    @property
    def name(self) -> str:
        return f"{self.provider.name} ({self.model})"

    @abstractmethod
    def generate(self, prompt: Prompt) -> LLMResponse:
        """Send one prompt, return the raw reply. Raises LLMError."""
