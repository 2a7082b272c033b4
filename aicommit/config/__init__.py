"""Configuration Management Package"""

import json
import os
import sys
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Optional

# Valid configuration values
VALID_PROVIDERS = {"openrouter", "openai", "deepseek", "anthropic", "ollama"}
VALID_STYLES = {"conventional", "simple", "detailed"}

# Positive integer settings checked by Config.validate()
_POSITIVE_INT_FIELDS = (
    "max_tokens",
    "context_size_limit",
    "context_reserve_tokens",
    "max_prompt_tokens",
    "large_file_threshold",
    "max_subject_length",
    "max_body_line_length",
    "max_file_display",
)


@dataclass
class Config:
    """User configuration with sensible defaults."""
    provider: str = "openrouter"
    model: Optional[str] = None  # None -> provider default
    base_url: Optional[str] = None  # None -> provider default
    style: str = "conventional"
    temperature: float = 0.7
    max_tokens: int = 500
    custom_prompt: str = ""
    confirm_before_commit: bool = True
    use_gitmoji: bool = False

    # Context budget, in estimated tokens (~4 chars each)
    context_size_limit: int = 40000
    context_reserve_tokens: int = 5000
    max_prompt_tokens: int = 40000
    large_file_threshold: int = 50000  # bytes

    # Message linting
    max_subject_length: int = 72
    max_body_line_length: int = 72

    max_file_display: int = 20  # Max files per status group before collapsing

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.provider not in VALID_PROVIDERS:
            warnings.append(f"Invalid provider '{self.provider}', using '{defaults.provider}'")
            self.provider = defaults.provider

        if self.style not in VALID_STYLES:
            warnings.append(f"Invalid style '{self.style}', using '{defaults.style}'")
            self.style = defaults.style

        if isinstance(self.temperature, bool) or not isinstance(self.temperature, (int, float)) \
                or not 0 <= self.temperature <= 2:
            warnings.append(f"Invalid temperature '{self.temperature}', using {defaults.temperature}")
            self.temperature = defaults.temperature

        for name in _POSITIVE_INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                default = getattr(defaults, name)
                warnings.append(f"Invalid {name} '{value}', using {default}")
                setattr(self, name, default)

        if not isinstance(self.custom_prompt, str):
            warnings.append("Invalid custom_prompt, using empty string")
            self.custom_prompt = defaults.custom_prompt

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config

    def with_overrides(self, **overrides) -> 'Config':
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


class ConfigManager:
    """Loads and saves configuration.

    Lookup order: ./.aicommit.json, then ~/.aicommit.json, then defaults.
    """

    CONFIG_FILENAME = ".aicommit.json"

    def __init__(self, cwd: Path | None = None, home: Path | None = None):
        self._cwd = cwd
        self._home = home
        self._config_path: Optional[Path] = None

    @property
    def local_path(self) -> Path:
        return (self._cwd or Path.cwd()) / self.CONFIG_FILENAME

    @property
    def global_path(self) -> Path:
        return (self._home or Path.home()) / self.CONFIG_FILENAME

    def load(self) -> Config:
        for path in (self.local_path, self.global_path):
            if path.exists():
                self._config_path = path
                return self._load_from_file(path)

        self._config_path = None
        return Config()

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, TypeError, OSError) as e:
            print(f"Warning: Could not load {path}, using defaults: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = self.global_path if global_config else self.local_path
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        self._config_path = path
        return path

    def reset(self) -> Path:
        """Overwrite the active (or global) config file with defaults."""
        return self.save(Config(), global_config=self._config_path != self.local_path)

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


def env_overrides() -> dict:
    """Provider/model overrides from the environment."""
    return {
        "provider": os.environ.get('AICOMMIT_PROVIDER') or None,
        "model": os.environ.get('AICOMMIT_MODEL') or None,
    }


__all__ = [
    "Config",
    "ConfigManager",
    "env_overrides",
    "VALID_PROVIDERS",
    "VALID_STYLES",
]
