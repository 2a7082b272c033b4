"""
Unit tests for Config, ConfigManager and environment overrides.

Run with:
    pytest tests/test_config.py -v
"""

import json

import pytest

from aicommit.config import Config, ConfigManager, env_overrides


class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.provider == "openrouter"
        assert config.model is None
        assert config.style == "conventional"
        assert config.confirm_before_commit is True
        assert config.use_gitmoji is False
        assert config.context_size_limit == 40000
        assert config.context_reserve_tokens == 5000
        assert config.large_file_threshold == 50000
        assert config.max_subject_length == 72

    def test_to_dict_excludes_none(self):
        d = Config().to_dict()
        assert "model" not in d
        assert "base_url" not in d
        assert "provider" in d

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"provider": "deepseek", "unknown_key": "value"})
        assert config.provider == "deepseek"
        assert not hasattr(config, "unknown_key")

    def test_validate_invalid_provider(self):
        config = Config(provider="gpt4")
        warnings = config.validate()
        assert len(warnings) == 1
        assert config.provider == "openrouter"  # reset to default

    def test_validate_invalid_style(self):
        config = Config(style="fancy")
        warnings = config.validate()
        assert len(warnings) == 1
        assert config.style == "conventional"

    @pytest.mark.parametrize("field", [
        "max_subject_length",
        "context_size_limit",
        "context_reserve_tokens",
        "large_file_threshold",
    ])
    def test_validate_non_positive_ints(self, field):
        config = Config(**{field: -1})
        warnings = config.validate()
        assert any(field in w for w in warnings)
        assert getattr(config, field) == getattr(Config(), field)

    def test_validate_rejects_bool_for_int(self):
        config = Config(max_tokens=True)
        assert config.validate()
        assert config.max_tokens == 500

    def test_validate_temperature_range(self):
        config = Config(temperature=3.5)
        assert any("temperature" in w for w in config.validate())
        assert config.temperature == 0.7

    def test_validate_valid_config_no_warnings(self):
        assert Config().validate() == []

    def test_from_dict_triggers_validation(self, capsys):
        Config.from_dict({"provider": "invalid"})
        err = capsys.readouterr().err
        assert "Config warning" in err

    def test_with_overrides_skips_none(self):
        config = Config(provider="openai", model="gpt-4o")
        updated = config.with_overrides(provider=None, model="gpt-4o-mini", style="simple")
        assert updated.provider == "openai"
        assert updated.model == "gpt-4o-mini"
        assert updated.style == "simple"
        assert config.model == "gpt-4o"  # original untouched


class TestConfigManager:

    @pytest.fixture
    def manager(self, tmp_path):
        (tmp_path / "home").mkdir()
        (tmp_path / "repo").mkdir()
        return ConfigManager(cwd=tmp_path / "repo", home=tmp_path / "home")

    def test_load_returns_defaults_when_no_file(self, manager):
        config = manager.load()
        assert config.provider == "openrouter"
        assert manager.get_config_path() is None

    def test_load_reads_local_file(self, manager):
        manager.local_path.write_text(json.dumps({"provider": "anthropic", "style": "simple"}))
        config = manager.load()
        assert config.provider == "anthropic"
        assert config.style == "simple"
        assert manager.get_config_path() == manager.local_path

    def test_local_file_wins_over_global(self, manager):
        manager.local_path.write_text(json.dumps({"provider": "openai"}))
        manager.global_path.write_text(json.dumps({"provider": "deepseek"}))
        assert manager.load().provider == "openai"

    def test_global_file_used_without_local(self, manager):
        manager.global_path.write_text(json.dumps({"use_gitmoji": True}))
        config = manager.load()
        assert config.use_gitmoji is True
        assert manager.get_config_path() == manager.global_path

    def test_save_and_load_roundtrip(self, manager, tmp_path):
        original = Config(provider="ollama", model="llama3.2", style="detailed")
        path = manager.save(original, global_config=True)
        assert path == tmp_path / "home" / ConfigManager.CONFIG_FILENAME

        loaded = ConfigManager(cwd=tmp_path / "repo", home=tmp_path / "home").load()
        assert loaded == original

    def test_malformed_json_returns_defaults(self, manager, capsys):
        manager.local_path.write_text("not valid json {{{")
        config = manager.load()
        assert config.provider == "openrouter"  # falls back to defaults
        assert "Could not load" in capsys.readouterr().err

    def test_non_object_json_returns_defaults(self, manager, capsys):
        manager.local_path.write_text("[1, 2, 3]")
        assert manager.load() == Config()
        assert "Could not load" in capsys.readouterr().err

    def test_reset_writes_defaults_to_global(self, manager):
        manager.global_path.write_text(json.dumps({"style": "simple"}))
        manager.load()
        path = manager.reset()
        assert path == manager.global_path
        assert json.loads(path.read_text()) == Config().to_dict()

    def test_reset_keeps_local_file_local(self, manager):
        manager.local_path.write_text(json.dumps({"style": "simple"}))
        manager.load()
        assert manager.reset() == manager.local_path
        assert not manager.global_path.exists()


class TestEnvOverrides:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("AICOMMIT_PROVIDER", "openai")
        monkeypatch.setenv("AICOMMIT_MODEL", "gpt-4o")
        assert env_overrides() == {"provider": "openai", "model": "gpt-4o"}

    def test_empty_values_are_none(self, monkeypatch):
        monkeypatch.setenv("AICOMMIT_PROVIDER", "")
        monkeypatch.delenv("AICOMMIT_MODEL", raising=False)
        assert env_overrides() == {"provider": None, "model": None}
