from __future__ import annotations

import json

import pytest

from knowlex_providers.base.errors import ConfigurationError, ValidationError
from knowlex_providers.config import (
    CONFIG_FILE_ENV,
    config_from_env,
    get_provider_config,
    reset_config_cache,
)
from knowlex_providers.config.defaults import ANTHROPIC_DEFAULT_MODEL, OPENAI_DEFAULT_BASE_URL


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "OPENAI_MODEL", "OPENAI_BASE_URL", "ANTHROPIC_API_KEY", "ANTHROPIC_MODEL"):
        # setenv first so teardown also removes values the dotenv loader writes
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults_then_env_then_overrides(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-env")
    clean_env.setenv("OPENAI_MODEL", "gpt-4o-mini")
    cfg = get_provider_config("openai", {"model": "gpt-4", "temperature": None})
    assert cfg["api_key"] == "sk-env"  # nosec B101
    assert cfg["model"] == "gpt-4"  # nosec B101
    assert cfg["base_url"] == OPENAI_DEFAULT_BASE_URL  # nosec B101
    assert "temperature" not in cfg  # nosec B101


def test_config_file_layer(clean_env, tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"anthropic": {"model": "claude-3-haiku", "temperature": 0.2}}), encoding="utf-8")
    clean_env.setenv(CONFIG_FILE_ENV, str(path))
    clean_env.setenv("ANTHROPIC_API_KEY", "ak-env")
    cfg = config_from_env("anthropic")
    assert cfg.model == "claude-3-haiku"  # nosec B101
    assert cfg.temperature == 0.2  # nosec B101
    assert cfg.provider == "anthropic"  # nosec B101


def test_invalid_config_file_raises(clean_env, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    clean_env.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ConfigurationError):
        get_provider_config("openai")


def test_missing_key_is_validation_error(clean_env):
    with pytest.raises(ValidationError) as ei:
        config_from_env("anthropic")
    assert "api_key" in ei.value.message  # nosec B101


def test_dotenv_never_overrides_existing_env(clean_env, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text('ANTHROPIC_API_KEY="from-dotenv"\nOPENAI_API_KEY=from-dotenv\n# comment\n', encoding="utf-8")
    clean_env.setenv("DOTENV_FILE", str(dotenv))
    clean_env.setenv("OPENAI_API_KEY", "from-env")
    reset_config_cache()
    assert get_provider_config("openai")["api_key"] == "from-env"  # nosec B101
    anthropic = config_from_env("anthropic")
    assert anthropic.api_key == "from-dotenv"  # nosec B101
    assert anthropic.model == ANTHROPIC_DEFAULT_MODEL  # nosec B101
