"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from intentmatch.config.loader import load_config
from intentmatch.config.schema import AppConfig, EmbeddingProviderType


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove INTENTMATCH_ variables that would leak into tests."""
    import os

    for name in list(os.environ):
        if name.startswith("INTENTMATCH_"):
            monkeypatch.delenv(name)


def test_defaults():
    """Test default configuration values."""
    config = AppConfig()

    assert config.matcher.similarity_threshold == 0.6
    assert config.embedding.provider == EmbeddingProviderType.GEMINI
    assert config.embedding.model_name == "text-embedding-004"
    assert config.embedding.timeout_seconds == 30.0
    assert config.knowledge_base.entries == []
    assert config.knowledge_base.path is None


def test_load_from_toml(tmp_path):
    """Test loading a TOML config file."""
    path = tmp_path / "config.toml"
    path.write_text(
        '[embedding]\nprovider = "openai"\nmodel_name = "text-embedding-3-small"\n\n'
        "[matcher]\nsimilarity_threshold = 0.75\nfallback_message = \"No idea\"\n\n"
        '[[knowledge_base.entries]]\nquestion = "fees"\nanswer = "Fee info"\n'
    )

    config = load_config(path)

    assert config.embedding.provider == EmbeddingProviderType.OPENAI
    assert config.matcher.similarity_threshold == 0.75
    assert config.matcher.fallback_message == "No idea"
    assert config.knowledge_base.entries[0].question == "fees"


def test_missing_file_uses_defaults(tmp_path):
    """Test that a missing config file falls back to defaults."""
    config = load_config(tmp_path / "absent.toml")
    assert config.matcher.similarity_threshold == 0.6


def test_env_overrides_file(tmp_path, monkeypatch):
    """Test that environment variables beat file values."""
    path = tmp_path / "config.toml"
    path.write_text("[matcher]\nsimilarity_threshold = 0.75\n")
    monkeypatch.setenv("INTENTMATCH_MATCHER__SIMILARITY_THRESHOLD", "0.5")

    config = load_config(path)

    assert config.matcher.similarity_threshold == 0.5


def test_env_var_substitution(tmp_path, monkeypatch):
    """Test ${VAR} and ${VAR:-default} substitution in the file."""
    monkeypatch.setenv("MY_MODEL", "embedding-001")
    monkeypatch.delenv("MY_TIMEOUT", raising=False)
    path = tmp_path / "config.toml"
    path.write_text(
        '[embedding]\nmodel_name = "${MY_MODEL}"\ntimeout_seconds = "${MY_TIMEOUT:-12.5}"\n'
    )

    config = load_config(path)

    assert config.embedding.model_name == "embedding-001"
    assert config.embedding.timeout_seconds == 12.5


def test_relative_knowledge_path_resolved_against_config(tmp_path):
    """Test that knowledge_base.path is relative to the config file."""
    path = tmp_path / "config.toml"
    path.write_text('[knowledge_base]\npath = "kb.toml"\n')

    config = load_config(path)

    assert config.knowledge_base.path == tmp_path / "kb.toml"


def test_env_file_loaded(tmp_path, monkeypatch):
    """Test that a .env file populates settings."""
    # Registered so the value load_dotenv writes is removed afterwards
    monkeypatch.setenv("INTENTMATCH_LOG_LEVEL", "INFO")
    monkeypatch.delenv("INTENTMATCH_LOG_LEVEL")
    env_file = tmp_path / ".env"
    env_file.write_text("INTENTMATCH_LOG_LEVEL=DEBUG\n")

    config = load_config(None, env_file=env_file)

    assert config.log_level.value == "DEBUG"


@pytest.mark.parametrize("threshold", [1.1, -1.5])
def test_threshold_out_of_range(threshold):
    """Test that thresholds outside [-1, 1] are rejected."""
    with pytest.raises(ValidationError):
        AppConfig(matcher={"similarity_threshold": threshold})


def test_non_positive_timeout_rejected():
    """Test that the request timeout must be positive."""
    with pytest.raises(ValidationError):
        AppConfig(embedding={"timeout_seconds": 0})
