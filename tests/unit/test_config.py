"""Tests for configuration management."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from volume_fetch.utils.config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_STRAPI_BASE_URL, Config
from volume_fetch.utils.exceptions import ConfigurationError

ENV_VARS = [
    "STRAPI_BASE_URL",
    "REQUEST_TIMEOUT",
    "EMBEDDINGS_SUPABASE_URL",
    "EMBEDDINGS_SUPABASE_API_KEY",
    "LOG_SUPABASE_URL",
    "LOG_SUPABASE_API_KEY",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear configuration variables and keep .env files out of the tests."""
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    with patch("volume_fetch.utils.config.load_dotenv"):
        yield


def test_config_defaults() -> None:
    """Test that Config works with no environment at all."""
    config = Config()

    assert config.strapi_base_url == DEFAULT_STRAPI_BASE_URL
    assert config.request_timeout == DEFAULT_REQUEST_TIMEOUT
    assert config.log_level == "INFO"
    assert config.health_check_enabled is False
    assert config.report_logging_enabled is False


def test_config_custom_strapi_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that STRAPI_BASE_URL is read and its trailing slash dropped."""
    monkeypatch.setenv("STRAPI_BASE_URL", "http://localhost:1337/api/texts/")

    config = Config()

    assert config.strapi_base_url == "http://localhost:1337/api/texts"


def test_config_request_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that REQUEST_TIMEOUT is parsed as seconds."""
    monkeypatch.setenv("REQUEST_TIMEOUT", "12.5")

    assert Config().request_timeout == 12.5


def test_config_invalid_request_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a non-numeric timeout is rejected."""
    monkeypatch.setenv("REQUEST_TIMEOUT", "soon")

    with pytest.raises(ConfigurationError, match="REQUEST_TIMEOUT must be a number"):
        Config()


def test_config_embedding_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that embedding credentials enable the health check."""
    monkeypatch.setenv("EMBEDDINGS_SUPABASE_URL", "https://emb.supabase.co")
    monkeypatch.setenv("EMBEDDINGS_SUPABASE_API_KEY", "emb-key")

    config = Config()

    assert config.health_check_enabled is True
    assert config.embeddings_supabase_url == "https://emb.supabase.co"
    assert config.embeddings_supabase_api_key == "emb-key"
    assert config.report_logging_enabled is False


def test_config_log_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that log credentials enable report persistence."""
    monkeypatch.setenv("LOG_SUPABASE_URL", "https://log.supabase.co")
    monkeypatch.setenv("LOG_SUPABASE_API_KEY", "log-key")

    config = Config()

    assert config.report_logging_enabled is True
    assert config.log_supabase_api_key == "log-key"


@pytest.mark.parametrize(
    ("present", "missing"),
    [
        ("EMBEDDINGS_SUPABASE_URL", "EMBEDDINGS_SUPABASE_API_KEY"),
        ("EMBEDDINGS_SUPABASE_API_KEY", "EMBEDDINGS_SUPABASE_URL"),
        ("LOG_SUPABASE_URL", "LOG_SUPABASE_API_KEY"),
    ],
)
def test_config_incomplete_pair(
    monkeypatch: pytest.MonkeyPatch, present: str, missing: str
) -> None:
    """Test that half of a credential pair is an error."""
    monkeypatch.setenv(present, "value")

    with pytest.raises(ConfigurationError, match=missing):
        Config()


def test_config_custom_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that Config respects custom LOG_LEVEL."""
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    assert Config().log_level == "DEBUG"


def test_config_loads_dotenv_when_present(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Test that a .env file in the working directory is loaded."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("LOG_LEVEL=WARNING\n")

    with patch("volume_fetch.utils.config.load_dotenv") as mock_load:
        Config()

    mock_load.assert_called_once()

