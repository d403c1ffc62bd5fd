"""Configuration management for environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from volume_fetch.utils.exceptions import ConfigurationError

DEFAULT_STRAPI_BASE_URL = "https://itell-strapi-um5h.onrender.com/api/texts"
DEFAULT_REQUEST_TIMEOUT = 60.0


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Load configuration from .env file and environment."""
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)

        self.strapi_base_url = os.getenv("STRAPI_BASE_URL", DEFAULT_STRAPI_BASE_URL).rstrip("/")
        self.request_timeout = self._get_float("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)

        # Embedding store used by the health check
        self.embeddings_supabase_url, self.embeddings_supabase_api_key = self._get_pair(
            "EMBEDDINGS_SUPABASE_URL", "EMBEDDINGS_SUPABASE_API_KEY"
        )

        # Log table receiving health check reports
        self.log_supabase_url, self.log_supabase_api_key = self._get_pair(
            "LOG_SUPABASE_URL", "LOG_SUPABASE_API_KEY"
        )

        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    @property
    def health_check_enabled(self) -> bool:
        """Whether embedding store credentials are configured."""
        return self.embeddings_supabase_url is not None

    @property
    def report_logging_enabled(self) -> bool:
        """Whether health check reports can be saved to the log table."""
        return self.log_supabase_url is not None

    def _get_required(self, key: str) -> str:
        """Get required environment variable or raise error.

        Args:
            key: Environment variable name

        Returns:
            Environment variable value

        Raises:
            ConfigurationError: If variable is not set
        """
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(f"{key} environment variable is not set")
        return value

    def _get_pair(self, url_key: str, api_key_key: str) -> tuple[str | None, str | None]:
        """Read an optional URL/API key pair.

        Either both variables are set or neither is.

        Raises:
            ConfigurationError: If only one of the two variables is set
        """
        if not os.getenv(url_key) and not os.getenv(api_key_key):
            return None, None
        return self._get_required(url_key), self._get_required(api_key_key)

    def _get_float(self, key: str, default: float) -> float:
        value = os.getenv(key)
        if not value:
            return default
        try:
            return float(value)
        except ValueError as e:
            raise ConfigurationError(f"{key} must be a number, got '{value}'") from e
