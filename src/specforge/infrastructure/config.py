"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from specforge.domain.entities import LlmConfiguration, LlmProvider


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    llm_provider: LlmProvider = LlmProvider.OLLAMA
    llm_model: str = "llama3"
    llm_api_key: SecretStr | None = None
    llm_base_url: str = ""
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 3
    host: str = "0.0.0.0"
    port: int = 8000

    def llm_configuration(self) -> LlmConfiguration:
        """The provider binding described by the environment."""
        return LlmConfiguration(
            provider=self.llm_provider,
            model=self.llm_model,
            api_key=self.llm_api_key.get_secret_value() if self.llm_api_key else None,
            base_url=self.llm_base_url or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
