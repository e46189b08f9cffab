"""
Application configuration using Pydantic Settings.
All configuration values can be overridden via environment variables or .env file.
"""
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Task Prioritizer API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8787

    # Model: Cohere
    cohere_api_key: Optional[str] = None
    cohere_api_url: str = "https://api.cohere.ai/v1"
    cohere_model: str = "command-light"

    # AI Model Configuration
    max_tokens: int = 200
    temperature: float = 0.0
    request_timeout: int = 60
    log_ai_requests: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def model_configured(self) -> bool:
        """Whether a provider credential is available."""
        return bool(self.cohere_api_key)

    def get_model_url(self, endpoint: str = "generate") -> str:
        """Get the full URL for a provider endpoint."""
        return f"{self.cohere_api_url.rstrip('/')}/{endpoint}"


# Global settings instance (lazily initialized)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
