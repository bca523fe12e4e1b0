"""Configuration management for the changedetection AI wrapper."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.core.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class Settings(BaseSettings):
    """Process-wide settings, read once at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # OpenRouter
    openrouter_api_key: str = Field(default="", alias="OPENROUTER_API_KEY")
    openrouter_model: str = Field(default=DEFAULT_MODEL, alias="OPENROUTER_MODEL")
    openrouter_base_url: str = Field(default=DEFAULT_BASE_URL, alias="OPENROUTER_BASE_URL")
    request_timeout: float = Field(
        default=60.0,
        alias="OPENROUTER_TIMEOUT",
        description="Outbound LLM request timeout in seconds",
    )

    # Attribution headers sent with every completion request
    public_domain: str = Field(
        default="https://railway.app",
        validation_alias=AliasChoices("public_domain", "PUBLIC_DOMAIN", "RAILWAY_PUBLIC_DOMAIN"),
    )
    app_title: str = Field(default="AI Wrapper for changedetection.io", alias="APP_TITLE")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Runtime
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "ENVIRONMENT", "NODE_ENV"),
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def require_api_key(self) -> str:
        """Return the OpenRouter key or abort startup when it is unset."""
        if not self.openrouter_api_key.strip():
            raise ConfigurationError(
                "OPENROUTER_API_KEY environment variable is required",
                context={"setting": "OPENROUTER_API_KEY"},
            )
        return self.openrouter_api_key


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
