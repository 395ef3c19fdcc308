"""
AutoMindMap - Application Settings
"""
from functools import lru_cache
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra environment variables
        populate_by_name=True,
    )

    # Application
    app_name: str = "AutoMindMap"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Gemini (OpenAI-compatible endpoint). Required: the app refuses to start without it.
    gemini_api_key: str = Field(validation_alias=AliasChoices("gemini_api_key", "google_api_key"))
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

    # LLM Settings
    llm_model: str = "gemini-2.5-flash"
    llm_fallback_model: Optional[str] = "gemini-2.0-flash-lite"  # Empty string disables fallback
    chat_model: str = "gemini-2.0-flash"
    llm_max_attempts: int = 3
    llm_retry_base_ms: int = 1000
    llm_fallback_backoff_ms: int = 500
    llm_timeout_seconds: float = 60.0
    llm_max_tokens: int = 4000
    llm_temperature: float = 0.4

    # YouTube
    youtube_api_key: Optional[str] = None  # Optional - enables Data API metadata + captions
    youtube_timeout_seconds: float = 10.0

    # Chat
    chat_history_turns: int = 10

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 60

    # CORS
    cors_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = True

    # Development
    allow_no_auth: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def fallback_model(self) -> Optional[str]:
        """Fallback model name, or None when disabled"""
        return self.llm_fallback_model or None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
