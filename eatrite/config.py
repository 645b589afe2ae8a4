"""Application configuration using pydantic-settings."""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys (empty key -> mock backend)
    openai_api_key: str = ""

    # Server
    port: int = 8080
    host: str = "0.0.0.0"

    # Logging
    log_level: str = "INFO"

    # HTTP Settings
    http_timeout: float = 60.0  # seconds, per OpenAI call
    generation_timeout: Optional[float] = 110.0  # seconds, whole generate() call
    max_request_size: int = 10 * 1024 * 1024  # 10MB

    # Rate Limiting
    rate_limit_per_hour: int = 100

    # CORS
    cors_origins: str = "*"  # Comma-separated origins or "*" for all

    # OpenAI Settings
    openai_base_url: str = "https://api.openai.com/v1"
    openai_text_model: str = "gpt-4"
    openai_vision_model: str = "gpt-4-vision-preview"
    openai_suggestion_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 2000
    openai_suggestion_max_tokens: int = 300

    # Mock backend
    use_mock_ai: bool = False
    mock_delay_seconds: float = 2.0
    mock_suggestion_delay_seconds: float = 1.0

    # Vision uploads
    vision_max_dim: int = 1400
    jpeg_quality: int = 78

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of CORS origins."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def mock_ai_enabled(self) -> bool:
        """Mock backend is used when forced or when no OpenAI key is configured."""
        return self.use_mock_ai or not self.openai_api_key.strip()


# Global settings instance
settings = Settings()
