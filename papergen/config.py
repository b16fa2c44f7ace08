"""
Configuration settings for the PaperGen backend.
Loads environment variables and provides application-wide settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Gemini Configuration
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_VISION_MODEL: str = "gemini-2.5-flash"
    GEMINI_TIMEOUT: float = 180.0  # long documents take a while to generate
    GEMINI_TEMPERATURE: float = 0.7
    CHAT_MAX_TOKENS: int = 1024

    # Pixabay Configuration
    PIXABAY_API_KEY: str = ""
    PIXABAY_API_URL: str = "https://pixabay.com/api/"
    PIXABAY_TIMEOUT: float = 10.0
    IMAGE_RESULTS_PER_QUERY: int = 10

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Processing Configuration
    MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10 MB
    # Subsections nested deeper than this are dropped by the renderers
    MAX_RENDER_DEPTH: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
