"""Application configuration settings."""
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import model_validator

# Get the server directory path
SERVER_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LINE Messaging API
    LINE_CHANNEL_SECRET: str
    LINE_CHANNEL_ACCESS_TOKEN: str
    LINE_API_ENDPOINT: str = "https://api.line.me"
    LINE_DATA_API_ENDPOINT: str = "https://api-data.line.me"
    LINE_TIMEOUT: int = 30

    # Vision / chat completion model (OpenAI-compatible)
    OPENAI_API_KEY: str
    OPENAI_ENDPOINT: str = "https://api.openai.com"
    OPENAI_MODEL: str = "gpt-4o"
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 512
    LLM_TIMEOUT: int = 60

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Answer the webhook first, then run handlers as a background task
    PROCESS_EVENTS_IN_BACKGROUND: bool = True

    @model_validator(mode="after")
    def _validate_settings(self) -> "Settings":
        for name in ("LINE_CHANNEL_SECRET", "LINE_CHANNEL_ACCESS_TOKEN", "OPENAI_API_KEY"):
            if not getattr(self, name).strip():
                raise ValueError(f"{name} must not be empty")
        if not 0.0 <= self.LLM_TEMPERATURE <= 2.0:
            raise ValueError("LLM_TEMPERATURE must be between 0.0 and 2.0")
        if self.LLM_MAX_TOKENS < 1:
            raise ValueError("LLM_MAX_TOKENS must be positive")
        return self

    class Config:
        env_file = str(SERVER_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
