"""Process-level configuration for the content intelligence core"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    SERVICE_NAME: str = "Content Intelligence"

    # Signal store (append-only classification signals)
    SIGNAL_STORE_URL: str = "sqlite:///./classification_signals.db"
    SIGNAL_STORE_ECHO: bool = False

    # LangSmith Configuration (Optional)
    LANGCHAIN_TRACING_V2: bool = False
    LANGCHAIN_PROJECT: str = "content-intelligence"
    LANGCHAIN_ENDPOINT: str = "https://api.smith.langchain.com"
    LANGCHAIN_API_KEY: Optional[str] = None

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
