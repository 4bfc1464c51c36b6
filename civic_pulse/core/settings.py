"""
Core settings and environment variables for Civic Pulse triage.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Civic Pulse Triage"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Firebase/Firestore (issue store, read-only for triage)
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    ISSUES_COLLECTION: str = "issues"

    # AI Configuration
    # Gemini is the primary provider; OpenAI is only used when no Gemini key is set.
    AI_ENABLED: bool = True
    GEMINI_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.0-flash-exp"
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_VISION_MODEL: str = "gpt-4o-mini"
    AI_TIMEOUT_SECONDS: float = 10.0
    AI_TEMPERATURE: float = 0.3
    AI_MAX_OUTPUT_TOKENS: int = 500

    # Similar issue lookup (cluster boost)
    SIMILAR_ISSUES_RADIUS_METERS: float = 5000.0
    SIMILAR_ISSUES_WINDOW_DAYS: int = 30
    SIMILAR_ISSUES_LIMIT: int = 10
    SPATIAL_QUERY_TIMEOUT_SECONDS: float = 5.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


# Global settings instance
settings = Settings()
