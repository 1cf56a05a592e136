"""Configuration settings for the face authentication service."""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from faceauth.domain.value_objects.matching import MatchPolicy


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        STORE_BACKEND: Identity store implementation, "sql" or "memory"
        DATABASE_URL: SQLAlchemy async connection URL for the SQL store
        EMBEDDING_DIMENSION: Required length of every face embedding
        AUTH_*: Thresholds used when authenticating a face
        DUPLICATE_*: Thresholds used when checking a new face for duplicates
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
    )

    # Core Settings
    PROJECT_NAME: str = "Face Authentication Service"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:5173"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Storage Settings
    STORE_BACKEND: str = "sql"
    DATABASE_URL: str = "sqlite+aiosqlite:///./faceauth.db"
    DATABASE_ECHO: bool = False

    # Embedding Settings
    EMBEDDING_DIMENSION: int = 128

    # Authentication policy (lenient, favours usability)
    AUTH_DISTANCE_THRESHOLD: float = 0.6
    AUTH_SIMILARITY_THRESHOLD: float = 0.8
    AUTH_MIN_CONFIDENCE: float = 0.0

    # Duplicate detection policy (strict, favours precision)
    DUPLICATE_DISTANCE_THRESHOLD: float = 0.5
    DUPLICATE_SIMILARITY_THRESHOLD: float = 0.85
    DUPLICATE_MIN_CONFIDENCE: float = 85.0

    # Confidence blending, shared by both policies
    DISTANCE_WEIGHT: float = 0.3
    SIMILARITY_WEIGHT: float = 0.7
    MAX_CONFIDENCE: float = 95.0

    @property
    def auth_policy(self) -> MatchPolicy:
        """Policy applied by the recognize operation."""
        return MatchPolicy(
            distance_threshold=self.AUTH_DISTANCE_THRESHOLD,
            similarity_threshold=self.AUTH_SIMILARITY_THRESHOLD,
            minimum_confidence=self.AUTH_MIN_CONFIDENCE,
            distance_weight=self.DISTANCE_WEIGHT,
            similarity_weight=self.SIMILARITY_WEIGHT,
            max_confidence=self.MAX_CONFIDENCE,
        )

    @property
    def duplicate_policy(self) -> MatchPolicy:
        """Policy applied by the registration duplicate check."""
        return MatchPolicy(
            distance_threshold=self.DUPLICATE_DISTANCE_THRESHOLD,
            similarity_threshold=self.DUPLICATE_SIMILARITY_THRESHOLD,
            minimum_confidence=self.DUPLICATE_MIN_CONFIDENCE,
            distance_weight=self.DISTANCE_WEIGHT,
            similarity_weight=self.SIMILARITY_WEIGHT,
            max_confidence=self.MAX_CONFIDENCE,
        )

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

settings = Settings()
