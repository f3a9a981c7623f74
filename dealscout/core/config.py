from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from dealscout.core.version import __version__


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (prefix ``DEALSCOUT_``)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DEALSCOUT_",
        case_sensitive=False,
        extra="ignore",
    )

    LOG_LEVEL: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Embedding
    EMBEDDING_DIM: int = 100
    MIN_TOKEN_LENGTH: int = 3

    # Preference store
    PREFERENCE_STEP: float = 0.15
    MAX_PAST_ORGANIZATIONS: int = 3

    # Scoring
    BASE_SCORE: float = 50.0
    NET_WEIGHT_THRESHOLD: float = 0.1  # |net| at or below this is noise
    NET_WEIGHT_MULTIPLIER: float = 20.0
    SIMILARITY_THRESHOLD: float = 0.5
    SIMILARITY_MULTIPLIER: float = 15.0

    # Personas
    RED_FLAG_SEED_STEPS: int = 2


settings = Settings()

APP_VERSION = __version__
