"""
Merkle Tree Proofs - Configuration
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_HASH_ALGORITHMS = ("keccak256", "sha256", "sha3_256", "blake2s")


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Merkle Tree Proofs"
    VERSION: str = "1.0.0"
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CONFIGURE_LOGGING: bool = True

    # Hashing
    HASH_ALGORITHM: str = "keccak256"

    # Metrics
    METRICS_ENABLED: bool = True

    @field_validator("HASH_ALGORITHM")
    @classmethod
    def check_hash_algorithm(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(
                f"HASH_ALGORITHM must be one of {', '.join(SUPPORTED_HASH_ALGORITHMS)}"
            )
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
