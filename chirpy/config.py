"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"

    # Flat-file storage
    data_dir: Path = Path("data")
    debug: bool = False  # Reset all stores on startup

    # Authentication
    jwt_secret: str = "change-me-in-production"
    access_token_ttl_seconds: int = 3600  # 1 hour
    refresh_token_ttl_days: int = 60
    bcrypt_rounds: int = 12

    # Chirps
    chirp_max_length: int = 140
    profane_words: str = "kerfuffle,sharbert,fornax"

    @property
    def profane_words_list(self) -> List[str]:
        """Parse comma-separated profane words into a lowercase list."""
        return [w.strip().lower() for w in self.profane_words.split(",") if w.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
