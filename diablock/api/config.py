"""
API configuration settings.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """API settings."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Simulation
    DEFAULT_SEED: Optional[int] = None
    TICK_INTERVAL_MS: int = 1000
    MAX_TICKS_PER_REQUEST: int = 1000
    MAX_SIMULATION_RUNS: int = 100
    MAX_SIMULATION_TICKS: int = 20000

    # Session
    MAX_SESSIONS: int = 100
    SAVE_DIR: str = "saves"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    """Get Settings singleton."""
    return Settings()


settings = get_settings()
