"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings

from smartsignal.schemas.market import Timeframe
from smartsignal.schemas.signals import StrategyPreset


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "SmartSignal"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Strategy
    default_preset: StrategyPreset = StrategyPreset.ENHANCED
    min_candles: int = 100  # below this the calling layer refuses to analyze

    # Market data
    default_symbol: str = "EURUSD"
    default_timeframe: Timeframe = Timeframe.M15
    default_lookback: int = 200
    mock_seed: int = 42

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
