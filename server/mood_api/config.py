"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Sheet store
    data_path: str = os.getenv("DATA_PATH", os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
    store_filename: str = "mood_tracker.db"
    store_timeout_seconds: float = 5.0

    @property
    def store_db_path(self) -> str:
        return os.path.join(self.data_path, self.store_filename)

    # Sheet names
    mood_sheet: str = "MoodData"
    raw_sheet: str = "RawData"
    summary_sheet: str = "Summary"
    risk_summary_sheet: str = "RiskSummary"

    # Analytics: submitted scores are 1-10, risk heuristics use (score - neutral)
    mood_neutral: float = 5.0
    risk_window: int = 7

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 3000
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_prefix = "MOOD_"


@lru_cache
def get_settings() -> Settings:
    return Settings()
