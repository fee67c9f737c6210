import os
from functools import lru_cache

from dotenv import load_dotenv


class Settings:
    """Simple settings loaded from environment.

    Reads a local .env first, then falls back to sensible defaults.
    """

    def __init__(self) -> None:
        load_dotenv()

        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./quote_engine.db")
        self.API_KEY: str = os.getenv("API_KEY", "dev-local-key")
        self.DEFAULT_AGENCY_FEE_RATE: float = float(os.getenv("DEFAULT_AGENCY_FEE_RATE", "0.15"))
        self.RECALC_DEBOUNCE_MS: int = int(os.getenv("RECALC_DEBOUNCE_MS", "300"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_JSON: bool = os.getenv("LOG_JSON", "false").lower() in {"1", "true", "yes"}
        self.PORT: int = int(os.getenv("PORT", "8000"))

    @property
    def debounce_seconds(self) -> float:
        return max(self.RECALC_DEBOUNCE_MS, 0) / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
