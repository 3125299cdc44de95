from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field
import os

load_dotenv(Path(__file__).resolve().parents[2] / ".env", override=False)


def _env(name: str, default: str = ""):
    return lambda: os.getenv(name, default)


class Settings(BaseModel):
    outscraper_api_key: str = Field(default_factory=_env("OUTSCRAPER_API_KEY"))
    outscraper_base_url: str = Field(default_factory=_env("OUTSCRAPER_BASE_URL", "https://api.app.outscraper.com"))
    outscraper_timeout_s: float = Field(default_factory=lambda: float(os.getenv("OUTSCRAPER_TIMEOUT_S", "30")))
    database_url: str = Field(default_factory=_env("DATABASE_URL", "sqlite:///./leads.db"))
    log_level: str = Field(default_factory=_env("LOG_LEVEL", "INFO"))

settings = Settings()
