import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


# -------------------------------------------------
# ENV HELPERS
# -------------------------------------------------
def get_required_env(name: str) -> str:
    value = os.getenv(name)
    if not value or not value.strip():
        raise RuntimeError(f"❌ Missing required env var: {name}")
    return value


def get_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if not value or not value.strip():
        return None
    return value.strip()


def get_bool_env(name: str, default: bool = False) -> bool:
    value = get_optional_env(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


# -------------------------------------------------
# SETTINGS
# -------------------------------------------------
@dataclass(frozen=True)
class Settings:
    """Process-wide settings read from the environment."""
    database_url: Optional[str]
    database_sslmode: str = "require"
    telegram_bot_token: Optional[str] = None
    weight_by_followers: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        database_url=get_optional_env("DATABASE_URL"),
        database_sslmode=os.getenv("DATABASE_SSLMODE", "require"),
        telegram_bot_token=get_optional_env("TELEGRAM_BOT_TOKEN"),
        weight_by_followers=get_bool_env("WEIGHT_BY_FOLLOWERS", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
