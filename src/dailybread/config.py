"""Configuration management for dailybread.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


DEFAULT_BIBLE_API_URL = "https://api.scripture.api.bible/v1"
DEFAULT_AI_API_URL = "https://api.deepseek.com/chat/completions"


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Bible content API
    bible_api_url: str
    bible_api_key: Optional[str]
    api_timeout: float  # seconds

    # Request queue and rate limiting
    batch_size: int
    queue_delay: float  # seconds between batches
    rate_limit_per_minute: int
    request_cooldown: float  # seconds before every request

    # Cache lifetimes
    passage_expiry_days: float
    refresh_after_days: float
    passage_gc_days: float
    offline_gc_days: float
    cleanup_interval_hours: float

    # AI completion API
    ai_api_url: str
    ai_api_key: Optional[str]
    ai_model: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "DAILYBREAD_DB_PATH",
            str(Path.home() / ".dailybread" / "dailybread.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            bible_api_url=os.environ.get("BIBLE_API_URL", DEFAULT_BIBLE_API_URL),
            bible_api_key=os.environ.get("BIBLE_API_KEY"),
            api_timeout=float(os.environ.get("BIBLE_API_TIMEOUT", "15")),
            batch_size=int(os.environ.get("DAILYBREAD_BATCH_SIZE", "10")),
            queue_delay=float(os.environ.get("DAILYBREAD_QUEUE_DELAY", "0.1")),
            rate_limit_per_minute=int(os.environ.get("DAILYBREAD_RATE_LIMIT", "50")),
            request_cooldown=float(os.environ.get("DAILYBREAD_COOLDOWN", "0.5")),
            passage_expiry_days=float(
                os.environ.get("DAILYBREAD_PASSAGE_EXPIRY_DAYS", "7")
            ),
            refresh_after_days=float(
                os.environ.get("DAILYBREAD_REFRESH_AFTER_DAYS", "1")
            ),
            passage_gc_days=float(os.environ.get("DAILYBREAD_PASSAGE_GC_DAYS", "30")),
            offline_gc_days=float(os.environ.get("DAILYBREAD_OFFLINE_GC_DAYS", "90")),
            cleanup_interval_hours=float(
                os.environ.get("DAILYBREAD_CLEANUP_INTERVAL_HOURS", "6")
            ),
            ai_api_url=os.environ.get("DEEPSEEK_API_URL", DEFAULT_AI_API_URL),
            ai_api_key=os.environ.get("DEEPSEEK_API_KEY"),
            ai_model=os.environ.get("DEEPSEEK_MODEL", "deepseek-chat"),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if self.batch_size < 1:
            errors.append("DAILYBREAD_BATCH_SIZE must be at least 1")
        if self.rate_limit_per_minute < 1:
            errors.append("DAILYBREAD_RATE_LIMIT must be at least 1")
        if self.refresh_after_days > self.passage_expiry_days:
            errors.append(
                "DAILYBREAD_REFRESH_AFTER_DAYS cannot exceed DAILYBREAD_PASSAGE_EXPIRY_DAYS"
            )
        if not self.bible_api_key:
            errors.append("BIBLE_API_KEY is not set; only cached and static data is available")

        return errors

    def has_bible_api_config(self) -> bool:
        """Check if the Bible content API key is present."""
        return bool(self.bible_api_key)

    def has_ai_config(self) -> bool:
        """Check if a usable AI completion key is present."""
        return bool(self.ai_api_key and len(self.ai_api_key) >= 10)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
