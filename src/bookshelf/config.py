"""Configuration management for bookshelf.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_DB_PATH = Path.home() / ".bookshelf" / "books.db"


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Logging
    log_level: str

    # List screen
    default_sort: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get("BOOKSHELF_DB_PATH", str(DEFAULT_DB_PATH))
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            log_level=os.environ.get("BOOKSHELF_LOG_LEVEL", "WARNING").upper(),
            default_sort=os.environ.get("BOOKSHELF_DEFAULT_SORT", "name_asc").lower(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        from .query import SortOrder

        errors = []

        # Check database directory is writable
        if not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        if self.default_sort not in {order.value for order in SortOrder}:
            errors.append(f"Unknown default sort: {self.default_sort}")

        return errors


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
