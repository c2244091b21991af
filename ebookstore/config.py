"""
Application settings read from the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

REPOSITORY_BACKENDS = ("memory", "sqlite")


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, read once at application construction.

    Environment variables:
        EBOOK_REPOSITORY: "memory" (default) or "sqlite"
        DB_PATH: SQLite file path (default data/ebooks.db)
        LOG_LEVEL: logging level name (default INFO)
        MESSAGES_LOCALE: validation message locale, "en" (default) or "pt_BR"
    """

    repository: str = "memory"
    db_path: Path = Path("data/ebooks.db")
    log_level: str = "INFO"
    messages_locale: str = "en"

    def __post_init__(self) -> None:
        if self.repository not in REPOSITORY_BACKENDS:
            raise ValueError(
                f"EBOOK_REPOSITORY must be one of {REPOSITORY_BACKENDS}, got '{self.repository}'"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            repository=env.get("EBOOK_REPOSITORY", "memory").strip().lower(),
            db_path=Path(env.get("DB_PATH", "data/ebooks.db")),
            log_level=env.get("LOG_LEVEL", "INFO").strip().upper(),
            messages_locale=env.get("MESSAGES_LOCALE", "en").strip(),
        )
