"""Process-level configuration loaded from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once for the process."""

    if getattr(_load_env, "_loaded", False):  # type: ignore[attr-defined]
        return

    load_dotenv(dotenv_path)
    setattr(_load_env, "_loaded", True)  # type: ignore[attr-defined]


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection details for the record and config store."""

    driver: str = "mysql+pymysql"
    user: str = "pollen"
    password: str = "pollen"
    host: str = "127.0.0.1"
    port: int = 3306
    name: str = "pollen"
    url_override: str | None = None

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Instantiate settings using environment overrides when present."""

        defaults = cls()
        return cls(
            driver=os.getenv("DB_DRIVER", defaults.driver),
            user=os.getenv("DB_USER", defaults.user),
            password=os.getenv("DB_PASSWORD", defaults.password),
            host=os.getenv("DB_HOST", defaults.host),
            port=int(os.getenv("DB_PORT", defaults.port)),
            name=os.getenv("DB_NAME", defaults.name),
            url_override=os.getenv("DATABASE_URL") or None,
        )

    @property
    def sqlalchemy_url(self) -> str:
        """Return a SQLAlchemy compatible URL."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"

    @property
    def masked_url(self) -> str:
        if self.url_override:
            return self.url_override.split("@")[-1] if "@" in self.url_override else self.url_override
        pwd = "***" if self.password else ""
        return f"{self.driver}://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True)
class LoggingSettings:
    """Runtime knobs for the logging subsystem."""

    level: str = "INFO"
    log_dir: Path | None = Path("logs")

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        defaults = cls()
        raw_dir = os.getenv("LOG_DIR")
        if raw_dir is None:
            log_dir = defaults.log_dir
        else:
            log_dir = Path(raw_dir) if raw_dir.strip() else None
        return cls(level=os.getenv("LOG_LEVEL", defaults.level), log_dir=log_dir)


@dataclass(frozen=True)
class Settings:
    """Container for application configuration."""

    database: DatabaseSettings
    logging: LoggingSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Settings":
        """Build ``Settings`` using environment variables (optionally from ``.env``)."""

        _load_env(dotenv_path)

        sqlalchemy_echo = os.getenv("SQLALCHEMY_ECHO", "false").lower() in {"1", "true"}

        return cls(
            database=DatabaseSettings.from_env(),
            logging=LoggingSettings.from_env(),
            sqlalchemy_echo=sqlalchemy_echo,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings.from_env()
