"""YAML + environment config loading and validation."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_SESSION_SECRET = "dev-secret-change-me-in-production"
MIN_BCRYPT_ROUNDS = 10


@dataclass
class DatabaseConfig:
    url: str = "sqlite:///data/job_board.db"
    echo: bool = False


@dataclass
class SessionConfig:
    secret: str = DEFAULT_SESSION_SECRET
    cookie_name: str = "job_board_session"
    max_age: int = 60 * 60 * 24 * 7  # 1 week


@dataclass
class SecurityConfig:
    bcrypt_rounds: int = MIN_BCRYPT_ROUNDS


@dataclass
class LoggingConfig:
    dir: str = "logs"
    level: str = "INFO"
    filename: str = "job_board.log"
    max_bytes: int = 5 * 1024 * 1024  # 5MB per file
    backup_count: int = 3


@dataclass
class AppConfig:
    environment: str = "development"  # development, test, production
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def secure_cookies(self) -> bool:
        return self.environment == "production"


def _normalize_database_url(url: str) -> str:
    # Heroku/Railway style URLs use postgres:// but SQLAlchemy 2.x requires postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from an optional YAML file; env vars take precedence."""
    raw = {}
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Copy config.example.yaml to config.yaml and fill in your settings."
            )
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    config = AppConfig()
    config.environment = os.environ.get("JOB_BOARD_ENV", raw.get("environment", "development"))

    # Database
    db_raw = raw.get("database", {})
    url = (
        os.environ.get("DATABASE_URL")
        or os.environ.get("POSTGRES_URL")
        or db_raw.get("url", "sqlite:///data/job_board.db")
    )
    config.database = DatabaseConfig(
        url=_normalize_database_url(url),
        echo=bool(db_raw.get("echo", False)),
    )

    # Session cookie
    session_raw = raw.get("session", {})
    config.session = SessionConfig(
        secret=os.environ.get("SESSION_SECRET", session_raw.get("secret", DEFAULT_SESSION_SECRET)),
        cookie_name=session_raw.get("cookie_name", "job_board_session"),
        max_age=int(session_raw.get("max_age", 60 * 60 * 24 * 7)),
    )

    # Password hashing
    security_raw = raw.get("security", {})
    config.security = SecurityConfig(
        bcrypt_rounds=int(os.environ.get("BCRYPT_ROUNDS", security_raw.get("bcrypt_rounds", MIN_BCRYPT_ROUNDS))),
    )

    # Logging
    log_raw = raw.get("logging", {})
    config.logging = LoggingConfig(
        dir=os.environ.get("LOG_DIR", log_raw.get("dir", "logs")),
        level=os.environ.get("LOG_LEVEL", log_raw.get("level", "INFO")).upper(),
        filename=log_raw.get("filename", "job_board.log"),
        max_bytes=int(log_raw.get("max_bytes", 5 * 1024 * 1024)),
        backup_count=int(log_raw.get("backup_count", 3)),
    )

    return config


def validate_config(config: AppConfig) -> list[str]:
    """Return list of validation warnings (empty = OK)."""
    warnings = []

    if config.environment == "production" and config.session.secret == DEFAULT_SESSION_SECRET:
        warnings.append("SESSION_SECRET is the development default - session cookies can be forged")

    if config.environment == "production" and config.database.url.startswith("sqlite"):
        warnings.append("SQLite database configured in production - use PostgreSQL")

    if config.security.bcrypt_rounds < MIN_BCRYPT_ROUNDS:
        warnings.append(
            f"bcrypt_rounds={config.security.bcrypt_rounds} is below the minimum of "
            f"{MIN_BCRYPT_ROUNDS} - the minimum will be used"
        )

    return warnings


@lru_cache
def get_config() -> AppConfig:
    """Process-wide configuration (path from JOB_BOARD_CONFIG)."""
    return load_config(os.environ.get("JOB_BOARD_CONFIG"))
