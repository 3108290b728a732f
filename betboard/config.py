"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def resolve_database_url() -> str:
    """Resolve DB connection string for the SQL backend.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")
    port_raw = os.getenv("PGPORT")

    if host and user and database:
        password = os.getenv("PGPASSWORD")
        sslmode = os.getenv("PGSSLMODE", "require")

        try:
            port = int(port_raw) if port_raw else 5432
        except ValueError:
            port = 5432

        query = {"sslmode": sslmode} if sslmode else {}
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=password,
            host=host,
            port=port,
            database=database,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./betboard.db"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, "") or default)
    except ValueError:
        return default


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    DB_BACKEND: str = (
        os.getenv("DB_BACKEND")
        or ("mongo" if os.getenv("MONGODB_URI") else "sql")
    ).lower().strip()  # "sql" | "mongo"

    # SQL backend
    DATABASE_URL: str = resolve_database_url()

    # Mongo backend
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "betboard")
    MONGODB_TIMEOUT_MS: int = _env_int("MONGODB_TIMEOUT_MS", 5000)

    BETS_COLLECTION: str = os.getenv("BETS_COLLECTION", "bets")

    # Slot boundaries are computed in this zone's wall-clock time.
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    SCHEDULER_ENABLED: bool = _env_bool("SCHEDULER_ENABLED", True)
    SCHEDULER_INTERVAL_SECONDS: int = _env_int("SCHEDULER_INTERVAL_SECONDS", 60)
    DASHBOARD_VARIANTS: str = os.getenv("DASHBOARD_VARIANTS", "jodi,single")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Test configuration: local SQL store, no background jobs."""

    TESTING: bool = True
    DB_BACKEND: str = "sql"
    DATABASE_URL: str = "sqlite:///./betboard-test.db"
    SCHEDULER_ENABLED: bool = False


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig


def config_as_dict(config_cls: type[BaseConfig] | None = None) -> dict:
    """Uppercase settings of a config class, for code running outside Flask."""

    config_cls = config_cls or get_config()
    return {k: getattr(config_cls, k) for k in dir(config_cls) if k.isupper()}
