import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv
from fastapi import Request


DEFAULT_SESSION_SECRET = "secret-change-this"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    session_secret: str = DEFAULT_SESSION_SECRET
    session_max_age_hours: int = 24
    session_purge_interval_seconds: float = 60.0
    session_cookie_name: str = "ella_rises.sid"
    port: int = 3000
    app_env: str = "development"
    cookie_secure: bool = False
    admin_email: str = "admin@test.com"
    admin_password: str = "pass"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_max_age_hours * 60 * 60


def _database_url(env: Mapping[str, str]) -> str:
    url = env.get("DATABASE_URL")
    if url:
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    host = env.get("DB_HOST", "127.0.0.1")
    port = env.get("DB_PORT", "5432")
    user = env.get("DB_USER", "postgres")
    password = env.get("DB_PASS", "")
    name = env.get("DB_NAME", "ella_rises")
    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the process environment (or an explicit mapping).

    Every value falls back to a literal default, including the session
    secret, so a bare checkout starts up; ``validate_runtime_config`` is what
    stops that default from reaching production.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    app_env = env.get("APP_ENV", "development")
    return Settings(
        database_url=_database_url(env),
        session_secret=env.get("SESSION_SECRET", DEFAULT_SESSION_SECRET),
        session_max_age_hours=int(env.get("SESSION_MAX_AGE_HOURS", "24")),
        session_purge_interval_seconds=float(env.get("SESSION_PURGE_INTERVAL_SECONDS", "60")),
        port=int(env.get("PORT", "3000")),
        app_env=app_env,
        cookie_secure=_get_bool(env.get("SESSION_COOKIE_SECURE"), default=app_env.lower() == "production"),
        admin_email=env.get("ADMIN_EMAIL", "admin@test.com"),
        admin_password=env.get("ADMIN_PASSWORD", "pass"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )


def validate_runtime_config(settings: Settings) -> None:
    if settings.is_production and settings.session_secret == DEFAULT_SESSION_SECRET:
        raise RuntimeError("SESSION_SECRET must be set in production.")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
