import os

# Database / Redis configuration
DEFAULT_DATABASE_URL = "sqlite:///./database.db"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"{name} environment variable is required")
    return value


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_redis_url() -> str:
    return os.getenv("REDIS_URL", DEFAULT_REDIS_URL)


def get_organiser_password() -> str:
    return _require("ORGANISER_PASSWORD")


def get_session_secret() -> str:
    return _require("SESSION_SECRET")


def get_app_env() -> str:
    return os.getenv("APP_ENV", "production").lower()


def is_development() -> bool:
    return get_app_env() == "development"


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


# Login rate limiting
def get_login_max_attempts() -> int:
    return int(os.getenv("LOGIN_MAX_ATTEMPTS", "5"))


def get_login_lockout_seconds() -> int:
    return int(os.getenv("LOGIN_LOCKOUT_SECONDS", str(15 * 60)))


# Per-event ledger lock
def get_event_lock_timeout() -> float:
    return float(os.getenv("EVENT_LOCK_TIMEOUT", "10"))


def get_event_lock_blocking_timeout() -> float:
    return float(os.getenv("EVENT_LOCK_BLOCKING_TIMEOUT", "5"))
