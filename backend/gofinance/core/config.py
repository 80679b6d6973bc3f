import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv


def _should_load_dotenv() -> bool:
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret: str
    jwt_algorithm: str
    token_ttl_minutes: int
    redis_url: str | None
    redis_prefix: str
    login_rate_limit: int
    login_rate_window: int
    register_rate_limit: int
    register_rate_window: int
    password_min_len: int
    username_re: re.Pattern[str]
    email_re: re.Pattern[str]
    db_pool_min: int
    db_pool_max: int
    db_pool_timeout: float
    db_pool_max_waiting: int
    log_level: str
    server_host: str
    server_port: int


def load_settings() -> Settings:
    database_url = os.getenv("DATABASE_URL", "")
    jwt_secret = os.getenv("JWT_SECRET")
    if not database_url:
        raise RuntimeError("DATABASE_URL is required")
    if not jwt_secret:
        raise RuntimeError("JWT_SECRET is required")

    db_pool_min = max(1, int(os.getenv("DB_POOL_MIN", "1")))
    db_pool_max = max(db_pool_min, int(os.getenv("DB_POOL_MAX", "10")))

    return Settings(
        database_url=database_url,
        jwt_secret=jwt_secret,
        jwt_algorithm=(os.getenv("JWT_ALGORITHM") or "HS256").strip() or "HS256",
        token_ttl_minutes=max(1, int(os.getenv("TOKEN_TTL_MINUTES", "60"))),
        redis_url=(os.getenv("REDIS_URL") or "").strip() or None,
        redis_prefix=(os.getenv("REDIS_PREFIX") or "gofinance").strip() or "gofinance",
        login_rate_limit=int(os.getenv("LOGIN_RATE_LIMIT", "10")),
        login_rate_window=int(os.getenv("LOGIN_RATE_WINDOW", "300")),
        register_rate_limit=int(os.getenv("REGISTER_RATE_LIMIT", "5")),
        register_rate_window=int(os.getenv("REGISTER_RATE_WINDOW", "900")),
        password_min_len=int(os.getenv("PASSWORD_MIN_LEN", "8")),
        username_re=re.compile(r"^[a-zA-Z0-9._-]{3,32}$"),
        email_re=re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$"),
        db_pool_min=db_pool_min,
        db_pool_max=db_pool_max,
        db_pool_timeout=float(os.getenv("DB_POOL_TIMEOUT", "30")),
        db_pool_max_waiting=int(os.getenv("DB_POOL_MAX_WAITING", "100")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper() or "INFO",
        server_host=(os.getenv("SERVER_HOST") or "0.0.0.0").strip() or "0.0.0.0",
        server_port=int(os.getenv("SERVER_PORT", "8000")),
    )


settings = load_settings()
