import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.hash import bcrypt

from gofinance.core.config import settings
from gofinance.core.errors import InvalidRequest, RateLimited, Unauthorized
from gofinance.models.schemas import LoginRequest, UserCreateRequest
from gofinance.services.state import rate_limiter
from gofinance.services.users import USER_COLUMNS

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenClaims:
    username: str
    user_id: int
    expires_at: datetime


def get_client_ip(req: Request) -> str:
    forwarded = req.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = req.headers.get("x-real-ip", "")
    if real_ip:
        return real_ip.strip()
    if req.client:
        return req.client.host
    return "unknown"


def create_access_token(username: str, user_id: int, now: datetime | None = None) -> tuple[str, datetime]:
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=settings.token_ttl_minutes)
    claims = {"sub": username, "uid": user_id, "iat": issued_at, "exp": expires_at}
    token = jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, expires_at


def decode_access_token(token: str) -> TokenClaims:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except JWTError:
        logger.warning("token_rejected reason=invalid")
        raise Unauthorized("Invalid token")

    username = payload.get("sub")
    user_id = payload.get("uid")
    if not username or not isinstance(user_id, int):
        raise Unauthorized("Invalid token")
    return TokenClaims(
        username=username,
        user_id=user_id,
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
    )


def parse_bearer_token(req: Request) -> str:
    header = req.headers.get("authorization", "")
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise Unauthorized("Missing bearer token")
    return parts[1].strip()


def require_token(req: Request) -> TokenClaims:
    return decode_access_token(parse_bearer_token(req))


def enforce_register_rate_limit(req: Request) -> None:
    client_ip = get_client_ip(req)
    if rate_limiter.exceeded(
        f"register:ip:{client_ip}",
        settings.register_rate_limit,
        settings.register_rate_window,
    ):
        logger.warning("rate_limited purpose=register ip=%s", client_ip)
        raise RateLimited("Too many registration attempts. Try again later.")


def enforce_login_rate_limit(req: Request, username: str) -> None:
    client_ip = get_client_ip(req)
    if rate_limiter.exceeded(f"login:ip:{client_ip}", settings.login_rate_limit, settings.login_rate_window):
        logger.warning("rate_limited purpose=login ip=%s username=%s", client_ip, username)
        raise RateLimited("Too many login attempts. Try again later.")


def validate_credentials(username: str, password: str) -> None:
    if not username or not password:
        raise InvalidRequest("username and password required")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InvalidRequest(f"Password too long (max {BCRYPT_MAX_BYTES} bytes)")


def register_user(cur, payload: UserCreateRequest) -> dict[str, Any]:
    username = payload.username.strip()
    password = payload.password.strip()
    email = payload.email.strip()
    validate_credentials(username, password)
    if not settings.username_re.fullmatch(username):
        raise InvalidRequest("Invalid username. Use 3-32 chars: letters, numbers, dot, underscore, or hyphen.")
    if len(password) < settings.password_min_len:
        raise InvalidRequest(f"Password too short (min {settings.password_min_len})")
    if not settings.email_re.fullmatch(email):
        raise InvalidRequest("Invalid email")

    cur.execute(
        f"""
        INSERT INTO users (username, password, email)
        VALUES (%s, %s, %s)
        RETURNING {USER_COLUMNS}
        """,
        (username, bcrypt.hash(password), email),
    )
    user = cur.fetchone()
    logger.info("user_registered user_id=%s", user["id"])
    return user


def authenticate_user(cur, payload: LoginRequest) -> dict[str, Any]:
    username = payload.username.strip()
    password = payload.password.strip()
    validate_credentials(username, password)

    cur.execute(f"SELECT {USER_COLUMNS}, password FROM users WHERE username=%s", (username,))
    user = cur.fetchone()
    if not user or not bcrypt.verify(password, user["password"]):
        logger.warning("login_failed username=%s", username)
        raise Unauthorized("Invalid credentials")
    return {key: value for key, value in user.items() if key != "password"}
