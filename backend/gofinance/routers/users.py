from fastapi import APIRouter, Request
from psycopg.errors import UniqueViolation

from gofinance.core.errors import InvalidRequest
from gofinance.db.pool import db_conn
from gofinance.models.schemas import LoginRequest, LoginResponse, UserCreateRequest
from gofinance.services.auth import (
    authenticate_user,
    create_access_token,
    enforce_login_rate_limit,
    enforce_register_rate_limit,
    register_user,
    require_token,
)
from gofinance.services.users import get_user_by_id, get_user_by_username

router = APIRouter(tags=["users"])


@router.get("/health")
def health():
    return {"ok": True}


@router.post("/users")
def create_user(req: Request, payload: UserCreateRequest):
    enforce_register_rate_limit(req)
    with db_conn() as conn, conn.cursor() as cur:
        try:
            user = register_user(cur, payload)
            conn.commit()
        except InvalidRequest:
            conn.rollback()
            raise
        except UniqueViolation:
            conn.rollback()
            raise InvalidRequest("User already exists")
    return {"ok": True, "user": user}


@router.get("/users/id/{user_id}")
def get_user_by_id_route(user_id: int, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        user = get_user_by_id(cur, user_id)
    return {"ok": True, "user": user}


@router.get("/users/{username}")
def get_user_route(username: str, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        user = get_user_by_username(cur, username)
    return {"ok": True, "user": user}


@router.post("/login", response_model=LoginResponse)
def login(req: Request, payload: LoginRequest):
    enforce_login_rate_limit(req, payload.username.strip())
    with db_conn() as conn, conn.cursor() as cur:
        user = authenticate_user(cur, payload)
    token, expires_at = create_access_token(user["username"], user["id"])
    return LoginResponse(access_token=token, expires_at=expires_at, user=user)
