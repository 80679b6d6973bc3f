from fastapi import APIRouter, Request
from psycopg.errors import ForeignKeyViolation

from gofinance.core.errors import InvalidRequest
from gofinance.db.pool import db_conn
from gofinance.models.schemas import AccountCreateRequest, AccountFilter, AccountUpdateRequest
from gofinance.services.accounts import (
    count_accounts,
    create_account,
    delete_account,
    get_account,
    sum_account_values,
    update_account,
)
from gofinance.services.auth import require_token
from gofinance.services.filters import filter_from_query
from gofinance.services.queries import list_accounts

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _list(filters: AccountFilter) -> dict:
    with db_conn() as conn, conn.cursor() as cur:
        return {"ok": True, "accounts": list_accounts(cur, filters)}


@router.post("/list")
def list_accounts_by_body(req: Request, payload: AccountFilter):
    require_token(req)
    return _list(payload)


@router.get("")
def list_accounts_by_query(
    req: Request,
    user_id: str | None = None,
    type: str | None = None,
    category_id: str | None = None,
    title: str = "",
    description: str = "",
    date: str | None = None,
):
    require_token(req)
    filters = filter_from_query(
        AccountFilter,
        user_id=user_id,
        type=type,
        category_id=category_id,
        title=title,
        description=description,
        date=date,
    )
    return _list(filters)


@router.post("")
def create_account_route(req: Request, payload: AccountCreateRequest):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        try:
            account = create_account(cur, payload)
            conn.commit()
        except ForeignKeyViolation:
            conn.rollback()
            raise InvalidRequest("user_id does not reference an existing user")
    return {"ok": True, "account": account}


@router.get("/graph/{user_id}/{account_type}")
def account_graph(user_id: int, account_type: str, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        count = count_accounts(cur, user_id, account_type)
    return {"ok": True, "count": count}


@router.get("/reports/{user_id}/{account_type}")
def account_reports(user_id: int, account_type: str, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        total = sum_account_values(cur, user_id, account_type)
    return {"ok": True, "total": total}


@router.get("/{account_id}")
def get_account_route(account_id: int, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        account = get_account(cur, account_id)
    return {"ok": True, "account": account}


@router.put("/{account_id}")
def update_account_route(account_id: int, req: Request, payload: AccountUpdateRequest):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        account = update_account(cur, account_id, payload)
        conn.commit()
    return {"ok": True, "account": account}


@router.delete("/{account_id}")
def delete_account_route(account_id: int, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        delete_account(cur, account_id)
        conn.commit()
    return {"ok": True}
