from fastapi import APIRouter, Request
from psycopg.errors import ForeignKeyViolation

from gofinance.core.errors import InvalidRequest
from gofinance.db.pool import db_conn
from gofinance.models.schemas import CategoryCreateRequest, CategoryFilter, CategoryUpdateRequest
from gofinance.services.auth import require_token
from gofinance.services.categories import create_category, delete_category, get_category, update_category
from gofinance.services.filters import filter_from_query
from gofinance.services.queries import list_categories

router = APIRouter(prefix="/categories", tags=["categories"])


def _list(filters: CategoryFilter) -> dict:
    with db_conn() as conn, conn.cursor() as cur:
        return {"ok": True, "categories": list_categories(cur, filters)}


@router.post("/list")
def list_categories_by_body(req: Request, payload: CategoryFilter):
    require_token(req)
    return _list(payload)


@router.get("")
def list_categories_by_query(
    req: Request,
    user_id: str | None = None,
    type: str | None = None,
    title: str = "",
    description: str = "",
):
    require_token(req)
    filters = filter_from_query(CategoryFilter, user_id=user_id, type=type, title=title, description=description)
    return _list(filters)


@router.post("")
def create_category_route(req: Request, payload: CategoryCreateRequest):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        try:
            category = create_category(cur, payload)
            conn.commit()
        except ForeignKeyViolation:
            conn.rollback()
            raise InvalidRequest("user_id does not reference an existing user")
    return {"ok": True, "category": category}


@router.get("/{category_id}")
def get_category_route(category_id: int, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        category = get_category(cur, category_id)
    return {"ok": True, "category": category}


@router.put("/{category_id}")
def update_category_route(category_id: int, req: Request, payload: CategoryUpdateRequest):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        category = update_category(cur, category_id, payload)
        conn.commit()
    return {"ok": True, "category": category}


@router.delete("/{category_id}")
def delete_category_route(category_id: int, req: Request):
    require_token(req)
    with db_conn() as conn, conn.cursor() as cur:
        try:
            delete_category(cur, category_id)
            conn.commit()
        except ForeignKeyViolation:
            conn.rollback()
            raise InvalidRequest("Category still has accounts")
    return {"ok": True}
