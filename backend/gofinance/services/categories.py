import logging
from typing import Any

from gofinance.core.errors import NotFound
from gofinance.models.schemas import CategoryCreateRequest, CategoryUpdateRequest
from gofinance.services.queries import CATEGORY_COLUMNS

logger = logging.getLogger(__name__)


def create_category(cur, payload: CategoryCreateRequest) -> dict[str, Any]:
    cur.execute(
        f"""
        INSERT INTO categories (user_id, title, type, description)
        VALUES (%s, %s, %s, %s)
        RETURNING {CATEGORY_COLUMNS}
        """,
        (payload.user_id, payload.title, payload.type, payload.description),
    )
    category = cur.fetchone()
    logger.info("category_created category_id=%s user_id=%s", category["id"], category["user_id"])
    return category


def get_category(cur, category_id: int) -> dict[str, Any]:
    cur.execute(f"SELECT {CATEGORY_COLUMNS} FROM categories WHERE id=%s", (category_id,))
    category = cur.fetchone()
    if not category:
        raise NotFound("Category not found")
    return category


def update_category(cur, category_id: int, payload: CategoryUpdateRequest) -> dict[str, Any]:
    cur.execute(
        f"""
        UPDATE categories
        SET title=COALESCE(%s, title),
            description=COALESCE(%s, description)
        WHERE id=%s
        RETURNING {CATEGORY_COLUMNS}
        """,
        (payload.title, payload.description, category_id),
    )
    category = cur.fetchone()
    if not category:
        raise NotFound("Category not found")
    return category


def delete_category(cur, category_id: int) -> None:
    cur.execute("DELETE FROM categories WHERE id=%s RETURNING id", (category_id,))
    if not cur.fetchone():
        raise NotFound("Category not found")
    logger.info("category_deleted category_id=%s", category_id)
