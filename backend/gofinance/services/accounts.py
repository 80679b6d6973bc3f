import logging
from typing import Any

from gofinance.core.errors import NotFound, ValidationError
from gofinance.models.schemas import AccountCreateRequest, AccountUpdateRequest
from gofinance.services.categories import get_category
from gofinance.services.queries import ACCOUNT_COLUMNS

logger = logging.getLogger(__name__)


def create_account(cur, payload: AccountCreateRequest) -> dict[str, Any]:
    """Insert an account after checking it matches its category's type.

    The category lookup is read-only, so a rejection leaves nothing behind.
    """
    category = get_category(cur, payload.category_id)
    if category["type"] != payload.type:
        logger.info(
            "account_type_mismatch category_id=%s category_type=%s account_type=%s",
            category["id"],
            category["type"],
            payload.type,
        )
        raise ValidationError("Account type is different from category type")

    cur.execute(
        f"""
        INSERT INTO accounts (user_id, category_id, title, type, description, value, date)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        RETURNING {ACCOUNT_COLUMNS}
        """,
        (
            payload.user_id,
            payload.category_id,
            payload.title,
            payload.type,
            payload.description,
            payload.value,
            payload.date,
        ),
    )
    account = cur.fetchone()
    logger.info("account_created account_id=%s user_id=%s", account["id"], account["user_id"])
    return account


def get_account(cur, account_id: int) -> dict[str, Any]:
    cur.execute(f"SELECT {ACCOUNT_COLUMNS} FROM accounts WHERE id=%s", (account_id,))
    account = cur.fetchone()
    if not account:
        raise NotFound("Account not found")
    return account


def update_account(cur, account_id: int, payload: AccountUpdateRequest) -> dict[str, Any]:
    cur.execute(
        f"""
        UPDATE accounts
        SET title=COALESCE(%s, title),
            description=COALESCE(%s, description),
            value=COALESCE(%s, value)
        WHERE id=%s
        RETURNING {ACCOUNT_COLUMNS}
        """,
        (payload.title, payload.description, payload.value, account_id),
    )
    account = cur.fetchone()
    if not account:
        raise NotFound("Account not found")
    return account


def delete_account(cur, account_id: int) -> None:
    cur.execute("DELETE FROM accounts WHERE id=%s RETURNING id", (account_id,))
    if not cur.fetchone():
        raise NotFound("Account not found")
    logger.info("account_deleted account_id=%s", account_id)


def count_accounts(cur, user_id: int, account_type: str) -> int:
    cur.execute(
        "SELECT COUNT(*) AS count FROM accounts WHERE user_id=%s AND type=%s",
        (user_id, account_type),
    )
    row = cur.fetchone() or {}
    return int(row.get("count") or 0)


def sum_account_values(cur, user_id: int, account_type: str) -> int:
    cur.execute(
        "SELECT COALESCE(SUM(value), 0) AS total FROM accounts WHERE user_id=%s AND type=%s",
        (user_id, account_type),
    )
    row = cur.fetchone() or {}
    return int(row.get("total") or 0)
