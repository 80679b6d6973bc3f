import logging
from dataclasses import dataclass
from typing import Any

from gofinance.models.schemas import AccountFilter, CategoryFilter
from gofinance.services.filters import (
    AccountVariant,
    CategoryVariant,
    resolve_account_variant,
    select_category_variant,
)

logger = logging.getLogger(__name__)

ACCOUNT_COLUMNS = "id, user_id, category_id, title, type, description, value, date, created_at"
CATEGORY_COLUMNS = "id, user_id, title, type, description, created_at"

# Conditions keyed by the filter field they bind. Text fields match as substrings.
_CONDITIONS = {
    "user_id": "user_id = %s",
    "type": "type = %s",
    "category_id": "category_id = %s",
    "title": "title LIKE CONCAT('%%', %s::text, '%%')",
    "description": "description LIKE CONCAT('%%', %s::text, '%%')",
    "date": "date = %s",
}


@dataclass(frozen=True)
class QueryTemplate:
    sql: str
    fields: tuple[str, ...]

    def bind(self, filters: AccountFilter | CategoryFilter) -> tuple[Any, ...]:
        return tuple(getattr(filters, name) for name in self.fields)


def _template(table: str, columns: str, *optional: str) -> QueryTemplate:
    fields = ("user_id", "type", *optional)
    where = "\n  AND ".join(_CONDITIONS[name] for name in fields)
    return QueryTemplate(sql=f"SELECT {columns}\nFROM {table}\nWHERE {where}", fields=fields)


def _account(*optional: str) -> QueryTemplate:
    return _template("accounts", ACCOUNT_COLUMNS, *optional)


def _category(*optional: str) -> QueryTemplate:
    return _template("categories", CATEGORY_COLUMNS, *optional)


ACCOUNT_QUERIES: dict[AccountVariant, QueryTemplate] = {
    AccountVariant.BY_OWNER_AND_TYPE: _account(),
    AccountVariant.BY_OWNER_TYPE_CATEGORY: _account("category_id"),
    AccountVariant.BY_OWNER_TYPE_CATEGORY_TITLE: _account("category_id", "title"),
    AccountVariant.BY_OWNER_TYPE_CATEGORY_TITLE_DESCRIPTION: _account("category_id", "title", "description"),
    AccountVariant.BY_OWNER_TYPE_DATE: _account("date"),
    AccountVariant.BY_OWNER_TYPE_DESCRIPTION: _account("description"),
    AccountVariant.BY_OWNER_TYPE_TITLE: _account("title"),
    AccountVariant.BY_ALL_FIELDS: _account("category_id", "title", "description", "date"),
}

CATEGORY_QUERIES: dict[CategoryVariant, QueryTemplate] = {
    CategoryVariant.BY_OWNER_AND_TYPE: _category(),
    CategoryVariant.BY_OWNER_TYPE_DESCRIPTION: _category("description"),
    CategoryVariant.BY_OWNER_TYPE_TITLE: _category("title"),
    CategoryVariant.BY_OWNER_TYPE_TITLE_DESCRIPTION: _category("title", "description"),
}


def build_account_query(filters: AccountFilter) -> tuple[AccountVariant, str, tuple[Any, ...]]:
    variant = resolve_account_variant(filters)
    template = ACCOUNT_QUERIES[variant]
    return variant, template.sql, template.bind(filters)


def build_category_query(filters: CategoryFilter) -> tuple[CategoryVariant, str, tuple[Any, ...]]:
    variant = select_category_variant(filters)
    template = CATEGORY_QUERIES[variant]
    return variant, template.sql, template.bind(filters)


def list_accounts(cur, filters: AccountFilter) -> list[dict[str, Any]]:
    variant, sql, params = build_account_query(filters)
    logger.debug("list_accounts variant=%s user_id=%s", variant.value, filters.user_id)
    cur.execute(sql, params)
    return cur.fetchall()


def list_categories(cur, filters: CategoryFilter) -> list[dict[str, Any]]:
    variant, sql, params = build_category_query(filters)
    logger.debug("list_categories variant=%s user_id=%s", variant.value, filters.user_id)
    cur.execute(sql, params)
    return cur.fetchall()
