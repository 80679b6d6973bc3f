"""Select the query variant for a list request.

A list request carries a mandatory owner and type plus optional narrowing
fields. The variant is chosen by looking up which optional fields are present
in a fixed table; combinations missing from the table select nothing.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

import pydantic

from gofinance.core.errors import InvalidRequest
from gofinance.models.schemas import AccountFilter, CategoryFilter

logger = logging.getLogger(__name__)


class AccountVariant(str, Enum):
    BY_OWNER_AND_TYPE = "by_owner_and_type"
    BY_OWNER_TYPE_CATEGORY = "by_owner_type_category"
    BY_OWNER_TYPE_CATEGORY_TITLE = "by_owner_type_category_title"
    BY_OWNER_TYPE_CATEGORY_TITLE_DESCRIPTION = "by_owner_type_category_title_description"
    BY_OWNER_TYPE_DATE = "by_owner_type_date"
    BY_OWNER_TYPE_DESCRIPTION = "by_owner_type_description"
    BY_OWNER_TYPE_TITLE = "by_owner_type_title"
    BY_ALL_FIELDS = "by_all_fields"


class CategoryVariant(str, Enum):
    BY_OWNER_AND_TYPE = "by_owner_and_type"
    BY_OWNER_TYPE_DESCRIPTION = "by_owner_type_description"
    BY_OWNER_TYPE_TITLE = "by_owner_type_title"
    BY_OWNER_TYPE_TITLE_DESCRIPTION = "by_owner_type_title_description"


ACCOUNT_OPTIONAL_FIELDS = ("category_id", "date", "description", "title")
CATEGORY_OPTIONAL_FIELDS = ("description", "title")

# Keys follow ACCOUNT_OPTIONAL_FIELDS order: (category_id, date, description, title).
ACCOUNT_VARIANTS: dict[tuple[bool, ...], AccountVariant] = {
    (False, False, False, False): AccountVariant.BY_OWNER_AND_TYPE,
    (True, False, False, False): AccountVariant.BY_OWNER_TYPE_CATEGORY,
    (True, False, False, True): AccountVariant.BY_OWNER_TYPE_CATEGORY_TITLE,
    (True, False, True, True): AccountVariant.BY_OWNER_TYPE_CATEGORY_TITLE_DESCRIPTION,
    (False, True, False, False): AccountVariant.BY_OWNER_TYPE_DATE,
    (False, False, True, False): AccountVariant.BY_OWNER_TYPE_DESCRIPTION,
    (False, False, False, True): AccountVariant.BY_OWNER_TYPE_TITLE,
    (True, True, True, True): AccountVariant.BY_ALL_FIELDS,
}

# Keys follow CATEGORY_OPTIONAL_FIELDS order: (description, title).
CATEGORY_VARIANTS: dict[tuple[bool, ...], CategoryVariant] = {
    (False, False): CategoryVariant.BY_OWNER_AND_TYPE,
    (True, False): CategoryVariant.BY_OWNER_TYPE_DESCRIPTION,
    (False, True): CategoryVariant.BY_OWNER_TYPE_TITLE,
    (True, True): CategoryVariant.BY_OWNER_TYPE_TITLE_DESCRIPTION,
}


FilterT = TypeVar("FilterT", AccountFilter, CategoryFilter)


def filter_from_query(model: type[FilterT], **values: Any) -> FilterT:
    """Build a filter from raw query-string values, blanks counting as absent."""
    try:
        return model(**values)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise InvalidRequest(f"query.{field}: {first['msg']}")


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value != ""
    if isinstance(value, datetime):
        # 0001-01-01T00:00:00 is the zero timestamp some clients send for "unset".
        return value.replace(tzinfo=None) != datetime.min
    return bool(value)


def presence_vector(filters: AccountFilter | CategoryFilter, fields: tuple[str, ...]) -> tuple[bool, ...]:
    return tuple(is_present(getattr(filters, name)) for name in fields)


def require_owner_and_type(filters: AccountFilter | CategoryFilter) -> None:
    if not is_present(filters.user_id):
        raise InvalidRequest("user_id required")
    if not is_present(filters.type):
        raise InvalidRequest("type required")


def select_account_variant(filters: AccountFilter) -> AccountVariant | None:
    require_owner_and_type(filters)
    return ACCOUNT_VARIANTS.get(presence_vector(filters, ACCOUNT_OPTIONAL_FIELDS))


def select_category_variant(filters: CategoryFilter) -> CategoryVariant:
    require_owner_and_type(filters)
    return CATEGORY_VARIANTS[presence_vector(filters, CATEGORY_OPTIONAL_FIELDS)]


def resolve_account_variant(filters: AccountFilter) -> AccountVariant:
    variant = select_account_variant(filters)
    if variant is None:
        present = [
            name
            for name, flag in zip(ACCOUNT_OPTIONAL_FIELDS, presence_vector(filters, ACCOUNT_OPTIONAL_FIELDS))
            if flag
        ]
        logger.info("account_filter_unsupported fields=%s", ",".join(present))
        raise InvalidRequest(
            "Unsupported filter combination: "
            + ", ".join(present)
            + ". Use a single optional field, category_id with title and optionally description,"
            " or all of category_id, title, description and date."
        )
    return variant
