from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Ids and values are stored in 32-bit INTEGER columns.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]
RowId = Annotated[int, Field(gt=0, le=INT32_MAX)]


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class UserCreateRequest(BaseModel):
    username: str
    password: str
    email: str


class LoginRequest(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime


class LoginResponse(BaseModel):
    ok: bool = True
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut


class CategoryCreateRequest(BaseModel):
    user_id: RowId
    title: str = Field(min_length=1)
    type: str = Field(min_length=1)
    description: str = Field(min_length=1)


class CategoryUpdateRequest(BaseModel):
    title: str | None = None
    description: str | None = None


class AccountCreateRequest(BaseModel):
    user_id: RowId
    category_id: RowId
    title: str = Field(min_length=1)
    type: str = Field(min_length=1)
    description: str = Field(min_length=1)
    value: Int32
    date: datetime


class AccountUpdateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    value: Int32 | None = None


class CategoryFilter(BaseModel):
    """Filter body for category listing.

    ``user_id`` and ``type`` are checked by the evaluator rather than by the
    model so that a missing owner is reported the same way from every entry
    point.
    """

    model_config = ConfigDict(frozen=True)

    user_id: Int32 | None = None
    type: str | None = None
    title: str = ""
    description: str = ""

    @field_validator("user_id", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        return blank_to_none(value)


class AccountFilter(BaseModel):
    # Blank numeric and date values count as absent, like blank text.
    model_config = ConfigDict(frozen=True)

    user_id: Int32 | None = None
    type: str | None = None
    category_id: Int32 | None = None
    title: str = ""
    description: str = ""
    date: datetime | None = None

    @field_validator("user_id", "category_id", "date", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        return blank_to_none(value)
