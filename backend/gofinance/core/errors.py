"""Error taxonomy shared by handlers and services.

Every error is an ``HTTPException`` so FastAPI stops the handler where it is
raised and the app-level handler renders it as ``{"ok": false, "detail": ...}``.
"""

from fastapi import HTTPException


class AppError(HTTPException):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)


class InvalidRequest(AppError):
    status_code = 400
    default_detail = "Invalid request"


class ValidationError(AppError):
    status_code = 400
    default_detail = "Validation failed"


class NotFound(AppError):
    status_code = 404
    default_detail = "Not found"


class Unauthorized(AppError):
    status_code = 401
    default_detail = "Not authenticated"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class RateLimited(AppError):
    status_code = 429
    default_detail = "Too many requests. Try again later."


class StorageError(AppError):
    # Detail is fixed; the driver error is only logged.
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self) -> None:
        super().__init__(self.default_detail)
