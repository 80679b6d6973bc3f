import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gofinance.core.config import settings
from gofinance.core.log import configure_logging
from gofinance.db.pool import close_db_pool, open_db_pool
from gofinance.routers.accounts import router as accounts_router
from gofinance.routers.categories import router as categories_router
from gofinance.routers.users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    open_db_pool()
    try:
        yield
    finally:
        close_db_pool()


app = FastAPI(title="gofinance", lifespan=lifespan)

app.include_router(users_router)
app.include_router(categories_router)
app.include_router(accounts_router)


@app.exception_handler(HTTPException)
def http_exc_handler(_, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def validation_exc_handler(_, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    detail = f"{field}: {message}" if field else message
    logger.debug("request_rejected detail=%s", detail)
    return JSONResponse(status_code=400, content={"ok": False, "detail": detail})


def run() -> None:
    configure_logging()
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    run()
