import logging

from gofinance.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or settings.log_level), format=LOG_FORMAT)
    # uvicorn installs its own handlers; keep its access log at the same level.
    logging.getLogger("uvicorn.access").setLevel(level or settings.log_level)
