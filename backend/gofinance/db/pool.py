import logging
from contextlib import contextmanager

from psycopg import Error as PsycopgError
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool, PoolTimeout

from gofinance.core.config import settings
from gofinance.core.errors import StorageError

logger = logging.getLogger(__name__)

DB_POOL = ConnectionPool(
    settings.database_url,
    min_size=settings.db_pool_min,
    max_size=settings.db_pool_max,
    timeout=settings.db_pool_timeout,
    max_waiting=settings.db_pool_max_waiting,
    open=False,
    kwargs={"row_factory": dict_row},
)


def open_db_pool() -> None:
    DB_POOL.open()
    logger.info("db_pool_opened min=%s max=%s", settings.db_pool_min, settings.db_pool_max)


def close_db_pool() -> None:
    DB_POOL.close()
    logger.info("db_pool_closed")


@contextmanager
def db_conn():
    """Borrow a pooled connection.

    Driver and pool failures surface as ``StorageError``; the original
    exception is logged and never sent to the client.
    """
    try:
        with DB_POOL.connection() as conn:
            yield conn
    except (PsycopgError, PoolTimeout) as exc:
        logger.exception("db_error type=%s", type(exc).__name__)
        raise StorageError() from exc
