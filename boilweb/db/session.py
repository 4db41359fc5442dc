"""Optional async SQLAlchemy engine.

The engine is opened for features that need a database; nothing in the
application queries it yet. An empty connection string disables it.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, InvalidRequestError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from boilweb.core.config import DatabaseSettings

logger = logging.getLogger(__name__)

# driver names as given on the command line -> async SQLAlchemy dialects
ASYNC_DIALECTS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "pgx": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
    "sqlite3": "sqlite+aiosqlite",
    "mysql": "mysql+aiomysql",
}


def build_database_url(driver: str, url: str) -> URL:
    """Resolve a connection string to a URL with an async driver.

    A URL naming an explicit driver (``postgresql+asyncpg://``) is kept as
    is. Otherwise a known URL scheme wins over ``driver``, which is used for
    anything else.
    """
    parsed = make_url(url)
    if "+" in parsed.drivername:
        return parsed
    drivername = ASYNC_DIALECTS.get(parsed.drivername) or ASYNC_DIALECTS.get(driver.lower(), driver)
    return parsed.set(drivername=drivername)


def connect(settings: DatabaseSettings) -> Optional[AsyncEngine]:
    if not settings.url:
        logger.info("no --sql-db config, not opening")
        return None
    try:
        url = build_database_url(settings.driver, settings.url)
        engine = create_async_engine(url, echo=settings.echo)
    except (ArgumentError, InvalidRequestError, ImportError) as exc:
        logger.error("could not open %s database: %s", settings.driver, exc)
        return None
    logger.info("database handle opened for %s", url.render_as_string(hide_password=True))
    return engine


async def dispose(engine: Optional[AsyncEngine]) -> None:
    if engine is not None:
        await engine.dispose()


__all__ = ["ASYNC_DIALECTS", "build_database_url", "connect", "dispose"]
