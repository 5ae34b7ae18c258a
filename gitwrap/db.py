from collections.abc import Generator
from functools import lru_cache

from sqlalchemy import Engine
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm import Session

from gitwrap.settings import Settings


class Base(DeclarativeBase):
    pass


def get_database_url() -> str | None:
    settings = Settings()
    return settings.database_url or None


@lru_cache
def get_engine(database_url: str) -> Engine:
    return create_engine(database_url)


def get_db() -> Generator[Session | None, None, None]:
    """Yield a session for the summary cache, or None when caching is off."""

    database_url = get_database_url()
    if database_url is None:
        yield None
        return

    session_local = sessionmaker(
        bind=get_engine(database_url), autoflush=False, autocommit=False
    )
    db = session_local()
    try:
        yield db
    finally:
        db.close()
