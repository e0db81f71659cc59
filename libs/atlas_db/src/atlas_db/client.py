"""Engine and session helpers for the ledger database.

One engine is kept per process and bound to the first URL it sees (the
``database_url`` argument, else ``DATABASE_URL``). Asking for a different URL
afterwards is an error until :func:`dispose_engine` releases it.

    from atlas_db.client import session_scope

    with session_scope(database_url=url) as session:
        ...
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

_ENGINE: Engine | None = None
_SESSION_MAKER: sessionmaker[Session] | None = None
_DB_URL: str | None = None


def _resolve_url(override: str | None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; pass --database-url or define it in .env")
    return url


def get_engine(*, database_url: str | None = None) -> Engine:
    global _ENGINE, _SESSION_MAKER, _DB_URL
    url = _resolve_url(database_url)
    if _ENGINE is not None:
        if url != _DB_URL:
            raise RuntimeError(
                f"ledger engine is bound to {_DB_URL!r}; dispose_engine() before using {url!r}"
            )
        return _ENGINE
    _ENGINE = create_engine(url, pool_pre_ping=True)
    _SESSION_MAKER = sessionmaker(bind=_ENGINE, expire_on_commit=False, class_=Session)
    _DB_URL = url
    return _ENGINE


def dispose_engine() -> None:
    """Close pooled connections and forget the bound URL."""

    global _ENGINE, _SESSION_MAKER, _DB_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = _SESSION_MAKER = _DB_URL = None


def get_session(*, database_url: str | None = None) -> Session:
    get_engine(database_url=database_url)
    assert _SESSION_MAKER is not None
    return _SESSION_MAKER()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Yield a session; commit on success, roll back and re-raise on error."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "dispose_engine",
    "get_engine",
    "get_session",
    "session_scope",
]
