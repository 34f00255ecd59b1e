from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection
from sqlalchemy.pool import NullPool

from search_indexer.services.credentials import DatabaseCredentials


@contextmanager
def open_connection(credentials: DatabaseCredentials, *, connect_timeout: int = 10) -> Iterator[Connection]:
    """Open and ping a single connection, closing it on every exit path."""
    engine = create_engine(
        credentials.sqlalchemy_url(),
        poolclass=NullPool,
        connect_args={"connect_timeout": connect_timeout},
    )
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            yield conn
    finally:
        engine.dispose()
