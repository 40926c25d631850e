from collections.abc import Generator

from sqlalchemy import Engine, event
from sqlmodel import Session, create_engine

from ecohouse.core.settings import get_settings


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on FK enforcement (and ON DELETE actions) for every SQLite connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str) -> Engine:
    connect_args: dict[str, object] = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        # Required for SQLite when used with FastAPI across threads.
        connect_args = {"check_same_thread": False}

    new_engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if is_sqlite:
        enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine = build_engine(get_settings().database_url)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
