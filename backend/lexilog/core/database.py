from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def make_engine(database_url: str) -> Engine:
    kwargs = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}  # needed for SQLite
        # In-memory databases live as long as their connection, so share one
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)

    if is_sqlite:
        # SQLite's own lower() only folds A-Z; case-insensitive search needs Unicode
        @event.listens_for(engine, "connect")
        def register_lower(dbapi_conn, connection_record):
            dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    # Import so the tables are registered on Base.metadata
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
