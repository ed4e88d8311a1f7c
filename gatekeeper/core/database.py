"""Engine and session wiring for the credential store."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from gatekeeper.core.config import settings


def engine_options(url: str, debug: bool = False) -> dict[str, Any]:
    """
    Keyword arguments for create_engine given a DATABASE_URL.

    SQLite connections are shared across the threadpool FastAPI runs sync
    routes on, so the same-thread check is turned off for that dialect.
    """
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": debug}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL, settings.DEBUG))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; closed after the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
