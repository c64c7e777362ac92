"""Sessions for request handlers and services.

create_app may put a sessionmaker on app.state.session_factory; get_db uses
it when present and the process-wide factory over get_engine() otherwise.
Services own their commits through transaction(); get_db only guarantees
the session is closed.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from functools import lru_cache

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from wishwall.db.engine import get_engine


def create_session_factory(engine: Engine | None = None) -> sessionmaker[Session]:
    """Build a sessionmaker for `engine` (default: the application engine).

    Objects stay loaded after commit, so responses can be built from them
    once the transaction is over.
    """
    return sessionmaker(
        bind=engine if engine is not None else get_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return create_session_factory()


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request."""
    factory = getattr(request.app.state, "session_factory", None) or get_session_factory()
    with factory() as db:
        yield db


@contextmanager
def transaction(db: Session) -> Iterator[None]:
    """Commit the block's changes, or roll them back if it raises.

        with transaction(db):
            message.moderation_status = ModerationStatus.approved
    """
    try:
        yield
    except Exception:
        db.rollback()
        raise
    db.commit()
