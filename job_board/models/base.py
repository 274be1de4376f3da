"""SQLAlchemy engine, session and unit-of-work setup."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from job_board.config import get_config

DATABASE_URL = get_config().database.url

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=get_config().database.echo,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
