"""
Database engine and session factory.
"""

from contextlib import contextmanager

import sqlalchemy
from sqlalchemy import orm

from app.core.config import DATABASE_URL, SQL_ECHO

engine = sqlalchemy.create_engine(DATABASE_URL, pool_pre_ping=True, echo=SQL_ECHO)

SessionLocal = orm.sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Yield a database session and close it when the request is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: orm.Session):
    """
    Commit the work done inside the block, or roll all of it back on error.

    Write paths hold their playlist row lock for the lifetime of this block.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
