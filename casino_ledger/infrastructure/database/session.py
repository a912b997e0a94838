"""Database session management with connection pooling"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker, Session
from casino_ledger.config import settings
from casino_ledger.domain.exceptions import TransientError

logger = logging.getLogger(__name__)

# Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    pool_size=10,
    max_overflow=10,
    pool_recycle=3600,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    All-or-nothing unit of work.

    Commits when the block exits normally. Any exception, including a
    validation failure raised halfway through, rolls back everything done
    in the block before propagating. Connection-level storage failures
    surface as TransientError so callers can tell them apart from business
    rejections. Bad data is not retryable and propagates unchanged.
    """
    try:
        yield db
        db.commit()
    except (IntegrityError, DataError):
        # Constraint violations and out-of-range values are not retryable
        db.rollback()
        raise
    except (OperationalError, DBAPIError) as e:
        db.rollback()
        logger.error("Storage failure, transaction rolled back", exc_info=True)
        raise TransientError("Ledger store unavailable") from e
    except BaseException:
        db.rollback()
        raise
