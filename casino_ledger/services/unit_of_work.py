"""Operation scope shared by every ledger operation"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from casino_ledger.domain.exceptions import DomainException, NotFoundError, TransientError
from casino_ledger.infrastructure.database.models import Account
from casino_ledger.infrastructure.database.repositories import AccountRepository
from casino_ledger.infrastructure.database.session import transaction
from casino_ledger.infrastructure.observability.logging import log_rejection
from casino_ledger.infrastructure.observability.metrics import rejection_counter, transient_failure_counter


@contextmanager
def operation(db: Session, name: str, user_id: str, request_id: Optional[str] = None) -> Iterator[Session]:
    """
    Run one ledger operation as a single transaction.

    Rejections and outages are counted and logged here; the exception
    still propagates to the caller after the rollback.
    """
    try:
        with transaction(db):
            yield db
    except TransientError:
        transient_failure_counter.labels(operation=name).inc()
        raise
    except DomainException as e:
        rejection_counter.labels(operation=name, reason=e.code).inc()
        log_rejection(name, user_id, str(e), request_id)
        raise


def lock_account(db: Session, user_id: str) -> Account:
    """Lock the caller's account row; raises NotFoundError for unknown users"""
    account = AccountRepository(db).get_for_update(user_id)
    if account is None:
        raise NotFoundError("User not found")
    return account


def load_account(db: Session, user_id: str) -> Account:
    account = AccountRepository(db).get(user_id)
    if account is None:
        raise NotFoundError("User not found")
    return account
