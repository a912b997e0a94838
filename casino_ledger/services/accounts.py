"""Account service: provisioning, balance and transaction history"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from casino_ledger.config import settings
from casino_ledger.domain.exceptions import InvalidArgumentError
from casino_ledger.domain.models import AccountSnapshot, LedgerEntry
from casino_ledger.domain.wagers import GAME_TYPES
from casino_ledger.infrastructure.database.repositories import (
    AccountRepository,
    GameStatRepository,
    TransactionRepository,
)
from casino_ledger.infrastructure.observability.logging import log_operation
from casino_ledger.services.unit_of_work import load_account, operation
from casino_ledger.utils.money import parse_money


def open_account(
    db: Session,
    user_id: str,
    email: Optional[str] = None,
    balance: Optional[Decimal] = None,
    credit_score: Optional[int] = None,
    request_id: Optional[str] = None,
) -> AccountSnapshot:
    """
    Provision a new account with the starting balance and credit score.

    Also creates zeroed statistics for every supported game so stats reads
    list all games from the start.
    """
    if not user_id:
        raise InvalidArgumentError("user_id is required")

    opening_balance = parse_money(settings.starting_balance if balance is None else balance, "balance")
    opening_score = settings.starting_credit_score if credit_score is None else credit_score
    if opening_balance < 0:
        raise InvalidArgumentError("Opening balance cannot be negative")

    with operation(db, "open_account", user_id, request_id):
        accounts = AccountRepository(db)
        if accounts.get(user_id) is not None:
            raise InvalidArgumentError("Account already exists")

        try:
            account = accounts.create(user_id, opening_balance, opening_score, email=email)
        except IntegrityError as e:
            # Lost a race with a concurrent open for the same user
            raise InvalidArgumentError("Account already exists") from e

        stats = GameStatRepository(db)
        for game_type in GAME_TYPES:
            stats.get_or_create(user_id, game_type)

        snapshot = AccountSnapshot(
            user_id=account.user_id,
            balance=Decimal(account.balance),
            credit_score=account.credit_score,
        )

    log_operation("open_account", user_id, request_id, balance=snapshot.balance, credit_score=snapshot.credit_score)
    return snapshot


def get_balance(db: Session, user_id: str) -> AccountSnapshot:
    account = load_account(db, user_id)
    return AccountSnapshot(
        user_id=account.user_id,
        balance=Decimal(account.balance),
        credit_score=account.credit_score,
    )


def list_transactions(db: Session, user_id: str, limit: int = 50) -> List[LedgerEntry]:
    """Newest ledger entries first"""
    load_account(db, user_id)
    if limit <= 0:
        raise InvalidArgumentError("limit must be positive")
    return [
        LedgerEntry(
            id=t.id,
            type=t.type,
            amount=Decimal(t.amount),
            description=t.description,
            created_at=t.created_at,
        )
        for t in TransactionRepository(db).list_recent(user_id, limit=limit)
    ]
