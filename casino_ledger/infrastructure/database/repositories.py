"""Data access layer for ledger entities"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from casino_ledger.infrastructure.database.models import (
    Account,
    GameSession,
    GameStat,
    LedgerTransaction,
    Loan,
    PriceHistory,
    StockLot,
)
from casino_ledger.domain.models import LoanTerms, LotSnapshot, Quote
from casino_ledger.utils.money import ZERO, to_money


class AccountRepository:
    """Repository for per-user accounts"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[Account]:
        return self.db.query(Account).filter(Account.user_id == user_id).first()

    def get_for_update(self, user_id: str) -> Optional[Account]:
        """
        Load the account with a row lock held until commit/rollback.

        Every mutating operation takes this lock first, so operations on
        one user serialize and other rows of that user are only touched
        while it is held.
        """
        return (
            self.db.query(Account)
            .filter(Account.user_id == user_id)
            .with_for_update()
            .first()
        )

    def create(self, user_id: str, balance: Decimal, credit_score: int, email: Optional[str] = None) -> Account:
        account = Account(user_id=user_id, balance=balance, credit_score=credit_score, email=email)
        self.db.add(account)
        self.db.flush()
        return account


class TransactionRepository:
    """Append-only ledger of balance changes"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, user_id: str, type: str, amount: Decimal, description: str) -> LedgerTransaction:
        record = LedgerTransaction(user_id=user_id, type=type, amount=amount, description=description)
        self.db.add(record)
        return record

    def list_recent(self, user_id: str, limit: int = 50) -> List[LedgerTransaction]:
        return (
            self.db.query(LedgerTransaction)
            .filter(LedgerTransaction.user_id == user_id)
            .order_by(LedgerTransaction.created_at.desc(), LedgerTransaction.id.desc())
            .limit(limit)
            .all()
        )


class LoanRepository:
    """Repository for loans"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, terms: LoanTerms, loan_type: str, created_at: datetime) -> Loan:
        loan = Loan(
            user_id=user_id,
            principal=terms.principal,
            interest_rate=terms.interest_rate,
            total_amount=terms.total_amount,
            amount_paid=Decimal("0.00"),
            loan_type=loan_type,
            status="active",
            created_at=created_at,
            due_date=terms.due_date,
        )
        self.db.add(loan)
        self.db.flush()  # Get ID without committing
        return loan

    def get_for_update(self, loan_id: int, user_id: str) -> Optional[Loan]:
        """Fetch a loan owned by user_id, locked for the rest of the transaction"""
        return (
            self.db.query(Loan)
            .filter(Loan.id == loan_id, Loan.user_id == user_id)
            .with_for_update()
            .first()
        )

    def list_by_user(self, user_id: str) -> List[Loan]:
        return (
            self.db.query(Loan)
            .filter(Loan.user_id == user_id)
            .order_by(Loan.created_at.desc(), Loan.id.desc())
            .all()
        )

    def outstanding_debt(self, user_id: str) -> Decimal:
        total = (
            self.db.query(func.sum(Loan.total_amount - Loan.amount_paid))
            .filter(Loan.user_id == user_id, Loan.status == "active")
            .scalar()
        )
        return to_money(total) if total is not None else ZERO


class StockLotRepository:
    """Repository for stock lots; holdings are always summed from lots"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, symbol: str, shares: int, price: Decimal, purchased_at: datetime) -> StockLot:
        lot = StockLot(
            user_id=user_id,
            symbol=symbol,
            shares=shares,
            purchase_price=price,
            purchased_at=purchased_at,
        )
        self.db.add(lot)
        self.db.flush()
        return lot

    def list_for_symbol(self, user_id: str, symbol: str) -> List[StockLot]:
        """Lots for one symbol, oldest first"""
        return (
            self.db.query(StockLot)
            .filter(StockLot.user_id == user_id, StockLot.symbol == symbol)
            .order_by(StockLot.purchased_at.asc(), StockLot.id.asc())
            .all()
        )

    def list_by_user(self, user_id: str) -> List[StockLot]:
        return (
            self.db.query(StockLot)
            .filter(StockLot.user_id == user_id)
            .order_by(StockLot.symbol, StockLot.purchased_at.asc(), StockLot.id.asc())
            .all()
        )

    def shrink(self, lot: StockLot, remaining_shares: int) -> None:
        if remaining_shares == 0:
            self.db.delete(lot)
        else:
            lot.shares = remaining_shares
        self.db.flush()

    @staticmethod
    def snapshot(lot: StockLot) -> LotSnapshot:
        return LotSnapshot(
            lot_id=lot.id,
            symbol=lot.symbol,
            shares=lot.shares,
            purchase_price=Decimal(lot.purchase_price),
            purchased_at=lot.purchased_at,
        )


class GameStatRepository:
    """Running per-game statistics"""

    def __init__(self, db: Session):
        self.db = db

    def get_or_create(self, user_id: str, game_type: str) -> GameStat:
        stat = (
            self.db.query(GameStat)
            .filter(GameStat.user_id == user_id, GameStat.game_type == game_type)
            .first()
        )
        if stat is None:
            stat = GameStat(
                user_id=user_id,
                game_type=game_type,
                total_wagered=Decimal("0.00"),
                total_won=Decimal("0.00"),
                games_played=0,
            )
            self.db.add(stat)
            self.db.flush()
        return stat

    def record(self, user_id: str, game_type: str, wagered: Decimal, won: Decimal) -> GameStat:
        stat = self.get_or_create(user_id, game_type)
        stat.total_wagered = stat.total_wagered + wagered
        stat.total_won = stat.total_won + won
        stat.games_played = stat.games_played + 1
        return stat

    def list_by_user(self, user_id: str) -> List[GameStat]:
        return (
            self.db.query(GameStat)
            .filter(GameStat.user_id == user_id)
            .order_by(GameStat.game_type)
            .all()
        )


class GameSessionRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: str,
        game_type: str,
        bet_amount: Decimal,
        result: str,
        payout: Decimal,
        details: Optional[Dict[str, Any]],
    ) -> GameSession:
        session = GameSession(
            user_id=user_id,
            game_type=game_type,
            bet_amount=bet_amount,
            result=result,
            payout=payout,
            details=details,
        )
        self.db.add(session)
        return session


class PriceHistoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def record(self, quote: Quote) -> PriceHistory:
        entry = PriceHistory(symbol=quote.symbol, price=quote.price, change_percent=quote.change_percent)
        self.db.add(entry)
        return entry
