"""SQLAlchemy ORM models for the ledger store"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(14, 2)


class Account(Base):
    """Per-user cash balance and credit score"""

    __tablename__ = "account"

    user_id = Column(Text, primary_key=True)
    email = Column(Text, nullable=True)
    balance = Column(MONEY, nullable=False)
    credit_score = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (CheckConstraint("balance >= 0", name="ck_account_balance_non_negative"),)

class LedgerTransaction(Base):
    """Append-only audit record of a balance change"""

    __tablename__ = "ledger_transaction"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey("account.user_id"), nullable=False, index=True)
    type = Column(Text, nullable=False)  # win | loss | loan | loan_payment | stock_buy | stock_sell
    amount = Column(MONEY, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Loan(Base):
    """Loan with amortization state; status 'paid' is terminal"""

    __tablename__ = "loan"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey("account.user_id"), nullable=False, index=True)
    principal = Column(MONEY, nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False)
    total_amount = Column(MONEY, nullable=False)
    amount_paid = Column(MONEY, nullable=False, default=0)
    loan_type = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (CheckConstraint("amount_paid <= total_amount", name="ck_loan_not_overpaid"),)

class StockLot(Base):
    """One purchase batch of shares, consumed oldest-first on sale"""

    __tablename__ = "stock_lot"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey("account.user_id"), nullable=False, index=True)
    symbol = Column(Text, nullable=False)
    shares = Column(Integer, nullable=False)
    purchase_price = Column(MONEY, nullable=False)
    purchased_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (CheckConstraint("shares > 0", name="ck_stock_lot_shares_positive"),)

class GameStat(Base):
    """Running totals per (user, game type)"""

    __tablename__ = "game_stat"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey("account.user_id"), nullable=False)
    game_type = Column(Text, nullable=False)
    total_wagered = Column(MONEY, nullable=False, default=0)
    total_won = Column(MONEY, nullable=False, default=0)
    games_played = Column(Integer, nullable=False, default=0)

    __table_args__ = (UniqueConstraint("user_id", "game_type", name="uq_game_stat_user_game"),)


class GameSession(Base):
    """Record of one settled bet; details is stored verbatim"""

    __tablename__ = "game_session"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey("account.user_id"), nullable=False, index=True)
    game_type = Column(Text, nullable=False)
    bet_amount = Column(MONEY, nullable=False)
    result = Column(Text, nullable=False)
    payout = Column(MONEY, nullable=False)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PriceHistory(Base):
    """Quote used by a trade"""

    __tablename__ = "price_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(Text, nullable=False, index=True)
    price = Column(MONEY, nullable=False)
    change_percent = Column(Numeric(7, 2), nullable=False)
    recorded_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
