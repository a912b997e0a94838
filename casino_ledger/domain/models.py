"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Quote:
    """Price for one instrument from the price oracle"""

    symbol: str
    name: str
    price: Decimal
    change_percent: Decimal


@dataclass
class WagerSettlement:
    """Balance, statistic and ledger deltas for one settled bet"""

    new_balance: Decimal
    wagered_delta: Decimal
    won_delta: Decimal
    transaction_type: str  # "win" or "loss"
    transaction_amount: Decimal


@dataclass
class WagerResult:
    new_balance: Decimal
    outcome: str
    payout: Decimal


@dataclass
class LoanTerms:
    """Pricing of a new loan at origination"""

    principal: Decimal
    interest_rate: Decimal
    total_amount: Decimal
    due_date: datetime


@dataclass
class BorrowResult:
    loan_id: int
    amount: Decimal
    interest_rate: Decimal
    total_amount: Decimal
    new_balance: Decimal
    due_date: datetime


@dataclass
class RepayResult:
    new_balance: Decimal
    loan_paid_off: bool
    remaining: Decimal


@dataclass
class CreditInfo:
    credit_score: int
    total_debt: Decimal
    interest_rate: Decimal


@dataclass
class LoanView:
    id: int
    principal: Decimal
    interest_rate: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    remaining: Decimal
    loan_type: str
    status: str
    created_at: datetime
    due_date: datetime


@dataclass
class LotSnapshot:
    """Stock lot as seen by the FIFO planner"""

    lot_id: int
    symbol: str
    shares: int
    purchase_price: Decimal
    purchased_at: datetime


@dataclass
class LotChange:
    """One step of a FIFO sell: delete the lot, or shrink it to remaining_shares"""

    lot_id: int
    shares_taken: int
    remaining_shares: int

    @property
    def deletes_lot(self) -> bool:
        return self.remaining_shares == 0


@dataclass
class TradeResult:
    new_balance: Decimal
    symbol: str
    shares: int
    price: Decimal
    total: Decimal  # cost for buys, proceeds for sells
    realized_cost_basis: Optional[Decimal] = None


@dataclass
class Position:
    """Aggregate holding of one symbol valued at the current price"""

    symbol: str
    shares: int
    avg_price: Decimal
    current_price: Decimal
    total_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Optional[Decimal]  # None when cost basis is zero


@dataclass
class GameStatView:
    total_wagered: Decimal
    total_won: Decimal
    games_played: int


@dataclass
class AccountSnapshot:
    user_id: str
    balance: Decimal
    credit_score: int


@dataclass
class LedgerEntry:
    id: int
    type: str
    amount: Decimal
    description: str
    created_at: datetime
