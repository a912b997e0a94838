"""Credit pricing and loan lifecycle rules"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from casino_ledger.domain.exceptions import InvalidArgumentError, OverpaymentRejectedError, InsufficientFundsError
from casino_ledger.domain.models import LoanTerms
from casino_ledger.utils.date_utils import add_days, add_months
from casino_ledger.utils.money import to_money

LOAN_TYPES = ("quick", "standard", "extended")

ACTIVE = "active"
PAID = "paid"

MAX_CREDIT_SCORE = 850

ORIGINATION_PENALTY = 10
PAYMENT_BONUS = 5
PAYOFF_BONUS = 20

# (minimum score, annual rate in percent), checked top-down
RATE_TIERS = (
    (750, Decimal("5")),
    (700, Decimal("8")),
    (650, Decimal("12")),
    (600, Decimal("15")),
)
FLOOR_RATE = Decimal("20")


def interest_rate_for(credit_score: int) -> Decimal:
    """
    Step function from credit score to interest rate (percent).

    score>=750 -> 5, >=700 -> 8, >=650 -> 12, >=600 -> 15, else 20.
    No interpolation between tiers.
    """
    for min_score, rate in RATE_TIERS:
        if credit_score >= min_score:
            return rate
    return FLOOR_RATE


def due_date_for(loan_type: str, now: datetime) -> datetime:
    """quick: +7 days, standard: +1 month, extended: +6 months"""
    if loan_type == "quick":
        return add_days(now, 7)
    if loan_type == "standard":
        return add_months(now, 1)
    return add_months(now, 6)


def price_loan(
    principal: Decimal,
    loan_type: str,
    credit_score: int,
    now: datetime,
    max_loan_amount: Optional[Decimal] = None,
) -> LoanTerms:
    """Compute rate, total repayable and due date for a new loan"""
    if loan_type not in LOAN_TYPES:
        raise InvalidArgumentError(f"Unsupported loan type: {loan_type}")
    if max_loan_amount is not None and principal > max_loan_amount:
        raise InvalidArgumentError(f"Loan amount exceeds limit of {max_loan_amount}")

    rate = interest_rate_for(credit_score)
    total = to_money(principal * (1 + rate / 100))
    return LoanTerms(
        principal=principal,
        interest_rate=rate,
        total_amount=total,
        due_date=due_date_for(loan_type, now),
    )


def score_after_borrow(credit_score: int, floor: Optional[int] = None) -> int:
    # Floor is opt-in; observed behaviour lets the score fall without bound
    new_score = credit_score - ORIGINATION_PENALTY
    if floor is not None:
        new_score = max(new_score, floor)
    return new_score


def score_after_payment(credit_score: int, paid_off: bool) -> int:
    bonus = PAYOFF_BONUS if paid_off else PAYMENT_BONUS
    return min(credit_score + bonus, MAX_CREDIT_SCORE)


def check_repayment(total_amount: Decimal, amount_paid: Decimal, amount: Decimal, balance: Decimal) -> Decimal:
    """
    Validate a repayment before anything is written.

    Overpayment is checked before funds, matching the order callers see.
    Returns the amount still owed before this payment.
    """
    remaining = total_amount - amount_paid
    if amount > remaining:
        raise OverpaymentRejectedError(f"Amount exceeds remaining balance of {remaining}")
    if amount > balance:
        raise InsufficientFundsError("Insufficient balance")
    return remaining
