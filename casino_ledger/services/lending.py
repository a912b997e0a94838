"""Credit and lending service: loan origination and repayment"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from casino_ledger.config import settings
from casino_ledger.domain.exceptions import NotFoundError
from casino_ledger.domain.lending import (
    PAID,
    check_repayment,
    interest_rate_for,
    price_loan,
    score_after_borrow,
    score_after_payment,
)
from casino_ledger.domain.models import BorrowResult, CreditInfo, LoanView, RepayResult
from casino_ledger.infrastructure.database.repositories import LoanRepository, TransactionRepository
from casino_ledger.infrastructure.observability.logging import log_operation
from casino_ledger.infrastructure.observability.metrics import loan_origination_counter, record_repayment
from casino_ledger.services.unit_of_work import load_account, lock_account, operation
from casino_ledger.utils.money import positive_money, within_range


def get_credit(db: Session, user_id: str) -> CreditInfo:
    """Credit score, outstanding debt on active loans and the rate a new loan would get"""
    account = load_account(db, user_id)
    return CreditInfo(
        credit_score=account.credit_score,
        total_debt=LoanRepository(db).outstanding_debt(user_id),
        interest_rate=interest_rate_for(account.credit_score),
    )


def list_loans(db: Session, user_id: str) -> List[LoanView]:
    load_account(db, user_id)
    return [
        LoanView(
            id=loan.id,
            principal=Decimal(loan.principal),
            interest_rate=Decimal(loan.interest_rate),
            total_amount=Decimal(loan.total_amount),
            amount_paid=Decimal(loan.amount_paid),
            remaining=Decimal(loan.total_amount) - Decimal(loan.amount_paid),
            loan_type=loan.loan_type,
            status=loan.status,
            created_at=loan.created_at,
            due_date=loan.due_date,
        )
        for loan in LoanRepository(db).list_by_user(user_id)
    ]


def borrow(
    db: Session,
    user_id: str,
    amount: Any,
    loan_type: str,
    request_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> BorrowResult:
    """
    Originate a loan priced from the caller's current credit score.

    Credits the principal to the balance and applies the origination
    penalty to the credit score. There is no limit on loan size or count
    unless max_loan_amount is configured.
    """
    now = now or datetime.now(timezone.utc)

    with operation(db, "borrow", user_id, request_id):
        principal = positive_money(amount)
        account = lock_account(db, user_id)
        terms = price_loan(
            principal,
            loan_type,
            account.credit_score,
            now,
            max_loan_amount=settings.max_loan_amount,
        )
        within_range(terms.total_amount, "total_amount")

        loan = LoanRepository(db).create(user_id, terms, loan_type, created_at=now)
        new_balance = Decimal(account.balance) + principal
        within_range(new_balance, "balance")
        account.balance = new_balance
        account.credit_score = score_after_borrow(account.credit_score, floor=settings.credit_score_floor)
        TransactionRepository(db).append(user_id, "loan", principal, f"{loan_type} loan borrowed")

        result = BorrowResult(
            loan_id=loan.id,
            amount=principal,
            interest_rate=terms.interest_rate,
            total_amount=terms.total_amount,
            new_balance=new_balance,
            due_date=terms.due_date,
        )

    loan_origination_counter.labels(loan_type=loan_type).inc()
    log_operation(
        "borrow",
        user_id,
        request_id,
        loan_id=result.loan_id,
        amount=principal,
        interest_rate=terms.interest_rate,
        total_amount=terms.total_amount,
    )
    return result


def repay_loan(
    db: Session,
    user_id: str,
    loan_id: int,
    amount: Any,
    request_id: Optional[str] = None,
) -> RepayResult:
    """
    Pay down one of the caller's loans.

    Both the account and the loan row are locked before remaining debt is
    read, so concurrent repayments of the same loan serialize and can never
    push amount_paid past total_amount. Reaching the total flips the loan
    to paid, which is terminal: a paid loan has nothing remaining, so any
    further payment is rejected as an overpayment.
    """
    with operation(db, "repay_loan", user_id, request_id):
        payment = positive_money(amount)
        account = lock_account(db, user_id)
        loan = LoanRepository(db).get_for_update(loan_id, user_id)
        if loan is None:
            raise NotFoundError("Loan not found")

        total = Decimal(loan.total_amount)
        balance = Decimal(account.balance)
        remaining = check_repayment(total, Decimal(loan.amount_paid), payment, balance)

        new_amount_paid = Decimal(loan.amount_paid) + payment
        paid_off = new_amount_paid >= total
        loan.amount_paid = new_amount_paid
        if paid_off:
            loan.status = PAID

        new_balance = balance - payment
        account.balance = new_balance
        account.credit_score = score_after_payment(account.credit_score, paid_off)
        TransactionRepository(db).append(user_id, "loan_payment", payment, "Loan repayment")

    record_repayment(paid_off)
    log_operation(
        "repay_loan",
        user_id,
        request_id,
        loan_id=loan_id,
        amount=payment,
        loan_paid_off=paid_off,
        new_balance=new_balance,
    )
    return RepayResult(new_balance=new_balance, loan_paid_off=paid_off, remaining=remaining - payment)
