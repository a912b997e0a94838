"""Bank endpoints: credit info, loans, borrowing and repayment"""

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from casino_ledger.api.dependencies import get_request_id, get_user_id
from casino_ledger.api.v1.errors import to_http_exception
from casino_ledger.api.v1.schemas import (
    BorrowRequest,
    BorrowResponse,
    CreditResponse,
    LoanSchema,
    RepayRequest,
    RepayResponse,
)
from casino_ledger.infrastructure.database.session import get_db
from casino_ledger.services.lending import borrow, get_credit, list_loans, repay_loan

router = APIRouter()


@router.get("/bank/credit", response_model=CreditResponse)
def read_credit(
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    try:
        credit = get_credit(db, user_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request))

    return CreditResponse(
        credit_score=credit.credit_score,
        total_debt=credit.total_debt,
        interest_rate=credit.interest_rate,
    )


@router.get("/bank/loans", response_model=List[LoanSchema])
def read_loans(
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """All of the caller's loans, newest first"""
    try:
        loans = list_loans(db, user_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request))

    return [
        LoanSchema(
            id=loan.id,
            principal=loan.principal,
            interest_rate=loan.interest_rate,
            total_amount=loan.total_amount,
            amount_paid=loan.amount_paid,
            remaining=loan.remaining,
            loan_type=loan.loan_type,
            status=loan.status,
            created_at=loan.created_at,
            due_date=loan.due_date,
        )
        for loan in loans
    ]


@router.post("/bank/borrow", response_model=BorrowResponse)
def create_loan(
    request_body: BorrowRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    request_id = get_request_id(request)
    try:
        result = borrow(db, user_id, request_body.amount, request_body.loan_type, request_id=request_id)
    except Exception as e:
        raise to_http_exception(e, request_id)

    return BorrowResponse(
        loan_id=result.loan_id,
        amount=result.amount,
        interest_rate=result.interest_rate,
        total_amount=result.total_amount,
        new_balance=result.new_balance,
        due_date=result.due_date,
    )


@router.post("/bank/repay/{loan_id}", response_model=RepayResponse)
def repay(
    loan_id: int,
    request_body: RepayRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    request_id = get_request_id(request)
    try:
        result = repay_loan(db, user_id, loan_id, request_body.amount, request_id=request_id)
    except Exception as e:
        raise to_http_exception(e, request_id)

    return RepayResponse(
        new_balance=result.new_balance,
        loan_paid_off=result.loan_paid_off,
        remaining=result.remaining,
    )
