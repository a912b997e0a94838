"""Account endpoints: provisioning and transaction history"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session

from casino_ledger.api.dependencies import get_notification_client, get_request_id, get_user_id
from casino_ledger.api.v1.errors import to_http_exception
from casino_ledger.api.v1.schemas import (
    AccountResponse,
    OpenAccountRequest,
    TransactionHistoryResponse,
    TransactionSchema,
)
from casino_ledger.infrastructure.clients.notifications import NotificationClient
from casino_ledger.infrastructure.database.session import get_db
from casino_ledger.services.accounts import list_transactions, open_account

router = APIRouter()


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request_body: OpenAccountRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Provision the ledger account for a newly registered user.

    The verification notification is scheduled only after the account has
    committed and runs outside the request; its failure cannot affect the
    account.
    """
    request_id = get_request_id(request)
    try:
        account = open_account(db, user_id, email=request_body.email, request_id=request_id)
    except Exception as e:
        raise to_http_exception(e, request_id)

    if request_body.email:
        background_tasks.add_task(notifier.send_verification, user_id, request_body.email)

    return AccountResponse(balance=account.balance, credit_score=account.credit_score)


@router.get("/transactions", response_model=TransactionHistoryResponse)
def read_transactions(
    request: Request,
    limit: int = Query(50, gt=0, le=500),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Most recent ledger entries for the caller"""
    try:
        entries = list_transactions(db, user_id, limit=limit)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request))

    return TransactionHistoryResponse(
        user_id=user_id,
        transactions=[
            TransactionSchema(
                id=t.id,
                type=t.type,
                amount=t.amount,
                description=t.description,
                created_at=t.created_at,
            )
            for t in entries
        ],
    )
