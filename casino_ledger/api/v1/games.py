"""Games endpoints: balance, wager settlement and per-game statistics"""

from typing import Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from casino_ledger.api.dependencies import get_request_id, get_user_id
from casino_ledger.api.v1.errors import to_http_exception
from casino_ledger.api.v1.schemas import AccountResponse, GameStatSchema, PlayRequest, PlayResponse
from casino_ledger.infrastructure.database.session import get_db
from casino_ledger.services.accounts import get_balance
from casino_ledger.services.wagers import get_game_stats, settle_wager

router = APIRouter()


@router.get("/games/balance", response_model=AccountResponse)
def read_balance(
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    try:
        account = get_balance(db, user_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request))

    return AccountResponse(balance=account.balance, credit_score=account.credit_score)


@router.post("/games/play", response_model=PlayResponse)
def play(
    request_body: PlayRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Settle one bet.

    The game itself is played client-side; this applies its outcome to the
    balance, statistics and ledger in one transaction.
    """
    request_id = get_request_id(request)
    try:
        result = settle_wager(
            db,
            user_id,
            game_type=request_body.game_type,
            bet_amount=request_body.bet_amount,
            outcome=request_body.result,
            payout=request_body.payout,
            details=request_body.details,
            request_id=request_id,
        )
    except Exception as e:
        raise to_http_exception(e, request_id)

    return PlayResponse(new_balance=result.new_balance, result=result.outcome, payout=result.payout)


@router.get("/games/stats", response_model=Dict[str, GameStatSchema])
def read_game_stats(
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    try:
        stats = get_game_stats(db, user_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request))

    return {
        game_type: GameStatSchema(
            total_wagered=stat.total_wagered,
            total_won=stat.total_won,
            games_played=stat.games_played,
        )
        for game_type, stat in stats.items()
    }
