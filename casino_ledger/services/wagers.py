"""Wager settlement service"""

from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from casino_ledger.domain.exceptions import InvalidArgumentError
from casino_ledger.domain.models import GameStatView, WagerResult
from casino_ledger.domain.wagers import LOSS, WIN, settle, validate_game_type
from casino_ledger.infrastructure.database.repositories import (
    GameSessionRepository,
    GameStatRepository,
    TransactionRepository,
)
from casino_ledger.infrastructure.observability.logging import log_operation
from casino_ledger.infrastructure.observability.metrics import wager_counter
from casino_ledger.services.unit_of_work import load_account, lock_account, operation
from casino_ledger.utils.money import ZERO, parse_money, positive_money, within_range


def settle_wager(
    db: Session,
    user_id: str,
    game_type: str,
    bet_amount: Any,
    outcome: str,
    payout: Any = ZERO,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> WagerResult:
    """
    Apply a bet's outcome to the caller's balance and statistics.

    Balance, game session, statistics and the win/loss ledger entry are
    written in one transaction; an insufficient balance leaves all of them
    untouched.
    """
    with operation(db, "settle_wager", user_id, request_id):
        validate_game_type(game_type)
        if outcome not in (WIN, LOSS):
            raise InvalidArgumentError(f"Unsupported outcome: {outcome}")
        bet = positive_money(bet_amount, "betAmount")
        paid_out = parse_money(payout if payout is not None else ZERO, "payout")
        if outcome == LOSS and paid_out != ZERO:
            raise InvalidArgumentError("payout must be zero on a loss")

        account = lock_account(db, user_id)
        settlement = settle(Decimal(account.balance), bet, outcome, paid_out)
        within_range(settlement.new_balance, "balance")

        account.balance = settlement.new_balance
        GameSessionRepository(db).create(user_id, game_type, bet, outcome, paid_out, details)
        GameStatRepository(db).record(user_id, game_type, settlement.wagered_delta, settlement.won_delta)
        TransactionRepository(db).append(
            user_id,
            settlement.transaction_type,
            settlement.transaction_amount,
            f"{game_type} - {outcome}",
        )

    wager_counter.labels(game_type=game_type, outcome=outcome).inc()
    log_operation(
        "settle_wager",
        user_id,
        request_id,
        game_type=game_type,
        bet_amount=bet,
        payout=paid_out,
        new_balance=settlement.new_balance,
    )
    return WagerResult(new_balance=settlement.new_balance, outcome=outcome, payout=paid_out)


def get_game_stats(db: Session, user_id: str) -> Dict[str, GameStatView]:
    load_account(db, user_id)
    return {
        stat.game_type: GameStatView(
            total_wagered=Decimal(stat.total_wagered),
            total_won=Decimal(stat.total_won),
            games_played=stat.games_played,
        )
        for stat in GameStatRepository(db).list_by_user(user_id)
    }
