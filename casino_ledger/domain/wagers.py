"""Wager settlement rules for games of chance"""

from decimal import Decimal

from casino_ledger.domain.exceptions import InsufficientFundsError, InvalidArgumentError
from casino_ledger.domain.models import WagerSettlement
from casino_ledger.utils.money import ZERO

GAME_TYPES = ("slots", "roulette", "blackjack", "poker")

WIN = "win"
LOSS = "loss"


def validate_game_type(game_type: str) -> None:
    if game_type not in GAME_TYPES:
        raise InvalidArgumentError(f"Unsupported game type: {game_type}")


def settle(balance: Decimal, bet_amount: Decimal, outcome: str, payout: Decimal) -> WagerSettlement:
    """
    Apply a bet outcome to a balance.

    The stake is always debited and the payout credited, so a win with
    payout P on bet B nets P - B. Any outcome other than "win" is booked as
    a loss: statistics record no winnings and the ledger records the stake.

    Raises:
        InsufficientFundsError: bet exceeds the current balance
    """
    if bet_amount <= ZERO:
        raise InvalidArgumentError("betAmount must be positive")
    if payout < ZERO:
        raise InvalidArgumentError("payout cannot be negative")
    if bet_amount > balance:
        raise InsufficientFundsError("Insufficient balance")

    new_balance = balance - bet_amount + payout

    if outcome == WIN:
        net = payout - bet_amount
        return WagerSettlement(
            new_balance=new_balance,
            wagered_delta=bet_amount,
            won_delta=net,
            transaction_type=WIN,
            transaction_amount=net,
        )

    return WagerSettlement(
        new_balance=new_balance,
        wagered_delta=bet_amount,
        won_delta=ZERO,
        transaction_type=LOSS,
        transaction_amount=bet_amount,
    )
