"""Unit tests for wager settlement maths"""

import pytest
from decimal import Decimal
from casino_ledger.domain.wagers import settle, validate_game_type
from casino_ledger.domain.exceptions import InsufficientFundsError, InvalidArgumentError


def test_win_nets_payout_minus_stake():
    """balance 100, bet 30, win paying 50 -> 120 and a win entry of 20"""
    result = settle(Decimal("100"), Decimal("30"), "win", Decimal("50"))

    assert result.new_balance == Decimal("120")
    assert result.transaction_type == "win"
    assert result.transaction_amount == Decimal("20")
    assert result.wagered_delta == Decimal("30")
    assert result.won_delta == Decimal("20")


def test_loss_debits_stake():
    result = settle(Decimal("100"), Decimal("30"), "loss", Decimal("0"))

    assert result.new_balance == Decimal("70")
    assert result.transaction_type == "loss"
    assert result.transaction_amount == Decimal("30")
    assert result.won_delta == Decimal("0")


def test_bet_of_entire_balance_is_allowed():
    result = settle(Decimal("25.00"), Decimal("25.00"), "loss", Decimal("0"))
    assert result.new_balance == Decimal("0.00")


def test_bet_above_balance_rejected():
    with pytest.raises(InsufficientFundsError):
        settle(Decimal("10.00"), Decimal("10.01"), "win", Decimal("100"))


def test_non_positive_bet_rejected():
    with pytest.raises(InvalidArgumentError):
        settle(Decimal("10"), Decimal("0"), "loss", Decimal("0"))


@pytest.mark.parametrize("game_type", ["slots", "roulette", "blackjack", "poker"])
def test_supported_games(game_type):
    validate_game_type(game_type)


def test_unsupported_game_rejected():
    with pytest.raises(InvalidArgumentError):
        validate_game_type("craps")
