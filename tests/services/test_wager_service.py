"""Service tests for wager settlement"""

import pytest
from decimal import Decimal
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from casino_ledger.domain.exceptions import (
    InsufficientFundsError,
    InvalidArgumentError,
    NotFoundError,
    TransientError,
)
from casino_ledger.infrastructure.database.models import GameSession, LedgerTransaction
from casino_ledger.services.accounts import get_balance, open_account
from casino_ledger.services.wagers import get_game_stats, settle_wager


@pytest.fixture
def small_account(db):
    return open_account(db, "bob", balance=Decimal("100.00"))


def test_win_scenario(db, small_account):
    """balance 100, bet 30, win with payout 50 -> 120 and one win record of 20"""
    result = settle_wager(db, "bob", "slots", Decimal("30"), "win", Decimal("50"))

    assert result.new_balance == Decimal("120.00")
    assert result.payout == Decimal("50.00")
    assert get_balance(db, "bob").balance == Decimal("120.00")

    [record] = db.query(LedgerTransaction).filter_by(user_id="bob").all()
    assert record.type == "win"
    assert record.amount == Decimal("20.00")
    assert record.description == "slots - win"


def test_loss_updates_stats_and_records_stake(db, small_account):
    settle_wager(db, "bob", "roulette", "40", "loss", details={"pocket": 17, "bet": "red"})

    stats = get_game_stats(db, "bob")
    assert stats["roulette"].total_wagered == Decimal("40.00")
    assert stats["roulette"].total_won == Decimal("0.00")
    assert stats["roulette"].games_played == 1

    [record] = db.query(LedgerTransaction).filter_by(user_id="bob").all()
    assert (record.type, record.amount) == ("loss", Decimal("40.00"))


def test_details_stored_verbatim(db, small_account):
    details = {"hand": ["AS", "KD"], "dealer": {"upcard": "9H"}, "split": False}

    settle_wager(db, "bob", "blackjack", "10", "win", "25", details=details)

    session = db.query(GameSession).filter_by(user_id="bob").one()
    assert session.details == details
    assert session.bet_amount == Decimal("10.00")
    assert session.payout == Decimal("25.00")


def test_stats_accumulate_only_net_winnings(db, small_account):
    settle_wager(db, "bob", "poker", "10", "win", "30")
    settle_wager(db, "bob", "poker", "10", "loss")

    stat = get_game_stats(db, "bob")["poker"]
    assert stat.total_wagered == Decimal("20.00")
    assert stat.total_won == Decimal("20.00")
    assert stat.games_played == 2


def test_new_account_lists_every_game(db, small_account):
    assert set(get_game_stats(db, "bob")) == {"slots", "roulette", "blackjack", "poker"}


def test_insufficient_funds_changes_nothing(db, small_account):
    with pytest.raises(InsufficientFundsError):
        settle_wager(db, "bob", "slots", "100.01", "win", "500")

    assert get_balance(db, "bob").balance == Decimal("100.00")
    assert db.query(LedgerTransaction).count() == 0
    assert db.query(GameSession).count() == 0
    assert get_game_stats(db, "bob")["slots"].games_played == 0


@pytest.mark.parametrize(
    "game_type,bet,outcome,payout",
    [
        ("craps", "10", "win", "20"),
        ("slots", "0", "loss", "0"),
        ("slots", "-5", "loss", "0"),
        ("slots", "10", "push", "10"),
        ("slots", "10", "loss", "5"),
    ],
)
def test_invalid_arguments_rejected(db, small_account, game_type, bet, outcome, payout):
    with pytest.raises(InvalidArgumentError):
        settle_wager(db, "bob", game_type, bet, outcome, payout)

    assert get_balance(db, "bob").balance == Decimal("100.00")


def test_unknown_user(db):
    with pytest.raises(NotFoundError):
        settle_wager(db, "nobody", "slots", "1", "loss")


def test_storage_failure_rolls_back_and_is_transient(db, small_account):
    with patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("db down"))):
        with pytest.raises(TransientError):
            settle_wager(db, "bob", "slots", "30", "win", "50")

    assert get_balance(db, "bob").balance == Decimal("100.00")
    assert db.query(LedgerTransaction).count() == 0


def test_balance_never_negative_over_a_losing_streak(db, small_account):
    for _ in range(10):
        try:
            settle_wager(db, "bob", "slots", "15", "loss")
        except InsufficientFundsError:
            pass
        assert get_balance(db, "bob").balance >= 0

    assert get_balance(db, "bob").balance == Decimal("10.00")


def test_sub_cent_bet_rejected_without_debit(db, small_account):
    with pytest.raises(InvalidArgumentError):
        settle_wager(db, "bob", "slots", "10.005", "loss")

    assert get_balance(db, "bob").balance == Decimal("100.00")
    assert db.query(GameSession).count() == 0
