"""Service tests for account provisioning and history"""

import pytest
from decimal import Decimal
from unittest.mock import patch
from casino_ledger.domain.exceptions import InvalidArgumentError, NotFoundError
from casino_ledger.infrastructure.database.models import Account
from casino_ledger.services.accounts import get_balance, list_transactions, open_account
from casino_ledger.services.wagers import settle_wager


def test_open_account_uses_configured_defaults(db):
    snapshot = open_account(db, "zoe", email="zoe@example.com")

    assert snapshot.balance == Decimal("1000.00")
    assert snapshot.credit_score == 750
    assert db.query(Account).filter_by(user_id="zoe").one().email == "zoe@example.com"


def test_open_account_twice_rejected(db, account):
    with pytest.raises(InvalidArgumentError):
        open_account(db, "alice")

    assert db.query(Account).count() == 1


def test_open_account_losing_insert_race_rejected(db, account):
    """Existence check passes but another request inserted the row first"""
    db.expunge_all()

    with patch("casino_ledger.services.accounts.AccountRepository.get", return_value=None):
        with pytest.raises(InvalidArgumentError):
            open_account(db, "alice")

    assert db.query(Account).count() == 1


def test_get_balance_unknown_user(db):
    with pytest.raises(NotFoundError):
        get_balance(db, "ghost")


def test_list_transactions_newest_first(db, account):
    settle_wager(db, "alice", "slots", "10", "loss")
    settle_wager(db, "alice", "poker", "20", "win", "50")

    entries = list_transactions(db, "alice")

    assert [(e.type, e.amount) for e in entries] == [("win", Decimal("30.00")), ("loss", Decimal("10.00"))]


def test_list_transactions_limit(db, account):
    for _ in range(3):
        settle_wager(db, "alice", "slots", "1", "loss")

    assert len(list_transactions(db, "alice", limit=2)) == 2
    with pytest.raises(InvalidArgumentError):
        list_transactions(db, "alice", limit=0)
