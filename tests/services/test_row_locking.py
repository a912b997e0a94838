"""Row locks taken by mutating operations"""

from decimal import Decimal
from unittest.mock import patch
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Query
from casino_ledger.infrastructure.database.repositories import AccountRepository, LoanRepository
from casino_ledger.services.lending import borrow, repay_loan


def _capture_first(statements):
    real_first = Query.first

    def spy(self):
        statements.append(str(self.statement.compile(dialect=postgresql.dialect())))
        return real_first(self)

    return patch.object(Query, "first", spy)


def test_account_and_loan_reads_lock_rows(db, account):
    loan = borrow(db, "alice", Decimal("100"), "quick")
    statements = []

    with _capture_first(statements):
        repay_loan(db, "alice", loan.loan_id, Decimal("10"))

    locked = [s for s in statements if "FOR UPDATE" in s]
    assert len(locked) == 2
    # account row first, then the loan: one lock order for every operation
    assert "FROM account" in locked[0]
    assert "FROM loan" in locked[1]


def test_lookups_without_lock_do_not_use_for_update(db, account):
    statements = []

    with _capture_first(statements):
        AccountRepository(db).get("alice")
        LoanRepository(db).get_for_update(1, "alice")

    assert "FOR UPDATE" not in statements[0]
    assert "FOR UPDATE" in statements[1]
