"""Portfolio service: stock buys and FIFO sells against oracle quotes"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from casino_ledger.domain.exceptions import InsufficientFundsError, InvalidArgumentError
from casino_ledger.domain.models import Position, Quote, TradeResult
from casino_ledger.domain.portfolio import (
    plan_fifo_sale,
    realized_cost_basis,
    summarize_positions,
    validate_shares,
)
from casino_ledger.infrastructure.clients.prices import PriceOracle
from casino_ledger.infrastructure.database.repositories import (
    PriceHistoryRepository,
    StockLotRepository,
    TransactionRepository,
)
from casino_ledger.infrastructure.observability.logging import log_operation
from casino_ledger.infrastructure.observability.metrics import trade_counter
from casino_ledger.services.unit_of_work import load_account, lock_account, operation
from casino_ledger.utils.money import to_money, within_range

logger = logging.getLogger(__name__)


def get_prices(oracle: PriceOracle) -> Dict[str, Quote]:
    return oracle.get_prices()


def _quote_for(oracle: PriceOracle, symbol: str) -> Quote:
    """One oracle call per operation; the same quote prices and records the trade"""
    quote = oracle.get_prices().get(symbol)
    if quote is None:
        raise InvalidArgumentError(f"Invalid stock symbol: {symbol}")
    return quote


def buy_stock(
    db: Session,
    oracle: PriceOracle,
    user_id: str,
    symbol: str,
    shares: int,
    request_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TradeResult:
    """Buy `shares` at the current quote, opening a new lot"""
    now = now or datetime.now(timezone.utc)

    with operation(db, "buy_stock", user_id, request_id):
        validate_shares(shares)
        quote = _quote_for(oracle, symbol)
        total_cost = within_range(to_money(quote.price * shares), "total_cost")

        account = lock_account(db, user_id)
        balance = Decimal(account.balance)
        if total_cost > balance:
            raise InsufficientFundsError("Insufficient balance")

        StockLotRepository(db).create(user_id, symbol, shares, quote.price, purchased_at=now)
        new_balance = balance - total_cost
        account.balance = new_balance
        TransactionRepository(db).append(user_id, "stock_buy", total_cost, f"Bought {shares} shares of {symbol}")
        PriceHistoryRepository(db).record(quote)

    trade_counter.labels(side="buy").inc()
    log_operation(
        "buy_stock",
        user_id,
        request_id,
        symbol=symbol,
        shares=shares,
        price=quote.price,
        total_cost=total_cost,
    )
    return TradeResult(new_balance=new_balance, symbol=symbol, shares=shares, price=quote.price, total=total_cost)


def sell_stock(
    db: Session,
    oracle: PriceOracle,
    user_id: str,
    symbol: str,
    shares: int,
    request_id: Optional[str] = None,
) -> TradeResult:
    """
    Sell `shares` at the current quote, consuming lots oldest-first.

    The holding is summed from the lots themselves under the account lock,
    so a sale can never take the aggregate below zero.
    """
    with operation(db, "sell_stock", user_id, request_id):
        validate_shares(shares)
        quote = _quote_for(oracle, symbol)
        total_value = within_range(to_money(quote.price * shares), "total_value")

        account = lock_account(db, user_id)
        lots_repo = StockLotRepository(db)
        lots = lots_repo.list_for_symbol(user_id, symbol)
        snapshots = [lots_repo.snapshot(lot) for lot in lots]
        changes = plan_fifo_sale(snapshots, shares)
        cost_basis = realized_cost_basis(snapshots, changes)

        by_id = {lot.id: lot for lot in lots}
        for change in changes:
            lots_repo.shrink(by_id[change.lot_id], change.remaining_shares)

        new_balance = Decimal(account.balance) + total_value
        within_range(new_balance, "balance")
        account.balance = new_balance
        TransactionRepository(db).append(user_id, "stock_sell", total_value, f"Sold {shares} shares of {symbol}")
        PriceHistoryRepository(db).record(quote)

    trade_counter.labels(side="sell").inc()
    log_operation(
        "sell_stock",
        user_id,
        request_id,
        symbol=symbol,
        shares=shares,
        price=quote.price,
        total_value=total_value,
        lots_touched=len(changes),
    )
    return TradeResult(
        new_balance=new_balance,
        symbol=symbol,
        shares=shares,
        price=quote.price,
        total=total_value,
        realized_cost_basis=cost_basis,
    )


def get_portfolio(db: Session, oracle: PriceOracle, user_id: str) -> List[Position]:
    """Holdings per symbol valued at current quotes; read-only"""
    load_account(db, user_id)
    lots_repo = StockLotRepository(db)
    snapshots = [lots_repo.snapshot(lot) for lot in lots_repo.list_by_user(user_id)]
    if not snapshots:
        return []

    quotes = oracle.get_prices()
    missing = {lot.symbol for lot in snapshots} - set(quotes)
    if missing:
        logger.warning("No quote for held symbols, valuing at zero", extra={"symbols": sorted(missing)})
    return summarize_positions(snapshots, quotes)
