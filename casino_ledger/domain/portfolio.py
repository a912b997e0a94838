"""FIFO lot accounting and portfolio valuation"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from casino_ledger.domain.exceptions import InsufficientSharesError, InvalidArgumentError
from casino_ledger.domain.models import LotChange, LotSnapshot, Position, Quote
from casino_ledger.utils.money import ZERO, to_money

AVG_PRICE_PLACES = Decimal("0.0001")


def validate_shares(shares: int) -> None:
    # bool is an int subclass; True would otherwise buy one share
    if not isinstance(shares, int) or isinstance(shares, bool) or shares <= 0:
        raise InvalidArgumentError("shares must be a positive integer")


def plan_fifo_sale(lots: List[LotSnapshot], shares: int) -> List[LotChange]:
    """
    Decide which lots a sale of `shares` consumes, oldest first.

    Lots are walked in ascending purchased_at order (ties broken by lot id).
    A lot no larger than what is still to be sold is consumed whole;
    otherwise it is shrunk by the outstanding amount and the walk stops.

    Raises:
        InsufficientSharesError: aggregate holding is below `shares`
    """
    validate_shares(shares)
    held = sum(lot.shares for lot in lots)
    if held < shares:
        raise InsufficientSharesError(f"Insufficient shares: holding {held}, selling {shares}")

    ordered = sorted(lots, key=lambda lot: (lot.purchased_at, lot.lot_id))
    changes: List[LotChange] = []
    remaining = shares
    for lot in ordered:
        if remaining == 0:
            break
        if lot.shares <= remaining:
            changes.append(LotChange(lot_id=lot.lot_id, shares_taken=lot.shares, remaining_shares=0))
            remaining -= lot.shares
        else:
            changes.append(
                LotChange(lot_id=lot.lot_id, shares_taken=remaining, remaining_shares=lot.shares - remaining)
            )
            remaining = 0

    return changes


def realized_cost_basis(lots: List[LotSnapshot], changes: List[LotChange]) -> Decimal:
    """Purchase cost of the shares a FIFO plan takes"""
    prices = {lot.lot_id: lot.purchase_price for lot in lots}
    return to_money(sum((prices[c.lot_id] * c.shares_taken for c in changes), ZERO))


def summarize_positions(lots: Iterable[LotSnapshot], quotes: Dict[str, Quote]) -> List[Position]:
    """
    Group lots by symbol and value each group at the quoted price.

    avg_price is weighted by shares. profit_loss_percent is None when the
    cost basis is zero, since the ratio is undefined there.
    """
    grouped: Dict[str, List[LotSnapshot]] = {}
    for lot in lots:
        grouped.setdefault(lot.symbol, []).append(lot)

    positions = []
    for symbol in sorted(grouped):
        group = grouped[symbol]
        shares = sum(lot.shares for lot in group)
        cost = sum((lot.purchase_price * lot.shares for lot in group), ZERO)
        avg_price = (cost / shares).quantize(AVG_PRICE_PLACES, rounding=ROUND_HALF_UP) if shares else ZERO

        quote = quotes.get(symbol)
        current_price = quote.price if quote else ZERO

        total_value = to_money(current_price * shares)
        cost_basis = to_money(cost)
        profit_loss = total_value - cost_basis
        if cost_basis == ZERO:
            profit_loss_percent = None
        else:
            profit_loss_percent = to_money(profit_loss / cost_basis * 100)

        positions.append(
            Position(
                symbol=symbol,
                shares=shares,
                avg_price=avg_price,
                current_price=current_price,
                total_value=total_value,
                cost_basis=cost_basis,
                profit_loss=profit_loss,
                profit_loss_percent=profit_loss_percent,
            )
        )

    return positions
