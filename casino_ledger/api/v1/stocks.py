"""Stock endpoints: quotes, portfolio, buy and sell"""

from typing import Dict, List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from casino_ledger.api.dependencies import get_price_oracle, get_request_id, get_user_id
from casino_ledger.api.v1.errors import to_http_exception
from casino_ledger.api.v1.schemas import (
    BuyResponse,
    PositionSchema,
    QuoteSchema,
    SellResponse,
    TradeRequest,
)
from casino_ledger.infrastructure.clients.prices import PriceOracle
from casino_ledger.infrastructure.database.session import get_db
from casino_ledger.services.trading import buy_stock, get_portfolio, get_prices, sell_stock

router = APIRouter()


@router.get("/stocks/prices", response_model=Dict[str, QuoteSchema])
def read_prices(
    request: Request,
    user_id: str = Depends(get_user_id),
    oracle: PriceOracle = Depends(get_price_oracle),
):
    try:
        quotes = get_prices(oracle)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request))

    return {
        symbol: QuoteSchema(symbol=q.symbol, name=q.name, price=q.price, change_percent=q.change_percent)
        for symbol, q in quotes.items()
    }


@router.get("/stocks/portfolio", response_model=List[PositionSchema])
def read_portfolio(
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    oracle: PriceOracle = Depends(get_price_oracle),
):
    """Holdings per symbol with weighted average cost and unrealized P&L"""
    try:
        positions = get_portfolio(db, oracle, user_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request))

    return [
        PositionSchema(
            symbol=p.symbol,
            shares=p.shares,
            avg_price=p.avg_price,
            current_price=p.current_price,
            total_value=p.total_value,
            cost_basis=p.cost_basis,
            profit_loss=p.profit_loss,
            profit_loss_percent=p.profit_loss_percent,
        )
        for p in positions
    ]


@router.post("/stocks/buy", response_model=BuyResponse)
def buy(
    request_body: TradeRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    oracle: PriceOracle = Depends(get_price_oracle),
):
    request_id = get_request_id(request)
    try:
        result = buy_stock(db, oracle, user_id, request_body.symbol, request_body.shares, request_id=request_id)
    except Exception as e:
        raise to_http_exception(e, request_id)

    return BuyResponse(new_balance=result.new_balance, shares=result.shares, price=result.price, total_cost=result.total)


@router.post("/stocks/sell", response_model=SellResponse)
def sell(
    request_body: TradeRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    oracle: PriceOracle = Depends(get_price_oracle),
):
    """Sell shares, consuming the oldest lots first"""
    request_id = get_request_id(request)
    try:
        result = sell_stock(db, oracle, user_id, request_body.symbol, request_body.shares, request_id=request_id)
    except Exception as e:
        raise to_http_exception(e, request_id)

    return SellResponse(new_balance=result.new_balance, shares=result.shares, price=result.price, total_value=result.total)
