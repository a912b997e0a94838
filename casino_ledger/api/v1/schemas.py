"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimals travel as JSON numbers, matching what the web client expects
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OpenAccountRequest(CamelModel):
    """Request body for POST /v1/accounts"""

    email: Optional[str] = Field(None, description="Address for the verification notification")


class AccountResponse(CamelModel):
    """Response for GET /v1/games/balance and POST /v1/accounts"""

    balance: Money
    credit_score: int


class PlayRequest(CamelModel):
    """Request body for POST /v1/games/play"""

    game_type: str = Field(..., description="slots | roulette | blackjack | poker")
    bet_amount: Decimal = Field(..., gt=0, description="Stake")
    result: Literal["win", "loss"]
    payout: Decimal = Field(Decimal("0"), ge=0, description="Amount returned to the player, 0 on a loss")
    details: Optional[Dict[str, Any]] = None


class PlayResponse(CamelModel):
    success: bool = True
    new_balance: Money
    result: str
    payout: Money


class GameStatSchema(CamelModel):
    total_wagered: Money
    total_won: Money
    games_played: int


class CreditResponse(CamelModel):
    credit_score: int
    total_debt: Money
    interest_rate: Money


class LoanSchema(CamelModel):
    id: int
    principal: Money
    interest_rate: Money
    total_amount: Money
    amount_paid: Money
    remaining: Money
    loan_type: str
    status: str
    created_at: datetime
    due_date: datetime


class BorrowRequest(CamelModel):
    """Request body for POST /v1/bank/borrow"""

    amount: Decimal = Field(..., gt=0)
    loan_type: str = Field(..., description="quick | standard | extended")


class BorrowResponse(CamelModel):
    success: bool = True
    loan_id: int
    amount: Money
    interest_rate: Money
    total_amount: Money
    new_balance: Money
    due_date: datetime


class RepayRequest(CamelModel):
    """Request body for POST /v1/bank/repay/{loan_id}"""

    amount: Decimal = Field(..., gt=0)


class RepayResponse(CamelModel):
    success: bool = True
    new_balance: Money
    loan_paid_off: bool
    remaining: Money


class QuoteSchema(CamelModel):
    symbol: str
    name: str
    price: Money
    change_percent: Money


class TradeRequest(CamelModel):
    """Request body for POST /v1/stocks/buy and /v1/stocks/sell"""

    symbol: str = Field(..., min_length=1)
    shares: int = Field(..., gt=0)


class BuyResponse(CamelModel):
    success: bool = True
    new_balance: Money
    shares: int
    price: Money
    total_cost: Money


class SellResponse(CamelModel):
    success: bool = True
    new_balance: Money
    shares: int
    price: Money
    total_value: Money


class PositionSchema(CamelModel):
    symbol: str
    shares: int
    avg_price: Money
    current_price: Money
    total_value: Money
    cost_basis: Money
    profit_loss: Money
    profit_loss_percent: Optional[Money] = Field(None, description="null when cost basis is zero")


class TransactionSchema(CamelModel):
    id: int
    type: str
    amount: Money
    description: str
    created_at: datetime


class TransactionHistoryResponse(CamelModel):
    user_id: str
    transactions: List[TransactionSchema]
