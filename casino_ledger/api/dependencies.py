"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache

from fastapi import Header, Request
from casino_ledger.infrastructure.clients.notifications import NotificationClient
from casino_ledger.infrastructure.clients.prices import PriceOracle, build_price_oracle


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: str = Header(..., min_length=1, description="Verified user identity from the auth gateway")) -> str:
    """Caller identity; authentication happens upstream"""
    return x_user_id


@lru_cache(maxsize=1)
def get_price_oracle() -> PriceOracle:
    """Provide the process-wide price oracle"""
    return build_price_oracle()


def get_notification_client() -> NotificationClient:
    """Provide notification webhook client instance"""
    return NotificationClient()
