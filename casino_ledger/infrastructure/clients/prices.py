"""Price oracle clients: in-process market simulation and remote HTTP feed"""

import random
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, Optional, Protocol

import httpx

from casino_ledger.config import settings
from casino_ledger.domain.exceptions import TransientError
from casino_ledger.domain.models import Quote
from casino_ledger.utils.money import CENT

# Symbol -> (company name, base price)
INSTRUMENTS: Dict[str, tuple] = {
    "TECH": ("TechCorp", Decimal("150")),
    "BANK": ("MegaBank", Decimal("85")),
    "AUTO": ("AutoDrive", Decimal("220")),
    "FOOD": ("FoodChain", Decimal("45")),
    "PHARM": ("PharmaCure", Decimal("180")),
    "ENRG": ("EnergyPlus", Decimal("92")),
    "RETAIL": ("ShopMore", Decimal("68")),
    "AERO": ("SkyHigh", Decimal("315")),
    "MEDIA": ("MediaNet", Decimal("125")),
    "CRYPTO": ("CryptoVault", Decimal("55")),
}


class PriceOracle(Protocol):
    """Anything that can quote every tradeable instrument"""

    def get_prices(self) -> Dict[str, Quote]:
        ...


class SimulatedPriceOracle:
    """
    Simulated market with uniform +/-volatility noise around base prices.

    Without a seed every call draws fresh noise. With a seed, prices are a
    pure function of (seed, time bucket, symbol), so two oracles built with
    the same seed and clock agree and no state is shared between calls.
    """

    def __init__(
        self,
        volatility: float | None = None,
        seed: Optional[int] = None,
        tick_seconds: float = 1.0,
        clock: Callable[[], float] = time.time,
    ):
        self.volatility = settings.price_volatility if volatility is None else volatility
        self.seed = seed
        self.tick_seconds = tick_seconds
        self.clock = clock

    def _rng(self, symbol: str) -> random.Random:
        if self.seed is None:
            return random.Random()
        bucket = int(self.clock() // self.tick_seconds)
        return random.Random(f"{self.seed}:{bucket}:{symbol}")

    def get_prices(self) -> Dict[str, Quote]:
        prices = {}
        for symbol, (name, base_price) in INSTRUMENTS.items():
            change = (self._rng(symbol).random() - 0.5) * 2 * self.volatility
            change = Decimal(str(change))
            prices[symbol] = Quote(
                symbol=symbol,
                name=name,
                price=(base_price * (1 + change)).quantize(CENT, rounding=ROUND_HALF_UP),
                change_percent=(change * 100).quantize(CENT, rounding=ROUND_HALF_UP),
            )
        return prices


class HttpPriceOracle:
    """Client for an external price feed returning {symbol: {price, changePercent, name}}"""

    def __init__(self, base_url: str, timeout: float | None = None):
        self.base_url = base_url
        self.timeout = timeout or settings.http_timeout_seconds

    @staticmethod
    def _parse_quote(symbol: str, item: dict) -> Quote:
        price = Decimal(str(item["price"]))
        change_percent = Decimal(str(item.get("changePercent", item.get("change", 0))))
        if not price.is_finite() or not change_percent.is_finite():
            raise ValueError(f"non-finite quote for {symbol}")
        price = price.quantize(CENT, rounding=ROUND_HALF_UP)
        if price <= 0:
            raise ValueError(f"non-positive price {price} for {symbol}")
        return Quote(symbol=symbol, name=item.get("name", symbol), price=price, change_percent=change_percent)

    def get_prices(self) -> Dict[str, Quote]:
        """
        Fetch current quotes.

        Raises:
            TransientError: On timeout, HTTP errors, a malformed payload or a
                price that is not positive and finite
        """
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(f"{self.base_url}/prices")
                response.raise_for_status()
                data = response.json()

            return {symbol: self._parse_quote(symbol, item) for symbol, item in data.items()}

        except httpx.TimeoutException as e:
            raise TransientError(f"Price oracle timeout after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransientError(f"Price oracle error: {e}") from e
        except (KeyError, ValueError, TypeError, ArithmeticError, AttributeError) as e:
            raise TransientError(f"Invalid quote data from price oracle: {e}") from e


def build_price_oracle() -> PriceOracle:
    if settings.price_oracle_url:
        return HttpPriceOracle(settings.price_oracle_url)
    return SimulatedPriceOracle(seed=settings.price_seed)
