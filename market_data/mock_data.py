"""
Market Data - Offline fallbacks.

Curated profiles and prices for the demo universe, plus a
deterministic synthetic price history used whenever the live API
is unconfigured or has nothing for a symbol.
"""

import random
import zlib
from datetime import date, timedelta

from scoring_engine.models import CompanyProfile

from .models import OHLCVPoint, TimePeriod


MOCK_COMPANY_PROFILES: dict[str, CompanyProfile] = {
    "GOOG": CompanyProfile(
        symbol="GOOG",
        name="Alphabet Inc.",
        description="Parent company of Google, specializing in Internet-related services and products.",
        sector="Technology",
        industry="Internet Content & Information",
        logo="🔍",
        market_cap=2_100_000_000_000,
        pe_ratio=25.4,
    ),
    "TSLA": CompanyProfile(
        symbol="TSLA",
        name="Tesla Inc.",
        description="Electric vehicle and clean energy company.",
        sector="Automotive",
        industry="Auto Manufacturers",
        logo="⚡",
        market_cap=700_000_000_000,
        pe_ratio=62.8,
    ),
    "MSFT": CompanyProfile(
        symbol="MSFT",
        name="Microsoft Corporation",
        description="Technology corporation that develops and supports software, services, devices, and solutions.",
        sector="Technology",
        industry="Software - Infrastructure",
        logo="🪟",
        market_cap=3_000_000_000_000,
        pe_ratio=35.2,
    ),
    "AAPL": CompanyProfile(
        symbol="AAPL",
        name="Apple Inc.",
        description="Consumer electronics, software and services company.",
        sector="Technology",
        industry="Consumer Electronics",
        logo="🍎",
        market_cap=2_800_000_000_000,
        pe_ratio=28.9,
    ),
    "NVDA": CompanyProfile(
        symbol="NVDA",
        name="NVIDIA Corporation",
        description="Technology company that designs graphics processing units and system-on-chip units.",
        sector="Technology",
        industry="Semiconductors",
        logo="💚",
        market_cap=3_200_000_000_000,
        pe_ratio=65.3,
    ),
}

MOCK_PRICES: dict[str, float] = {
    "GOOG": 178.35,
    "TSLA": 248.50,
    "MSFT": 425.22,
    "AAPL": 195.89,
    "NVDA": 140.14,
    "SHE": 85.14,
    "NACP": 32.85,
    "ESGU": 112.47,
    "ICLN": 14.23,
    "SUSA": 89.45,
    "ESGV": 82.33,
}


def symbol_seed(symbol: str) -> int:
    """Stable per-symbol seed (``hash()`` is salted per process)."""
    return zlib.crc32(symbol.upper().encode("utf-8"))


def synthetic_price(symbol: str) -> float:
    """Stable pseudo price in [50, 250) for symbols without a curated one."""
    return round(50 + random.Random(symbol_seed(symbol)).random() * 200, 2)


def generate_mock_history(
    symbol: str,
    current_price: float,
    period: TimePeriod,
    today: date,
) -> list[OHLCVPoint]:
    """
    Daily bars for ``period`` ending ``today`` at ``current_price``.

    Starts at 70-110% of the current price and drifts towards it with
    2-5% daily noise. Same symbol and period always give the same bars.
    """
    rng = random.Random(symbol_seed(f"{symbol}:{period.value}"))
    days = period.days

    price = current_price * (0.7 + rng.random() * 0.4)
    trend = (current_price - price) / days
    points: list[OHLCVPoint] = []

    for offset in range(days, -1, -1):
        volatility = 0.02 + rng.random() * 0.03
        price += trend + price * volatility * (rng.random() - 0.5)
        price = max(price, 1.0)

        open_ = price * (1 + (rng.random() - 0.5) * 0.01)
        high = max(open_, price) * (1 + rng.random() * 0.02)
        low = min(open_, price) * (1 - rng.random() * 0.02)

        points.append(OHLCVPoint(
            date=(today - timedelta(days=offset)).isoformat(),
            open=round(open_, 2),
            high=round(high, 2),
            low=round(low, 2),
            close=round(price, 2),
            volume=int(1_000_000 + rng.random() * 10_000_000),
        ))

    return points
