"""
Market Data Layer - Company profiles, quotes and price history.

Usage:
    from market_data import StockDataProvider

    provider = StockDataProvider(api_key="...")
    profile = await provider.get_company_info("AAPL")
    bars = await provider.get_historical_data("AAPL", "6M")
"""

from .exceptions import MarketDataError, MarketDataFetchError, QuoteUnavailableError
from .mock_data import MOCK_COMPANY_PROFILES, MOCK_PRICES, generate_mock_history
from .models import OHLCVPoint, Quote, TimePeriod
from .provider import StockDataProvider


__all__ = [
    # Provider
    "StockDataProvider",

    # Models
    "OHLCVPoint",
    "Quote",
    "TimePeriod",

    # Fallbacks
    "MOCK_COMPANY_PROFILES",
    "MOCK_PRICES",
    "generate_mock_history",

    # Exceptions
    "MarketDataError",
    "MarketDataFetchError",
    "QuoteUnavailableError",
]
