"""
Market Data Exceptions.

Raised inside StockDataProvider and caught at its public methods,
which fall back to curated mock data.
"""

from core.errors import HttpStatusError, ProviderError


class MarketDataError(ProviderError):
    """Base exception for market data errors."""
    pass


class MarketDataFetchError(MarketDataError, HttpStatusError):
    """Network, HTTP or throttling failure talking to the market data API."""
    pass


class QuoteUnavailableError(MarketDataError):
    """The API answered but carried no usable data for the symbol."""
    pass
