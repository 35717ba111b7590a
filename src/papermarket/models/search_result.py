"""Symbol search result model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SearchResult:
    """Display-oriented search hit, independent of live prices.

    Attributes:
        symbol: Ticker symbol.
        name: Company or fund name.
        type: Security type label ("Equity", "ETF", ...).
        region: Listing region.
        market_open: Regular session open, "HH:MM".
        market_close: Regular session close, "HH:MM".
        timezone: Listing timezone label.
        currency: Trading currency.
        match_score: Relevance in [0, 1].
    """

    symbol: str
    name: str
    type: str = "Equity"
    region: str = "United States"
    market_open: str = "09:30"
    market_close: str = "16:00"
    timezone: str = "UTC-04"
    currency: str = "USD"
    match_score: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "type": self.type,
            "region": self.region,
            "marketOpen": self.market_open,
            "marketClose": self.market_close,
            "timezone": self.timezone,
            "currency": self.currency,
            "matchScore": f"{self.match_score:.4f}",
        }
