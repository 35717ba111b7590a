"""Finnhub provider — compact real-time quote endpoint.

Requires an API key (free tier is enough for quotes).
"""

from __future__ import annotations

import os
from typing import Any

from papermarket.errors import MarketDataError, MarketDataErrorCode
from papermarket.models.quote import Quote
from papermarket.providers.base import PARSE_ERRORS, HTTPQuoteProvider
from papermarket.reference import company_name, sector_for


class FinnhubProvider(HTTPQuoteProvider):
    """Fetch quotes from Finnhub.io.

    Capabilities: quotes.
    Note: the quote payload carries no name or volume; names come from the
    reference universe and volume is reported as 0.
    """

    name = "finnhub"
    base_url = "https://finnhub.io/api/v1"

    def __init__(self, api_key: str | None = None, **kwargs: Any) -> None:
        api_key = api_key or os.getenv("FINNHUB_API_KEY")
        if not api_key:
            raise MarketDataError(
                "Finnhub API key required. Set FINNHUB_API_KEY env var or pass api_key.",
                code=MarketDataErrorCode.AUTH_FAILED,
                provider=self.name,
            )
        super().__init__(**kwargs)
        self.api_key = api_key

    async def get_quote(self, symbol: str) -> Quote:
        key = symbol.upper()
        raw = await self._get_json(
            f"{self.base_url}/quote",
            params={"symbol": key, "token": self.api_key},
        )
        if not isinstance(raw, dict):
            raise self._invalid(key, TypeError(type(raw).__name__))

        # Finnhub answers unknown symbols with an all-zero payload.
        price = raw.get("c")
        try:
            if not price or price <= 0:
                raise self._no_price(key)
            return Quote.from_prices(
                key,
                price,
                name=company_name(key),
                sector=sector_for(key),
                previous_close=raw.get("pc") or None,
                change=raw.get("d"),
                high=raw.get("h") or None,
                low=raw.get("l") or None,
                open=raw.get("o") or None,
                source=self.name,
            )
        except PARSE_ERRORS as exc:
            raise self._invalid(key, exc) from exc
