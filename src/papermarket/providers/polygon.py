"""Polygon.io provider — ticker snapshots, single and bulk.

Requires an API key. The bulk snapshot endpoint answers any number of
tickers in one request, which makes this the preferred source for
multi-symbol refreshes when configured.
"""

from __future__ import annotations

import os
from typing import Any

from papermarket.errors import MarketDataError, MarketDataErrorCode
from papermarket.models.quote import Quote
from papermarket.providers.base import PARSE_ERRORS, HTTPQuoteProvider
from papermarket.reference import company_name, sector_for


class PolygonProvider(HTTPQuoteProvider):
    """Fetch snapshots from Polygon.io.

    Capabilities: quotes, batch_quotes.
    """

    name = "polygon"
    base_url = "https://api.polygon.io"

    def __init__(self, api_key: str | None = None, **kwargs: Any) -> None:
        api_key = api_key or os.getenv("POLYGON_API_KEY")
        if not api_key:
            raise MarketDataError(
                "Polygon API key required. Set POLYGON_API_KEY env var or pass api_key.",
                code=MarketDataErrorCode.AUTH_FAILED,
                provider=self.name,
            )
        super().__init__(**kwargs)
        self.api_key = api_key

    def capabilities(self) -> set[str]:
        return {"quotes", "batch_quotes"}

    @property
    def _snapshot_url(self) -> str:
        return f"{self.base_url}/v2/snapshot/locale/us/markets/stocks/tickers"

    async def get_quote(self, symbol: str) -> Quote:
        key = symbol.upper()
        data = await self._get_json(f"{self._snapshot_url}/{key}", params={"apiKey": self.api_key})
        try:
            quote = self._snap_to_quote(key, data["ticker"])
        except PARSE_ERRORS as exc:
            raise self._invalid(key, exc) from exc
        if quote is None:
            raise self._no_price(key)
        return quote

    async def get_quotes(self, symbols: list[str]) -> list[Quote]:
        keys = [s.upper() for s in symbols]
        data = await self._get_json(
            self._snapshot_url,
            params={"tickers": ",".join(keys), "apiKey": self.api_key},
        )
        quotes: list[Quote] = []
        try:
            for snap in data.get("tickers") or []:
                quote = self._snap_to_quote(str(snap.get("ticker", "")).upper(), snap)
                if quote is not None:
                    quotes.append(quote)
        except PARSE_ERRORS as exc:
            raise self._invalid(",".join(keys), exc) from exc
        return quotes

    def _snap_to_quote(self, symbol: str, snap: dict[str, Any]) -> Quote | None:
        day = snap.get("day") or {}
        prev_day = snap.get("prevDay") or {}
        last_trade = snap.get("lastTrade") or {}
        minute = snap.get("min") or {}

        price = last_trade.get("p") or day.get("c") or minute.get("c")
        if not symbol or not price or price <= 0:
            return None

        return Quote.from_prices(
            symbol,
            price,
            name=company_name(symbol),
            sector=sector_for(symbol),
            previous_close=prev_day.get("c") or None,
            change=snap.get("todaysChange"),
            volume=day.get("v"),
            high=day.get("h") or None,
            low=day.get("l") or None,
            open=day.get("o") or None,
            source=self.name,
        )
