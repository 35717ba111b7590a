"""Financial Modeling Prep provider — bulk quotes and symbol search.

The ``demo`` key only covers a handful of large caps; set ``FMP_API_KEY``
for the full universe.
"""

from __future__ import annotations

import os
from typing import Any

from papermarket.models.quote import Quote
from papermarket.models.search_result import SearchResult
from papermarket.providers.base import PARSE_ERRORS, HTTPQuoteProvider
from papermarket.reference import company_name, sector_for


class FMPProvider(HTTPQuoteProvider):
    """Fetch quotes from financialmodelingprep.com.

    Capabilities: quotes, batch_quotes, search.
    """

    name = "fmp"
    base_url = "https://financialmodelingprep.com/api/v3"

    def __init__(self, api_key: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key or os.getenv("FMP_API_KEY") or "demo"

    def capabilities(self) -> set[str]:
        return {"quotes", "batch_quotes", "search"}

    # --------------------------------------------------------------- quotes

    async def get_quote(self, symbol: str) -> Quote:
        key = symbol.upper()
        for quote in await self._fetch([key]):
            if quote.symbol == key:
                return quote
        raise self._no_price(key)

    async def get_quotes(self, symbols: list[str]) -> list[Quote]:
        return await self._fetch([s.upper() for s in symbols])

    async def _fetch(self, symbols: list[str]) -> list[Quote]:
        data = await self._get_json(
            f"{self.base_url}/quote/{','.join(symbols)}",
            params={"apikey": self.api_key},
        )
        if isinstance(data, dict) and "Error Message" in data:
            raise self._invalid(",".join(symbols), ValueError(data["Error Message"]))
        if not isinstance(data, list):
            raise self._invalid(",".join(symbols), TypeError(type(data).__name__))

        quotes: list[Quote] = []
        try:
            for row in data:
                parsed = self._parse_row(row)
                if parsed is not None:
                    quotes.append(parsed)
        except PARSE_ERRORS as exc:
            raise self._invalid(",".join(symbols), exc) from exc
        return quotes

    def _parse_row(self, row: dict[str, Any]) -> Quote | None:
        symbol = str(row.get("symbol") or "").upper()
        price = row.get("price")
        if not symbol or not price or price <= 0:
            return None
        return Quote.from_prices(
            symbol,
            price,
            name=row.get("name") or company_name(symbol),
            sector=sector_for(symbol),
            previous_close=row.get("previousClose"),
            change=row.get("change"),
            volume=row.get("volume"),
            market_cap=row.get("marketCap"),
            high=row.get("dayHigh"),
            low=row.get("dayLow"),
            open=row.get("open"),
            source=self.name,
        )

    # --------------------------------------------------------------- search

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        data = await self._get_json(
            f"{self.base_url}/search",
            params={"query": query, "limit": limit, "apikey": self.api_key},
        )
        if not isinstance(data, list):
            raise self._invalid(query, TypeError(type(data).__name__))
        try:
            return [
                SearchResult(
                    symbol=row["symbol"],
                    name=row.get("name") or row["symbol"],
                    currency=row.get("currency") or "USD",
                )
                for row in data[:limit]
                if row.get("symbol")
            ]
        except PARSE_ERRORS as exc:
            raise self._invalid(query, exc) from exc
