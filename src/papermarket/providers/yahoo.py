"""Yahoo Finance provider — keyless chart, search and trending endpoints.

The richest free source and first in the default chain. The endpoints are
unofficial and occasionally reject traffic, which is exactly what the
fallback chain is for.
"""

from __future__ import annotations

from typing import Any

from papermarket.models.quote import Quote
from papermarket.models.search_result import SearchResult
from papermarket.providers.base import PARSE_ERRORS, HTTPQuoteProvider
from papermarket.reference import company_name, sector_for

_SEARCHABLE_TYPES = {"EQUITY", "ETF"}


class YahooProvider(HTTPQuoteProvider):
    """Fetch quotes from Yahoo Finance.

    Capabilities: quotes, search, trending.
    """

    name = "yahoo"
    base_url = "https://query1.finance.yahoo.com"

    def capabilities(self) -> set[str]:
        return {"quotes", "search", "trending"}

    # --------------------------------------------------------------- quotes

    async def get_quote(self, symbol: str) -> Quote:
        key = symbol.upper()
        data = await self._get_json(
            f"{self.base_url}/v8/finance/chart/{key}",
            params={"range": "1d", "interval": "1d"},
        )
        try:
            return self._parse_chart(key, data)
        except PARSE_ERRORS as exc:
            raise self._invalid(key, exc) from exc

    def _parse_chart(self, symbol: str, data: Any) -> Quote:
        result = data["chart"]["result"][0]
        meta = result["meta"]
        series = (result.get("indicators", {}).get("quote") or [{}])[0]

        closes = [c for c in series.get("close") or [] if c is not None]
        opens = [o for o in series.get("open") or [] if o is not None]

        price = meta.get("regularMarketPrice") or (closes[-1] if closes else None)
        if not price or price <= 0:
            raise self._no_price(symbol)

        previous_close = (
            meta.get("previousClose")
            or meta.get("chartPreviousClose")
            or (closes[-2] if len(closes) > 1 else None)
        )

        return Quote.from_prices(
            symbol,
            price,
            name=meta.get("longName") or meta.get("shortName") or company_name(symbol),
            sector=sector_for(symbol),
            previous_close=previous_close,
            volume=meta.get("regularMarketVolume"),
            market_cap=meta.get("marketCap"),
            high=meta.get("regularMarketDayHigh"),
            low=meta.get("regularMarketDayLow"),
            open=meta.get("regularMarketOpen") or (opens[0] if opens else None),
            source=self.name,
        )

    # --------------------------------------------------------------- search

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        data = await self._get_json(
            f"{self.base_url}/v1/finance/search",
            params={"q": query, "quotesCount": limit, "newsCount": 0},
        )
        try:
            return self._parse_search(data, limit)
        except PARSE_ERRORS as exc:
            raise self._invalid(query, exc) from exc

    def _parse_search(self, data: Any, limit: int) -> list[SearchResult]:
        quotes = [
            q for q in data.get("quotes") or []
            if q.get("symbol") and str(q.get("quoteType", "")).upper() in _SEARCHABLE_TYPES
        ]
        top = max((float(q.get("score") or 0) for q in quotes), default=0.0)
        results: list[SearchResult] = []
        for q in quotes[:limit]:
            score = float(q.get("score") or 0)
            results.append(SearchResult(
                symbol=q["symbol"],
                name=q.get("longname") or q.get("shortname") or q["symbol"],
                type=q.get("typeDisp") or str(q["quoteType"]).title(),
                match_score=round(score / top, 4) if top else 1.0,
            ))
        return results

    # ------------------------------------------------------------- trending

    async def trending(self, limit: int = 8) -> list[str]:
        data = await self._get_json(
            f"{self.base_url}/v1/finance/trending/US",
            params={"count": limit},
        )
        try:
            quotes = data["finance"]["result"][0]["quotes"] or []
            return [q["symbol"] for q in quotes if q.get("symbol")][:limit]
        except PARSE_ERRORS as exc:
            raise self._invalid("trending", exc) from exc
