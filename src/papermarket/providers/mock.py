"""Mock provider for testing and offline demos — no network, no keys."""

from __future__ import annotations

import asyncio

from papermarket.errors import MarketDataError, MarketDataErrorCode
from papermarket.models.quote import Quote
from papermarket.models.search_result import SearchResult
from papermarket.providers.base import BaseQuoteProvider
from papermarket.reference import company_name, sector_for


class MockProvider(BaseQuoteProvider):
    """In-memory provider that returns configurable static data.

    Use ``set_quote``, ``set_search_results`` and ``set_trending`` to
    pre-load data, ``fail_symbol``/``fail_all`` to script failures, or leave
    defaults for a flat $150 quote. Every call is recorded so tests can
    assert on network-equivalent traffic.
    """

    def __init__(
        self,
        name: str = "mock",
        *,
        batch: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.batch = batch
        self.delay = delay

        self._quotes: dict[str, Quote] = {}
        self._search: dict[str, list[SearchResult]] = {}
        self._trending: list[str] = []
        self._failing: dict[str, MarketDataErrorCode] = {}
        self._fail_all: MarketDataErrorCode | None = None
        self._fail_search = False

        self.quote_calls: list[str] = []
        self.batch_calls: list[list[str]] = []
        self.search_calls: list[str] = []

    # --- Pre-load helpers ---

    def set_quote(self, symbol: str, quote: Quote) -> None:
        self._quotes[symbol.upper()] = quote

    def set_search_results(self, query: str, results: list[SearchResult]) -> None:
        self._search[query.strip().lower()] = results

    def set_trending(self, symbols: list[str]) -> None:
        self._trending = list(symbols)

    def fail_symbol(
        self,
        symbol: str,
        code: MarketDataErrorCode = MarketDataErrorCode.PROVIDER_ERROR,
    ) -> None:
        self._failing[symbol.upper()] = code

    def fail_all(self, code: MarketDataErrorCode = MarketDataErrorCode.PROVIDER_ERROR) -> None:
        self._fail_all = code

    def fail_search(self) -> None:
        self._fail_search = True

    # --- Provider implementation ---

    def capabilities(self) -> set[str]:
        caps = {"quotes", "search", "trending"}
        if self.batch:
            caps.add("batch_quotes")
        return caps

    async def get_quote(self, symbol: str) -> Quote:
        key = symbol.upper()
        self.quote_calls.append(key)
        if self.delay:
            await asyncio.sleep(self.delay)
        self._raise_if_failing(key)
        return self._quote_for(key)

    async def get_quotes(self, symbols: list[str]) -> list[Quote]:
        if not self.batch:
            raise NotImplementedError
        keys = [s.upper() for s in symbols]
        self.batch_calls.append(keys)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self._fail_all is not None:
            self._raise_if_failing(",".join(keys))
        return [self._quote_for(k) for k in keys if k not in self._failing]

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        self.search_calls.append(query)
        if self._fail_search:
            raise MarketDataError(
                f"{self.name} search unavailable",
                code=MarketDataErrorCode.PROVIDER_ERROR,
                retryable=True,
                provider=self.name,
            )
        return self._search.get(query.strip().lower(), [])[:limit]

    async def trending(self, limit: int = 8) -> list[str]:
        if not self._trending:
            raise MarketDataError(
                f"{self.name} has no trending list",
                code=MarketDataErrorCode.NO_DATA,
                provider=self.name,
            )
        return self._trending[:limit]

    # --- internals ---

    def _raise_if_failing(self, key: str) -> None:
        code = self._fail_all or self._failing.get(key)
        if code is not None:
            raise MarketDataError(
                f"{self.name} scripted failure for {key}",
                code=code,
                retryable=code != MarketDataErrorCode.AUTH_FAILED,
                provider=self.name,
            )

    def _quote_for(self, key: str) -> Quote:
        if key in self._quotes:
            return self._quotes[key]
        return Quote.from_prices(
            key,
            150.00,
            name=company_name(key),
            sector=sector_for(key),
            previous_close=148.50,
            volume=1_000_000,
            source=self.name,
        )
