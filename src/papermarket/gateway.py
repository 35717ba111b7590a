"""MarketDataGateway — central orchestrator with cache + provider fallback."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, TypeVar

import httpx

from papermarket import calendar, reference
from papermarket.cache import MemoryQuoteCache, NoCache, QuoteCache
from papermarket.config import GatewayConfig, ProviderType
from papermarket.errors import MarketDataError, MarketDataErrorCode
from papermarket.fallback import FallbackSynthesizer
from papermarket.models.quote import Quote
from papermarket.models.reference_stock import ReferenceStock
from papermarket.models.search_result import SearchResult
from papermarket.providers import create_provider
from papermarket.providers.base import BaseQuoteProvider
from papermarket.quality import validate_quote

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MarketDataGateway:
    """Central orchestrator: cache -> provider chain -> validate -> fallback.

    Every quote operation resolves; provider failures are logged and turned
    into "try the next provider", and total exhaustion into a synthesized
    quote. Callers never need a try/except around the gateway.

    Usage::

        from papermarket import create_gateway_from_env
        async with create_gateway_from_env() as gw:
            quote = await gw.get_quote("aapl")
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        *,
        providers: list[BaseQuoteProvider] | None = None,
        cache: QuoteCache | None = None,
        synthesizer: FallbackSynthesizer | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or GatewayConfig()
        self._owns_client = False
        self.client = client

        # Build provider chain
        if providers is not None:
            self.providers = list(providers)
        else:
            if self.client is None and self.config.providers:
                self.client = httpx.AsyncClient(
                    timeout=self.config.http_timeout,
                    headers={"User-Agent": self.config.user_agent, "Accept": "application/json"},
                )
                self._owns_client = True
            self.providers = []
            for pt in self.config.providers:
                provider = self._build_provider(pt)
                if provider is not None:
                    self.providers.append(provider)

        # Build cache
        if cache is not None:
            self.cache = cache
        elif self.config.cache_backend == "memory":
            self.cache = MemoryQuoteCache(ttl_seconds=self.config.cache_ttl_seconds)
        elif self.config.cache_backend == "none":
            self.cache = NoCache()
        else:
            raise ValueError(f"Unknown cache backend: {self.config.cache_backend!r}")

        self.synthesizer = synthesizer or FallbackSynthesizer()
        self._disabled: set[int] = set()
        self._inflight: dict[str, asyncio.Future[Quote]] = {}

    def _build_provider(self, pt: ProviderType) -> BaseQuoteProvider | None:
        kwargs: dict[str, Any] = {}
        if pt is not ProviderType.MOCK:
            kwargs["client"] = self.client
        if pt is ProviderType.FMP:
            kwargs["api_key"] = self.config.fmp_api_key
        elif pt is ProviderType.FINNHUB:
            kwargs["api_key"] = self.config.finnhub_api_key
        elif pt is ProviderType.POLYGON:
            kwargs["api_key"] = self.config.polygon_api_key
        try:
            return create_provider(pt, **kwargs)
        except MarketDataError as e:
            logger.error("Skipping provider %s: %s", pt.value, e)
            return None

    # ------------------------------------------------------------ lifecycle

    async def aclose(self) -> None:
        for provider in self.providers:
            await provider.aclose()
        if self._owns_client and self.client is not None:
            await self.client.aclose()

    async def __aenter__(self) -> MarketDataGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --------------------------------------------------------------- quotes

    async def get_quote(self, symbol: str) -> Quote:
        """Get a quote: fresh cache entry, else provider chain, else fallback.

        Blank symbols skip the providers and get a fallback quote keyed by
        the empty string.
        """
        key = _normalize(symbol)

        cached = self.cache.get_fresh(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        if not self.config.single_flight:
            return await self._resolve(key)

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._resolve(key))
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        # Shielded: a caller giving up must not abort the shared resolution,
        # which still lands in the cache.
        return await asyncio.shield(task)

    async def get_multiple_quotes(self, symbols: list[str]) -> list[Quote]:
        """Get quotes for many symbols, in input order.

        Uncached symbols go through bulk-capable providers first; whatever a
        bulk call does not cover is resolved per symbol, concurrently.
        """
        keys = [_normalize(s) for s in symbols]
        prefilled: dict[str, Quote] = {}
        if self.config.prefer_batch:
            prefilled = await self._fetch_batch(keys)

        async def _one(key: str) -> Quote:
            quote = prefilled.get(key)
            if quote is not None:
                return quote
            return await self.get_quote(key)

        return list(await asyncio.gather(*(_one(k) for k in keys)))

    async def get_trending_stocks(self, limit: int = 8) -> list[Quote]:
        """Quotes for trending symbols, or the featured list if none is known."""
        symbols: list[str] = []
        for provider in self._active("trending"):
            found = await self._attempt(provider, provider.trending(limit), "trending")
            if found:
                symbols = found
                break
        if not symbols:
            symbols = list(reference.TRENDING_SYMBOLS)
        return await self.get_multiple_quotes(symbols[:limit])

    async def get_stocks_by_sector(self, sector: str) -> list[Quote]:
        symbols = [s.symbol for s in reference.stocks_in_sector(sector)]
        return await self.get_multiple_quotes(symbols)

    # --------------------------------------------------------------- search

    async def search_stocks(self, query: str) -> list[SearchResult]:
        """Search upstream, falling back to the reference universe.

        A blank query returns the default page of featured stocks.
        """
        q = (query or "").strip()
        if not q:
            return reference.search_reference("", limit=self.config.default_page_size)

        limit = self.config.search_page_size
        for provider in self._active("search"):
            results = await self._attempt(provider, provider.search(q, limit), q)
            if results:
                return results[:limit]
            if results is not None:
                logger.info("%s found nothing for %r", provider.name, q)

        return reference.search_reference(q, limit=limit)

    # ----------------------------------------------------- reference / time

    def get_stock_description(self, symbol: str) -> str:
        return reference.describe(symbol)

    def get_all_stocks(self) -> list[ReferenceStock]:
        return list(reference.REFERENCE_STOCKS)

    def is_market_open(self, now: datetime | None = None) -> bool:
        return calendar.is_market_open(
            now, self.config.market_open_hour, self.config.market_close_hour,
        )

    def refresh_interval(self, now: datetime | None = None) -> int:
        """Polling interval callers should use, in seconds."""
        return calendar.refresh_interval(
            now, self.config.market_open_hour, self.config.market_close_hour,
        )

    # --------------------------------------------------------------- cache

    def clear_cache(self, symbol: str) -> None:
        self.cache.clear(_normalize(symbol))

    def clear_all_cache(self) -> None:
        self.cache.clear_all()

    # ------------------------------------------------------------ internal

    async def _resolve(self, key: str) -> Quote:
        quote = await self._from_providers(key) if key else None
        if quote is None:
            quote = self.synthesizer.synthesize(key)
        self.cache.put(key, quote)
        return quote

    async def _from_providers(self, key: str) -> Quote | None:
        """Try providers in order; first usable quote wins."""
        for provider in self._active("quotes"):
            quote = await self._attempt(provider, provider.get_quote(key), key)
            if quote is not None and self._usable(provider, quote):
                return quote
        return None

    async def _fetch_batch(self, keys: list[str]) -> dict[str, Quote]:
        pending = [k for k in dict.fromkeys(keys) if k and not self.cache.is_valid(k)]
        found: dict[str, Quote] = {}
        if len(pending) < 2:
            return found

        for provider in self._active("batch_quotes"):
            quotes = await self._attempt(provider, provider.get_quotes(pending), ",".join(pending))
            for quote in quotes or []:
                if quote.symbol in pending and self._usable(provider, quote):
                    self.cache.put(quote.symbol, quote)
                    found[quote.symbol] = quote
            pending = [k for k in pending if k not in found]
            if not pending:
                break
        return found

    async def _attempt(
        self,
        provider: BaseQuoteProvider,
        call: Awaitable[T],
        subject: str,
    ) -> T | None:
        """Run one provider call; any failure becomes None."""
        try:
            return await asyncio.wait_for(call, timeout=self.config.provider_timeout)
        except asyncio.TimeoutError:
            logger.warning("%s timed out for %s", provider.name, subject)
        except MarketDataError as e:
            if e.code == MarketDataErrorCode.AUTH_FAILED:
                self._disabled.add(id(provider))
                logger.error("Disabling provider %s: %s", provider.name, e)
            else:
                logger.warning(
                    "%s failed for %s (%s, retryable=%s): %s",
                    provider.name, subject, e.code.value, e.retryable, e,
                )
        except NotImplementedError:
            pass
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "%s raised unexpectedly for %s: %r", provider.name, subject, e,
            )
        return None

    def _usable(self, provider: BaseQuoteProvider, quote: Quote) -> bool:
        if not self.config.validate:
            return True
        result = validate_quote(quote)
        if not result.passed:
            msgs = "; ".join(c.message for c in result.failed_checks)
            logger.warning(
                "%s quote for %s failed validation: %s", provider.name, quote.symbol, msgs,
            )
        return result.passed

    def _active(self, capability: str) -> list[BaseQuoteProvider]:
        return [
            p for p in self.providers
            if capability in p.capabilities() and id(p) not in self._disabled
        ]

    def _forget(self, key: str, done: asyncio.Future[Quote]) -> None:
        if self._inflight.get(key) is done:
            del self._inflight[key]


def _normalize(symbol: str | None) -> str:
    return (symbol or "").strip().upper()
