"""papermarket — stock-quote gateway for paper-trading apps.

Multi-provider (Yahoo Finance, Financial Modeling Prep, Finnhub, Polygon),
ordered fallback, TTL caching, and synthetic quotes when every upstream is
unreachable, so a quote request always resolves.

Quick start::

    from papermarket import create_gateway_from_env
    gw = create_gateway_from_env()
    quote = await gw.get_quote("AAPL")
"""

from __future__ import annotations

import os

from papermarket.cache import CacheEntry, MemoryQuoteCache, NoCache, QuoteCache
from papermarket.calendar import is_market_open, refresh_interval
from papermarket.config import GatewayConfig, ProviderType
from papermarket.errors import MarketDataError, MarketDataErrorCode
from papermarket.fallback import FallbackSynthesizer
from papermarket.gateway import MarketDataGateway
from papermarket.models.quote import Quote
from papermarket.models.reference_stock import ReferenceStock
from papermarket.models.search_result import SearchResult
from papermarket.reference import REFERENCE_STOCKS, TRENDING_SYMBOLS

__version__ = "0.1.0"

__all__ = [
    # Gateway
    "MarketDataGateway",
    "create_gateway_from_env",
    # Config
    "GatewayConfig",
    "ProviderType",
    # Cache
    "QuoteCache",
    "MemoryQuoteCache",
    "NoCache",
    "CacheEntry",
    # Fallback
    "FallbackSynthesizer",
    # Errors
    "MarketDataError",
    "MarketDataErrorCode",
    # Models
    "Quote",
    "SearchResult",
    "ReferenceStock",
    # Reference data and market hours
    "REFERENCE_STOCKS",
    "TRENDING_SYMBOLS",
    "is_market_open",
    "refresh_interval",
]


def create_gateway_from_env() -> MarketDataGateway:
    """Zero-config factory — reads provider list and API keys from env vars.

    Environment variables:
        PAPERMARKET_PROVIDERS: Comma-separated provider list (default:
            "yahoo,fmp"). Set to an empty string for pure fallback mode.
        PAPERMARKET_CACHE: Cache backend — "memory" or "none" (default: "memory").
        PAPERMARKET_CACHE_TTL: Cache window in seconds (default: 60).
        PAPERMARKET_HTTP_TIMEOUT: Per-request timeout in seconds (default: 5).
        PAPERMARKET_MARKET_HOURS: Local open-close hours (default: "9-16").
        FMP_API_KEY: Financial Modeling Prep API key (default: "demo").
        FINNHUB_API_KEY: Finnhub API key.
        POLYGON_API_KEY: Polygon.io API key.
    """
    provider_str = os.getenv("PAPERMARKET_PROVIDERS", "yahoo,fmp")
    provider_types = [
        ProviderType(name.strip().lower())
        for name in provider_str.split(",")
        if name.strip()
    ]

    hours = os.getenv("PAPERMARKET_MARKET_HOURS", "9-16")
    open_hour, _, close_hour = hours.partition("-")

    config = GatewayConfig(
        providers=provider_types,
        cache_backend=os.getenv("PAPERMARKET_CACHE", "memory"),
        cache_ttl_seconds=float(os.getenv("PAPERMARKET_CACHE_TTL", "60")),
        http_timeout=float(os.getenv("PAPERMARKET_HTTP_TIMEOUT", "5")),
        market_open_hour=int(open_hour),
        market_close_hour=int(close_hour or 16),
        fmp_api_key=os.getenv("FMP_API_KEY") or "demo",
        finnhub_api_key=os.getenv("FINNHUB_API_KEY"),
        polygon_api_key=os.getenv("POLYGON_API_KEY"),
    )

    return MarketDataGateway(config)
