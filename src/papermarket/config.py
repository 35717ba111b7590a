"""Gateway configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ProviderType(Enum):
    """Supported quote provider backends."""

    YAHOO = "yahoo"
    FMP = "fmp"
    FINNHUB = "finnhub"
    POLYGON = "polygon"
    MOCK = "mock"


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass
class GatewayConfig:
    """Configuration for MarketDataGateway.

    Attributes:
        providers: Provider backends ordered by priority. An empty list
            runs the gateway in pure fallback mode.
        cache_backend: Cache type, "memory" or "none".
        cache_ttl_seconds: How long a fetched quote is served from cache.
        http_timeout: Per-request HTTP timeout handed to httpx.
        provider_timeout: Upper bound for one provider attempt, including
            parsing. A stalled provider is treated as a failed one.
        validate: Whether to run quality checks on provider quotes.
        prefer_batch: Use bulk-capable providers for multi-symbol requests.
        single_flight: Share one in-flight resolution between concurrent
            callers asking for the same uncached symbol.
        default_page_size: Results returned for an empty search query.
        search_page_size: Maximum results for a non-empty search query.
        market_open_hour: First local hour the market counts as open.
        market_close_hour: Local hour the market closes (exclusive).
        fmp_api_key: Financial Modeling Prep key ("demo" works for a few
            tickers).
        finnhub_api_key: Finnhub.io API key.
        polygon_api_key: Polygon.io API key.
        user_agent: User-Agent header sent to upstream providers.
    """

    providers: list[ProviderType] = field(
        default_factory=lambda: [ProviderType.YAHOO, ProviderType.FMP]
    )
    cache_backend: str = "memory"
    cache_ttl_seconds: float = 60
    http_timeout: float = 5.0
    provider_timeout: float = 8.0
    validate: bool = True
    prefer_batch: bool = True
    single_flight: bool = True

    default_page_size: int = 12
    search_page_size: int = 10

    market_open_hour: int = 9
    market_close_hour: int = 16

    fmp_api_key: str = "demo"
    finnhub_api_key: str | None = None
    polygon_api_key: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
