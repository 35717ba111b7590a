"""Quote provider registry."""

from __future__ import annotations

import importlib
from typing import Any

from papermarket.config import ProviderType
from papermarket.providers.base import BaseQuoteProvider, HTTPQuoteProvider

# Lazy registry: provider modules are imported on demand.
PROVIDER_CLASSES: dict[ProviderType, str] = {
    ProviderType.YAHOO: "papermarket.providers.yahoo.YahooProvider",
    ProviderType.FMP: "papermarket.providers.fmp.FMPProvider",
    ProviderType.FINNHUB: "papermarket.providers.finnhub.FinnhubProvider",
    ProviderType.POLYGON: "papermarket.providers.polygon.PolygonProvider",
    ProviderType.MOCK: "papermarket.providers.mock.MockProvider",
}


def create_provider(
    provider_type: ProviderType,
    **kwargs: Any,
) -> BaseQuoteProvider:
    """Instantiate a provider by type, forwarding kwargs to its constructor."""
    dotted = PROVIDER_CLASSES[provider_type]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BaseQuoteProvider", "HTTPQuoteProvider", "PROVIDER_CLASSES", "create_provider"]
