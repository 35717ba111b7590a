"""Shared fixtures for papermarket tests."""

from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from papermarket.cache import MemoryQuoteCache
from papermarket.config import GatewayConfig
from papermarket.fallback import FallbackSynthesizer
from papermarket.gateway import MarketDataGateway
from papermarket.models.quote import Quote
from papermarket.providers.mock import MockProvider


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def sample_quote() -> Quote:
    return Quote.from_prices(
        "AAPL",
        189.84,
        name="Apple Inc.",
        sector="Technology",
        previous_close=187.15,
        volume=52_000_000,
        market_cap=2_950_000_000_000,
        high=190.32,
        low=186.90,
        open=187.40,
        source="yahoo",
    )


@pytest.fixture
def make_gateway(clock):
    """Build a gateway over explicit providers with a fake-clock cache."""

    def _make(*providers, **config_overrides) -> MarketDataGateway:
        config = GatewayConfig(providers=[], **config_overrides)
        return MarketDataGateway(
            config,
            providers=list(providers),
            cache=MemoryQuoteCache(ttl_seconds=config.cache_ttl_seconds, clock=clock),
            synthesizer=FallbackSynthesizer(random.Random(7)),
        )

    return _make
