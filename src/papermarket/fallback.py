"""Fallback synthesizer — plausible quotes when every provider is down."""

from __future__ import annotations

import logging
import random

from papermarket.models.quote import Quote
from papermarket.reference import BASE_PRICES, company_name, sector_for

logger = logging.getLogger(__name__)

SOURCE = "fallback"


class FallbackSynthesizer:
    """Generate a self-consistent Quote without any network access.

    Featured symbols are anchored on a recent real-world close and move a
    little; anything else gets a price in a broad, believable range. Values
    are random per call, so treat them as approximate.
    """

    anchored_move_pct = 2.5
    unknown_move_pct = 3.0
    unknown_price_range = (20.0, 320.0)
    volume_range = (1_000_000, 50_000_000)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def synthesize(self, symbol: str) -> Quote:
        key = symbol.strip().upper()
        rng = self._rng

        anchor = BASE_PRICES.get(key)
        if anchor is not None:
            previous_close = anchor
            move_pct = rng.uniform(-self.anchored_move_pct, self.anchored_move_pct)
        else:
            previous_close = rng.uniform(*self.unknown_price_range)
            move_pct = rng.uniform(-self.unknown_move_pct, self.unknown_move_pct)

        price = max(previous_close * (1 + move_pct / 100), 0.01)
        open_ = previous_close * (1 + rng.uniform(-0.5, 0.5) / 100)
        high = max(price, open_) * (1 + rng.uniform(0, 0.8) / 100)
        low = min(price, open_) * (1 - rng.uniform(0, 0.8) / 100)

        logger.info("Synthesizing fallback quote for %s", key or "<blank>")
        return Quote.from_prices(
            key,
            price,
            name=company_name(key),
            sector=sector_for(key),
            previous_close=previous_close,
            volume=rng.randint(*self.volume_range),
            high=high,
            low=low,
            open=open_,
            source=SOURCE,
        )
