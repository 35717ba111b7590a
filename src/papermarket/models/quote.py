"""Normalized stock quote model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Quote:
    """Price/volume snapshot for one ticker, identical for every provider.

    Build instances through :meth:`from_prices` so that ``change`` and
    ``change_percent`` always agree with ``price`` and the previous close.

    Attributes:
        symbol: Uppercase ticker symbol.
        name: Display name.
        price: Current price, 2 decimals.
        change: Absolute move from the previous close, 2 decimals.
        change_percent: ``change / previous_close * 100``, 2 decimals.
        volume: Shares traded.
        sector: Categorical sector label.
        market_cap: Market capitalization in USD, when the provider has it.
        high: Day high.
        low: Day low.
        open: Day open.
        previous_close: Prior session close.
        source: Provider that produced the quote ("fallback" if synthesized).
    """

    symbol: str
    name: str
    price: float
    change: float
    change_percent: float
    volume: int = 0
    sector: str = "Technology"
    market_cap: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    previous_close: float | None = None
    source: str = ""

    @classmethod
    def from_prices(
        cls,
        symbol: str,
        price: float,
        *,
        name: str,
        sector: str,
        previous_close: float | None = None,
        change: float | None = None,
        volume: float | None = None,
        market_cap: float | None = None,
        high: float | None = None,
        low: float | None = None,
        open: float | None = None,
        source: str = "",
    ) -> Quote:
        """Normalize raw provider numbers into a Quote.

        A known previous close always wins over a provider-reported change;
        with neither, the quote is flat.
        """
        price = round(float(price), 2)
        prev: float | None = None
        if previous_close is not None:
            prev = round(float(previous_close), 2)
            delta = round(price - prev, 2)
        elif change is not None:
            delta = round(float(change), 2)
        else:
            delta = 0.0

        base = price - delta
        pct = round(delta / base * 100, 2) if base else 0.0

        return cls(
            symbol=symbol.upper(),
            name=name,
            price=price,
            change=delta,
            change_percent=pct,
            volume=int(volume or 0),
            sector=sector,
            market_cap=float(market_cap) if market_cap else None,
            high=_round_opt(high),
            low=_round_opt(low),
            open=_round_opt(open),
            previous_close=prev,
            source=source,
        )

    @property
    def implied_previous_close(self) -> float:
        """Previous close implied by price and change."""
        return round(self.price - self.change, 2)

    @property
    def is_synthetic(self) -> bool:
        return self.source == "fallback"

    def to_dict(self) -> dict[str, Any]:
        """Wire shape consumed by the UI layer (camelCase keys)."""
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "volume": self.volume,
            "marketCap": self.market_cap,
            "sector": self.sector,
            "high": self.high,
            "low": self.low,
            "open": self.open,
            "previousClose": self.previous_close,
            "source": self.source,
        }


def _round_opt(value: float | None) -> float | None:
    if value is None:
        return None
    return round(float(value), 2)
