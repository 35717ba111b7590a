"""Quote cache backends — Memory (TTL) and a no-op cache."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from papermarket.models.quote import Quote


@dataclass(frozen=True)
class CacheEntry:
    """A quote together with the clock reading at which it was stored."""

    quote: Quote
    timestamp: float


class QuoteCache(ABC):
    """Abstract quote cache interface, keyed by uppercase symbol."""

    @abstractmethod
    def get(self, symbol: str) -> CacheEntry | None:
        """Return the stored entry (fresh or stale), or None on miss."""
        ...

    @abstractmethod
    def put(self, symbol: str, quote: Quote) -> None:
        """Store a quote, replacing any previous entry for the symbol."""
        ...

    @abstractmethod
    def is_valid(self, symbol: str) -> bool:
        """Whether a fresh entry exists for the symbol."""
        ...

    @abstractmethod
    def clear(self, symbol: str) -> None:
        ...

    @abstractmethod
    def clear_all(self) -> None:
        ...

    def get_fresh(self, symbol: str) -> Quote | None:
        """Return the cached quote only while it is still valid."""
        if not self.is_valid(symbol):
            return None
        entry = self.get(symbol)
        return entry.quote if entry else None


class NoCache(QuoteCache):
    """No-op cache — always misses."""

    def get(self, symbol):  # type: ignore[override]
        return None

    def put(self, symbol, quote):  # type: ignore[override]
        pass

    def is_valid(self, symbol):  # type: ignore[override]
        return False

    def clear(self, symbol):  # type: ignore[override]
        pass

    def clear_all(self):
        pass


class MemoryQuoteCache(QuoteCache):
    """In-process TTL cache, one entry per symbol, last write wins.

    Entries are never evicted; staleness alone decides reuse. The symbol
    universe is small enough that unbounded growth is not a concern.
    """

    def __init__(
        self,
        ttl_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl_seconds
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}

    @staticmethod
    def _key(symbol: str) -> str:
        return symbol.strip().upper()

    def get(self, symbol: str) -> CacheEntry | None:
        return self._store.get(self._key(symbol))

    def put(self, symbol: str, quote: Quote) -> None:
        self._store[self._key(symbol)] = CacheEntry(quote=quote, timestamp=self._clock())

    def is_valid(self, symbol: str) -> bool:
        entry = self._store.get(self._key(symbol))
        if entry is None:
            return False
        return self._clock() - entry.timestamp < self.ttl

    def clear(self, symbol: str) -> None:
        self._store.pop(self._key(symbol), None)

    def clear_all(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
