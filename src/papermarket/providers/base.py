"""Abstract base classes for quote providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from papermarket.config import DEFAULT_USER_AGENT
from papermarket.errors import MarketDataError, MarketDataErrorCode
from papermarket.models.quote import Quote
from papermarket.models.search_result import SearchResult

# Malformed upstream payloads surface as one of these while parsing.
PARSE_ERRORS = (AttributeError, KeyError, IndexError, TypeError, ValueError)


class BaseQuoteProvider(ABC):
    """Abstract base for all quote providers.

    Subclasses must implement ``get_quote``. All other methods default to
    ``NotImplementedError`` — providers implement only the endpoints they
    support and advertise them via ``capabilities()``.

    Every failure is raised as :class:`MarketDataError`; the gateway treats
    it as a signal to try the next provider.
    """

    name = "base"

    # --- Quotes (required) ---

    @abstractmethod
    async def get_quote(self, symbol: str) -> Quote:
        """Fetch and normalize the current quote for one symbol."""
        ...

    async def get_quotes(self, symbols: list[str]) -> list[Quote]:
        """Fetch several symbols in one upstream call.

        May return fewer quotes than requested; missing symbols are left to
        the per-symbol chain.
        """
        raise NotImplementedError

    # --- Discovery ---

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Search symbols by free text."""
        raise NotImplementedError

    async def trending(self, limit: int = 8) -> list[str]:
        """Currently trending symbols, most popular first."""
        raise NotImplementedError

    # --- Capabilities ---

    def capabilities(self) -> set[str]:
        """Return the set of supported features.

        Possible values: ``quotes``, ``batch_quotes``, ``search``,
        ``trending``.
        """
        return {"quotes"}

    async def aclose(self) -> None:
        """Release network resources owned by the provider."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class HTTPQuoteProvider(BaseQuoteProvider):
    """Base for providers backed by a JSON-over-HTTPS endpoint.

    A shared ``httpx.AsyncClient`` may be injected; otherwise the provider
    owns one and closes it in :meth:`aclose`.
    """

    base_url = ""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    # ------------------------------------------------------------ internals

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        try:
            resp = await self.client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise self._error(
                f"{self.name} request timed out: {exc}",
                MarketDataErrorCode.TIMEOUT,
                retryable=True,
            ) from exc
        except httpx.HTTPError as exc:
            raise self._error(
                f"{self.name} request failed: {exc}",
                MarketDataErrorCode.PROVIDER_ERROR,
                retryable=True,
            ) from exc

        self._check_response(resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise self._error(
                f"{self.name} returned a non-JSON body",
                MarketDataErrorCode.INVALID_RESPONSE,
                retryable=True,
            ) from exc

    def _check_response(self, resp: httpx.Response) -> None:
        if resp.status_code == 429:
            raise self._error(
                f"{self.name} rate limited",
                MarketDataErrorCode.RATE_LIMITED,
                retryable=True,
            )
        if resp.status_code in (401, 403):
            raise self._error(
                f"{self.name} authentication failed",
                MarketDataErrorCode.AUTH_FAILED,
            )
        if resp.status_code == 404:
            raise self._error(
                f"Symbol not found on {self.name}",
                MarketDataErrorCode.NOT_FOUND,
            )
        if not resp.is_success:
            raise self._error(
                f"{self.name} returned HTTP {resp.status_code}",
                MarketDataErrorCode.PROVIDER_ERROR,
                retryable=True,
            )

    def _error(
        self,
        message: str,
        code: MarketDataErrorCode,
        retryable: bool = False,
    ) -> MarketDataError:
        return MarketDataError(message, code=code, retryable=retryable, provider=self.name)

    def _invalid(self, symbol: str, exc: Exception) -> MarketDataError:
        return self._error(
            f"{self.name} response for {symbol} could not be parsed: {exc!r}",
            MarketDataErrorCode.INVALID_RESPONSE,
            retryable=True,
        )

    def _no_price(self, symbol: str) -> MarketDataError:
        return self._error(
            f"{self.name} has no price for {symbol}",
            MarketDataErrorCode.NO_DATA,
        )
