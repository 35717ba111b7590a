"""Tests for HTTP provider adapters against canned upstream responses."""

from __future__ import annotations

from urllib.parse import unquote

import httpx
import pytest

from papermarket.config import ProviderType
from papermarket.errors import MarketDataError, MarketDataErrorCode
from papermarket.providers import create_provider
from papermarket.providers.finnhub import FinnhubProvider
from papermarket.providers.fmp import FMPProvider
from papermarket.providers.polygon import PolygonProvider
from papermarket.providers.yahoo import YahooProvider

YAHOO_CHART = {
    "chart": {
        "result": [{
            "meta": {
                "symbol": "AAPL",
                "regularMarketPrice": 189.84,
                "previousClose": 187.15,
                "chartPreviousClose": 187.15,
                "regularMarketVolume": 52_000_000,
                "regularMarketDayHigh": 190.32,
                "regularMarketDayLow": 186.9,
                "longName": "Apple Inc.",
            },
            "indicators": {"quote": [{"open": [187.4], "close": [189.84]}]},
        }],
        "error": None,
    }
}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _json(payload, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)
    return handler


class TestYahooQuote:
    @pytest.mark.asyncio
    async def test_parses_chart(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=YAHOO_CHART)

        async with _client(handler) as client:
            q = await YahooProvider(client=client).get_quote("aapl")

        assert seen[0].url.path == "/v8/finance/chart/AAPL"
        assert q.symbol == "AAPL"
        assert q.name == "Apple Inc."
        assert q.price == 189.84
        assert q.change == 2.69
        assert q.change_percent == round(2.69 / 187.15 * 100, 2)
        assert q.previous_close == 187.15
        assert q.volume == 52_000_000
        assert q.high == 190.32 and q.low == 186.9 and q.open == 187.4
        assert q.market_cap is None
        assert q.sector == "Technology"
        assert q.source == "yahoo"

    @pytest.mark.asyncio
    async def test_falls_back_to_close_series(self):
        payload = {"chart": {"result": [{
            "meta": {"symbol": "ZZZZ"},
            "indicators": {"quote": [{"close": [180.0, None, 182.5]}]},
        }]}}
        async with _client(_json(payload)) as client:
            q = await YahooProvider(client=client).get_quote("ZZZZ")
        assert q.price == 182.5
        assert q.previous_close == 180.0
        assert q.change == 2.5
        assert q.name == "ZZZZ Corporation"
        assert q.volume == 0

    @pytest.mark.asyncio
    async def test_null_result_is_invalid(self):
        payload = {"chart": {"result": None, "error": {"code": "Not Found"}}}
        async with _client(_json(payload)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).get_quote("BAD")
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE
        assert exc_info.value.provider == "yahoo"

    @pytest.mark.asyncio
    async def test_missing_price_is_no_data(self):
        payload = {"chart": {"result": [{"meta": {}, "indicators": {"quote": [{}]}}]}}
        async with _client(_json(payload)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).get_quote("BAD")
        assert exc_info.value.code == MarketDataErrorCode.NO_DATA


class TestHTTPErrorMapping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, code",
        [
            (404, MarketDataErrorCode.NOT_FOUND),
            (429, MarketDataErrorCode.RATE_LIMITED),
            (403, MarketDataErrorCode.AUTH_FAILED),
            (401, MarketDataErrorCode.AUTH_FAILED),
            (500, MarketDataErrorCode.PROVIDER_ERROR),
            (503, MarketDataErrorCode.PROVIDER_ERROR),
        ],
    )
    async def test_status_codes(self, status, code):
        async with _client(_json({}, status=status)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).get_quote("AAPL")
        assert exc_info.value.code == code

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        async with _client(handler) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).get_quote("AAPL")
        assert exc_info.value.code == MarketDataErrorCode.TIMEOUT
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        async with _client(handler) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).get_quote("AAPL")
        assert exc_info.value.code == MarketDataErrorCode.PROVIDER_ERROR

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>blocked</html>")

        async with _client(handler) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).get_quote("AAPL")
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE


class TestYahooDiscovery:
    @pytest.mark.asyncio
    async def test_search_keeps_equities_and_etfs(self):
        payload = {"quotes": [
            {"symbol": "AAPL", "longname": "Apple Inc.", "quoteType": "EQUITY",
             "typeDisp": "Equity", "score": 30000},
            {"symbol": "APLE", "shortname": "Apple Hospitality", "quoteType": "EQUITY",
             "score": 15000},
            {"symbol": "AAPL240119C00190000", "quoteType": "OPTION", "score": 100},
        ]}
        async with _client(_json(payload)) as client:
            results = await YahooProvider(client=client).search("apple")

        assert [r.symbol for r in results] == ["AAPL", "APLE"]
        assert results[0].name == "Apple Inc."
        assert results[0].match_score == 1.0
        assert results[1].match_score == 0.5
        assert results[1].type == "Equity"

    @pytest.mark.asyncio
    async def test_trending(self):
        payload = {"finance": {"result": [{"quotes": [{"symbol": "NVDA"}, {"symbol": "TSLA"}]}]}}
        async with _client(_json(payload)) as client:
            assert await YahooProvider(client=client).trending(limit=1) == ["NVDA"]

    @pytest.mark.asyncio
    async def test_non_numeric_search_score_is_invalid(self):
        payload = {"quotes": [{"symbol": "AAPL", "quoteType": "EQUITY", "score": "n/a"}]}
        async with _client(_json(payload)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).search("apple")
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_malformed_chart_meta_is_invalid(self):
        payload = {"chart": {"result": [{"meta": None}]}}
        async with _client(_json(payload)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await YahooProvider(client=client).get_quote("AAPL")
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE


class TestFMP:
    @pytest.mark.asyncio
    async def test_bulk_quote(self):
        seen: list[httpx.Request] = []
        rows = [
            {"symbol": "AAPL", "name": "Apple Inc.", "price": 189.84, "change": 2.69,
             "changesPercentage": 1.44, "previousClose": 187.15, "volume": 52_000_000,
             "marketCap": 2.95e12, "dayHigh": 190.32, "dayLow": 186.9, "open": 187.4},
            {"symbol": "MSFT", "name": "Microsoft Corporation", "price": 417.14,
             "previousClose": 420.56},
            {"symbol": "DEAD", "price": 0},
        ]

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=rows)

        async with _client(handler) as client:
            quotes = await FMPProvider(api_key="k", client=client).get_quotes(["aapl", "msft", "dead"])

        assert unquote(seen[0].url.path) == "/api/v3/quote/AAPL,MSFT,DEAD"
        assert seen[0].url.params["apikey"] == "k"
        assert [q.symbol for q in quotes] == ["AAPL", "MSFT"]
        assert quotes[0].market_cap == 2.95e12
        assert quotes[1].change == -3.42
        assert quotes[1].volume == 0
        assert all(q.source == "fmp" for q in quotes)

    @pytest.mark.asyncio
    async def test_single_quote_missing(self):
        async with _client(_json([])) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await FMPProvider(client=client).get_quote("AAPL")
        assert exc_info.value.code == MarketDataErrorCode.NO_DATA

    @pytest.mark.asyncio
    async def test_error_message_payload(self):
        payload = {"Error Message": "Invalid API KEY."}
        async with _client(_json(payload)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await FMPProvider(client=client).get_quote("AAPL")
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE

    @pytest.mark.parametrize("rows", [[None], [{"symbol": "AAPL", "price": "n/a"}]])
    @pytest.mark.asyncio
    async def test_malformed_rows_are_invalid(self, rows):
        async with _client(_json(rows)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await FMPProvider(client=client).get_quotes(["AAPL", "MSFT"])
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_malformed_search_row_is_invalid(self):
        async with _client(_json(["TSLA"])) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await FMPProvider(client=client).search("tesla")
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_search(self):
        rows = [{"symbol": "TSLA", "name": "Tesla, Inc.", "currency": "USD"}]
        async with _client(_json(rows)) as client:
            results = await FMPProvider(client=client).search("tesla")
        assert results[0].symbol == "TSLA"
        assert results[0].name == "Tesla, Inc."

    def test_default_demo_key(self, monkeypatch):
        monkeypatch.delenv("FMP_API_KEY", raising=False)
        assert FMPProvider(client=httpx.AsyncClient()).api_key == "demo"


class TestFinnhub:
    def test_requires_key(self, monkeypatch):
        monkeypatch.delenv("FINNHUB_API_KEY", raising=False)
        with pytest.raises(MarketDataError) as exc_info:
            FinnhubProvider()
        assert exc_info.value.code == MarketDataErrorCode.AUTH_FAILED

    @pytest.mark.asyncio
    async def test_quote(self):
        payload = {"c": 261.74, "d": 3.29, "dp": 1.27, "h": 263.31, "l": 260.68,
                   "o": 261.07, "pc": 258.45, "t": 1582641000}
        async with _client(_json(payload)) as client:
            q = await FinnhubProvider(api_key="k", client=client).get_quote("aapl")
        assert q.price == 261.74
        assert q.change == 3.29
        assert q.previous_close == 258.45
        assert q.name == "Apple Inc."
        assert q.source == "finnhub"

    @pytest.mark.asyncio
    async def test_unknown_symbol_zero_payload(self):
        payload = {"c": 0, "d": None, "dp": None, "h": 0, "l": 0, "o": 0, "pc": 0, "t": 0}
        async with _client(_json(payload)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await FinnhubProvider(api_key="k", client=client).get_quote("NOPE")
        assert exc_info.value.code == MarketDataErrorCode.NO_DATA

    @pytest.mark.asyncio
    async def test_non_numeric_price_is_invalid(self):
        async with _client(_json({"c": "closed", "pc": 180.0})) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await FinnhubProvider(api_key="k", client=client).get_quote("AAPL")
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE


class TestPolygon:
    SNAP = {
        "ticker": "AAPL",
        "todaysChange": 2.5,
        "day": {"o": 188.5, "h": 191.0, "l": 188.1, "c": 190.0, "v": 48_000_000},
        "prevDay": {"c": 188.0},
        "lastTrade": {"p": 190.5},
    }

    def test_requires_key(self, monkeypatch):
        monkeypatch.delenv("POLYGON_API_KEY", raising=False)
        with pytest.raises(MarketDataError):
            PolygonProvider()

    @pytest.mark.asyncio
    async def test_single_snapshot(self):
        async with _client(_json({"status": "OK", "ticker": self.SNAP})) as client:
            q = await PolygonProvider(api_key="k", client=client).get_quote("AAPL")
        assert q.price == 190.5
        assert q.change == 2.5
        assert q.volume == 48_000_000
        assert q.open == 188.5

    @pytest.mark.asyncio
    async def test_bulk_snapshot(self):
        seen: list[httpx.Request] = []
        other = {"ticker": "KO", "day": {"c": 68.0}, "prevDay": {"c": 67.5}}

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"status": "OK", "tickers": [self.SNAP, other]})

        async with _client(handler) as client:
            quotes = await PolygonProvider(api_key="k", client=client).get_quotes(["aapl", "ko"])
        assert seen[0].url.params["tickers"] == "AAPL,KO"
        assert {q.symbol: q.price for q in quotes} == {"AAPL": 190.5, "KO": 68.0}

    @pytest.mark.asyncio
    async def test_malformed_bulk_entry_is_invalid(self):
        payload = {"status": "OK", "tickers": [self.SNAP, None]}
        async with _client(_json(payload)) as client:
            with pytest.raises(MarketDataError) as exc_info:
                await PolygonProvider(api_key="k", client=client).get_quotes(["AAPL", "KO"])
        assert exc_info.value.code == MarketDataErrorCode.INVALID_RESPONSE


class TestRegistry:
    def test_create_mock(self):
        provider = create_provider(ProviderType.MOCK)
        assert provider.name == "mock"
        assert "quotes" in provider.capabilities()

    def test_create_yahoo(self):
        provider = create_provider(ProviderType.YAHOO, client=httpx.AsyncClient())
        assert isinstance(provider, YahooProvider)
        assert provider.capabilities() == {"quotes", "search", "trending"}
