"""Tests for the quote-source client using a mocked HTTP transport."""

import httpx
import pytest

from tripwise.services.cache_service import CacheService
from tripwise.services.exchange_rate_client import ExchangeRateClient


def chart(price):
    return {"chart": {"result": [{"meta": {"regularMarketPrice": price}}], "error": None}}


class MemoryCache(CacheService):
    """In-process stand-in for redis."""

    def __init__(self):
        super().__init__()
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ttl=None):
        self.store[key] = value
        return True


def make_client(prices: dict[str, object], cache=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        ticker = request.url.path.rsplit("/", 1)[-1]
        if seen is not None:
            seen.append(ticker)
        if ticker not in prices:
            return httpx.Response(404, json={"chart": {"result": None}})
        return httpx.Response(200, json=chart(prices[ticker]))

    return ExchangeRateClient(cache=cache or CacheService(), transport=httpx.MockTransport(handler))


async def test_get_rates_builds_table():
    client = make_client({"USDEUR=X": 0.92, "USDJPY=X": 151.2})
    table = await client.get_rates("usd", ["EUR", "jpy", "EUR", "USD"])
    await client.close()

    assert table.base == "USD"
    assert float(table.rates["EUR"]) == pytest.approx(0.92)
    assert float(table.rates["JPY"]) == pytest.approx(151.2)


async def test_unavailable_pairs_are_left_out():
    client = make_client({"USDEUR=X": 0.92, "USDXXX=X": 0, "USDBAD=X": "n/a"})
    table = await client.get_rates("USD", ["EUR", "XXX", "BAD", "GBP"])
    await client.close()

    assert table.has("EUR")
    assert not table.has("XXX")
    assert not table.has("BAD")
    assert not table.has("GBP")


async def test_quotes_are_served_from_cache():
    seen = []
    cache = MemoryCache()
    client = make_client({"AUDUSD=X": 0.66}, cache=cache, seen=seen)

    first = await client.fetch_pair("AUD", "USD")
    second = await client.fetch_pair("AUD", "USD")
    await client.close()

    assert first == second == pytest.approx(0.66)
    assert seen == ["AUDUSD=X"]
    assert cache.store[CacheService.fx_key("aud", "usd")] == pytest.approx(0.66)


async def test_transport_errors_yield_none():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    client = ExchangeRateClient(cache=CacheService(), transport=httpx.MockTransport(handler))
    assert await client.fetch_pair("USD", "EUR") is None
    await client.close()
