"""Exchange-rate client: pair quotes from the Yahoo Finance chart API.

A quote symbol ``AUDUSD=X`` prices one AUD in USD. Rates are fetched per pair,
concurrently, and cached in redis. Pairs that cannot be quoted are left out of
the returned table; the converter raises when a caller actually needs one.
"""

import asyncio
import logging

import httpx

from tripwise.config import settings
from tripwise.services.cache_service import CacheService, cache_service
from tripwise.services.currency_service import RateTable

logger = logging.getLogger(__name__)


class ExchangeRateClient:
    """Adapter for the chart endpoint of the quote source."""

    USER_AGENT = "Mozilla/5.0 (compatible; TripWise/0.1)"

    def __init__(self, cache: CacheService | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self._client: httpx.AsyncClient | None = None
        self._cache = cache or cache_service
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.fx_quote_base_url,
                timeout=settings.fx_timeout_seconds,
                headers={"User-Agent": self.USER_AGENT},
                transport=self._transport,
            )
        return self._client

    async def fetch_pair(self, base: str, symbol: str) -> float | None:
        """Units of ``symbol`` for one ``base``, or None when unavailable."""
        cached = await self._cache.get_fx_rate(base, symbol)
        if cached is not None:
            return cached

        ticker = f"{base}{symbol}=X"
        try:
            client = await self._get_client()
            resp = await client.get(f"/v8/finance/chart/{ticker}")
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Exchange rate lookup failed for {ticker}: {e}")
            return None

        result = (data.get("chart") or {}).get("result") or []
        price = result[0].get("meta", {}).get("regularMarketPrice") if result else None
        if not isinstance(price, (int, float)) or price <= 0:
            logger.warning(f"No usable price in quote response for {ticker}")
            return None

        await self._cache.set_fx_rate(base, symbol, float(price))
        return float(price)

    async def get_rates(self, base: str, symbols: list[str]) -> RateTable:
        base = base.upper()
        targets = sorted({s.strip().upper() for s in symbols if s and s.strip()} - {base})

        quotes = await asyncio.gather(*(self.fetch_pair(base, t) for t in targets))
        rates = {t: q for t, q in zip(targets, quotes) if q is not None}

        missing = [t for t, q in zip(targets, quotes) if q is None]
        if missing:
            logger.warning(f"Rates unavailable for {base} -> {', '.join(missing)}")
        else:
            logger.debug(f"Fetched {len(rates)} rates for base {base}")

        return RateTable(base=base, rates=rates)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


exchange_rate_client = ExchangeRateClient()


def get_rate_provider() -> ExchangeRateClient:
    """FastAPI dependency; tests override it with a static table."""
    return exchange_rate_client
