"""Shared exchange-rate cache with single-flight refresh."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ..errors import NetworkFailure

logger = logging.getLogger(__name__)

RateFetcher = Callable[[str], Awaitable[dict[str, float]]]


@dataclass(frozen=True)
class ExchangeRateCache:
    base_currency: str
    rates: dict[str, float]
    fetched_at: float
    ttl: float
    from_fallback: bool = False

    def is_stale(self, now: float) -> bool:
        return now - self.fetched_at > self.ttl

    def within_grace(self, now: float, grace: float) -> bool:
        return now - self.fetched_at <= self.ttl + grace

    def rate(self, code: str) -> Optional[float]:
        code = code.upper()
        if code == self.base_currency:
            return 1.0
        return self.rates.get(code)


class ExchangeRateStore:
    """Owns the single ExchangeRateCache shared by all queries.

    A stale cache triggers at most one in-flight refresh; concurrent callers
    await the same task. When a refresh fails, the previous cache is served
    (flagged as a fallback) while it is within ttl + grace.
    """

    def __init__(
        self,
        fetch: RateFetcher,
        *,
        base_currency: str = "USD",
        ttl_seconds: float = 3600,
        grace_seconds: float = 86400,
        cache_file: Optional[str | Path] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._fetch = fetch
        self.base_currency = base_currency.upper()
        self.ttl_seconds = ttl_seconds
        self.grace_seconds = grace_seconds
        self.cache_file = Path(cache_file).expanduser() if cache_file else None
        self._clock = clock
        self._lock = asyncio.Lock()
        self._refresh_task: Optional[asyncio.Task] = None
        self._cache: Optional[ExchangeRateCache] = self._load()

    @property
    def cache(self) -> Optional[ExchangeRateCache]:
        return self._cache

    async def get_rates(self) -> ExchangeRateCache:
        """Return usable rates, refreshing when the cache is stale.

        Raises:
            NetworkFailure: If the refresh fails and no cache within the
                grace window exists
        """
        cache = self._cache
        if cache is not None and not cache.is_stale(self._clock()):
            return cache

        async with self._lock:
            cache = self._cache
            if cache is not None and not cache.is_stale(self._clock()):
                return cache
            if self._refresh_task is None or self._refresh_task.done():
                self._refresh_task = asyncio.create_task(self._refresh())
                self._refresh_task.add_done_callback(_consume_exception)
            task = self._refresh_task

        # A cancelled query must not cancel the refresh other queries await.
        return await asyncio.shield(task)

    async def _refresh(self) -> ExchangeRateCache:
        previous = self._cache
        try:
            rates = await self._fetch(self.base_currency)
        except NetworkFailure as e:
            now = self._clock()
            if previous is not None and previous.within_grace(now, self.grace_seconds):
                logger.warning(f"Exchange-rate refresh failed, serving cached rates: {e}")
                return replace(previous, from_fallback=True)
            logger.warning(f"Exchange-rate refresh failed with no usable cache: {e}")
            raise

        cache = ExchangeRateCache(
            base_currency=self.base_currency,
            rates=dict(rates),
            fetched_at=self._clock(),
            ttl=self.ttl_seconds,
        )
        self._cache = cache
        self._save(cache)
        return cache

    def _load(self) -> Optional[ExchangeRateCache]:
        if self.cache_file is None or not self.cache_file.exists():
            return None
        try:
            data = json.loads(self.cache_file.read_text(encoding="utf-8"))
            if str(data["base_currency"]).upper() != self.base_currency:
                return None
            return ExchangeRateCache(
                base_currency=self.base_currency,
                rates={
                    str(k).upper(): float(v)
                    for k, v in data["rates"].items()
                    if float(v) > 0
                },
                fetched_at=float(data["fetched_at"]),
                ttl=self.ttl_seconds,
            )
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.debug(f"Ignoring unreadable rate cache {self.cache_file}: {e}")
            return None

    def _save(self, cache: ExchangeRateCache) -> None:
        if self.cache_file is None:
            return
        payload = {
            "base_currency": cache.base_currency,
            "rates": cache.rates,
            "fetched_at": cache.fetched_at,
        }
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.debug(f"Could not write rate cache {self.cache_file}: {e}")


def _consume_exception(task: asyncio.Task) -> None:
    # Marks the failure retrieved when every awaiting caller was cancelled.
    if not task.cancelled():
        task.exception()
