"""Tests for the exchange-rate store and currency conversion."""

import asyncio
import json

import pytest

from quicklaunch.errors import ConfigurationMissing, NetworkFailure, ParseFailure
from quicklaunch.interpreters.currency import CurrencyConverter, format_currency
from quicklaunch.interpreters.units import parse_phrase
from quicklaunch.rates.store import ExchangeRateStore

RATES = {"EUR": 0.5, "GBP": 0.25, "JPY": 150.0}


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class FakeFetcher:
    """Async fetcher that counts calls and can be switched to fail."""

    def __init__(self, rates=None, delay=0.01):
        self.rates = dict(rates or RATES)
        self.delay = delay
        self.calls = 0
        self.fail = False

    async def __call__(self, base):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.fail:
            raise NetworkFailure("offline")
        return dict(self.rates)


def _store(fetcher, clock, **kwargs):
    return ExchangeRateStore(fetcher, ttl_seconds=60, grace_seconds=600, clock=clock, **kwargs)


@pytest.mark.asyncio
async def test_fresh_cache_is_reused():
    fetcher = FakeFetcher()
    store = _store(fetcher, FakeClock())

    await store.get_rates()
    await store.get_rates()

    assert fetcher.calls == 1


@pytest.mark.asyncio
async def test_concurrent_stale_queries_share_one_fetch():
    fetcher = FakeFetcher()
    store = _store(fetcher, FakeClock())

    first, second = await asyncio.gather(store.get_rates(), store.get_rates())

    assert fetcher.calls == 1
    assert first is second


@pytest.mark.asyncio
async def test_stale_cache_triggers_refresh():
    fetcher = FakeFetcher()
    clock = FakeClock()
    store = _store(fetcher, clock)

    await store.get_rates()
    clock.now += 61
    await store.get_rates()

    assert fetcher.calls == 2


@pytest.mark.asyncio
async def test_failed_refresh_serves_cache_within_grace():
    fetcher = FakeFetcher()
    clock = FakeClock()
    store = _store(fetcher, clock)
    await store.get_rates()

    fetcher.fail = True
    clock.now += 120
    cache = await store.get_rates()

    assert cache.from_fallback
    assert cache.rate("EUR") == 0.5


@pytest.mark.asyncio
async def test_failed_refresh_beyond_grace_raises():
    fetcher = FakeFetcher()
    clock = FakeClock()
    store = _store(fetcher, clock)
    await store.get_rates()

    fetcher.fail = True
    clock.now += 60 + 600 + 1
    with pytest.raises(NetworkFailure):
        await store.get_rates()


@pytest.mark.asyncio
async def test_failed_first_fetch_raises():
    fetcher = FakeFetcher()
    fetcher.fail = True
    store = _store(fetcher, FakeClock())

    with pytest.raises(NetworkFailure):
        await store.get_rates()


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_fetch():
    fetcher = FakeFetcher(delay=0.05)
    store = _store(fetcher, FakeClock())

    first = asyncio.create_task(store.get_rates())
    second = asyncio.create_task(store.get_rates())
    await asyncio.sleep(0.01)
    first.cancel()

    cache = await second

    assert cache.rate("GBP") == 0.25
    assert fetcher.calls == 1
    assert first.cancelled()


@pytest.mark.asyncio
async def test_cache_file_survives_restart(tmp_path):
    cache_file = tmp_path / "rates.json"
    clock = FakeClock()
    await _store(FakeFetcher(), clock, cache_file=cache_file).get_rates()
    assert cache_file.exists()

    offline = FakeFetcher()
    offline.fail = True
    clock.now += 120
    cache = await _store(offline, clock, cache_file=cache_file).get_rates()

    assert cache.from_fallback
    assert cache.rate("JPY") == 150.0


def test_unreadable_cache_file_is_ignored(tmp_path):
    cache_file = tmp_path / "rates.json"
    cache_file.write_text("not json", encoding="utf-8")

    store = _store(FakeFetcher(), FakeClock(), cache_file=cache_file)

    assert store.cache is None


@pytest.mark.asyncio
async def test_cache_file_drops_non_positive_rates(tmp_path):
    cache_file = tmp_path / "rates.json"
    cache_file.write_text(
        json.dumps({"base_currency": "USD", "rates": {"EUR": 0, "GBP": 0.25}, "fetched_at": 1000}),
        encoding="utf-8",
    )
    fetcher = FakeFetcher()
    store = _store(fetcher, FakeClock(), cache_file=cache_file)

    assert store.cache.rate("EUR") is None
    assert store.cache.rate("GBP") == 0.25

    converter = CurrencyConverter(store=store)
    with pytest.raises(ParseFailure):
        await converter.convert(parse_phrase("10 EUR to GBP"))
    assert fetcher.calls == 0


@pytest.mark.asyncio
async def test_convert_cross_rate():
    converter = CurrencyConverter(store=_store(FakeFetcher(), FakeClock()))

    result = await converter.convert(parse_phrase("10 EUR to GBP"))

    assert result.title == "£5.00"
    assert result.payload.target == "5.00"
    assert "1 EUR = 0.5000 GBP" in result.subtitle


@pytest.mark.asyncio
async def test_convert_from_base_currency_lowercase_codes():
    converter = CurrencyConverter(store=_store(FakeFetcher(), FakeClock()))

    result = await converter.convert(parse_phrase("2000 usd to jpy"))

    assert result.title == "¥300,000.00"


@pytest.mark.asyncio
async def test_convert_marks_cached_fallback():
    fetcher = FakeFetcher()
    clock = FakeClock()
    converter = CurrencyConverter(store=_store(fetcher, clock))
    await converter.convert(parse_phrase("1 USD to EUR"))

    fetcher.fail = True
    clock.now += 120
    result = await converter.convert(parse_phrase("1 USD to EUR"))

    assert result.subtitle.endswith("(cached)")


@pytest.mark.asyncio
async def test_missing_api_key():
    converter = CurrencyConverter(store=None)

    with pytest.raises(ConfigurationMissing):
        await converter.convert(parse_phrase("1 USD to EUR"))


@pytest.mark.asyncio
async def test_code_without_rate():
    converter = CurrencyConverter(store=_store(FakeFetcher(), FakeClock()))

    with pytest.raises(ParseFailure):
        await converter.convert(parse_phrase("1 USD to SEK"))


def test_handles_only_known_codes():
    converter = CurrencyConverter()
    assert converter.handles("usd", "EUR")
    assert not converter.handles("USD", "XYZ")
    assert not converter.handles("km", "mi")


def test_format_currency():
    assert format_currency(1234.5, "USD") == "$1,234.50"
    assert format_currency(5, "SEK") == "5.00 SEK"
    assert format_currency(-3, "EUR") == "-€3.00"
