"""Tests for grammar dispatch priority and failure handling."""

import pytest

from quicklaunch.config import LauncherSettings
from quicklaunch.errors import NetworkFailure
from quicklaunch.interpreters.currency import CurrencyConverter
from quicklaunch.interpreters.dispatcher import GrammarDispatcher
from quicklaunch.models.search import ResultType
from quicklaunch.rates.store import ExchangeRateStore


def _dispatcher(currency=None):
    return GrammarDispatcher.from_settings(
        LauncherSettings(), currency=currency or CurrencyConverter(store=None)
    )


@pytest.mark.parametrize(
    "text,expected",
    [
        ("base64 1+1", "text_tools"),
        ("> echo 1+1", "text_tools"),
        ("#123", "color"),
        ("12, 34, 56", "color"),
        ("10 km to m", "conversion"),
        ("100 usd to eur", "conversion"),
        ("1+1", "calculator"),
        ("42", "calculator"),
        ("hello", None),
        ("   ", None),
    ],
)
def test_priority_order(text, expected):
    selected = _dispatcher().select(text)
    assert (selected.name if selected else None) == expected


def test_selection_is_deterministic():
    dispatcher = _dispatcher()
    assert dispatcher.select("2*3") is dispatcher.select("2*3")


@pytest.mark.asyncio
async def test_evaluation_failure_yields_empty_result():
    classification = await _dispatcher().classify("1/0")

    assert classification.interpreter == "calculator"
    assert classification.results == ()
    assert classification.warnings == ()


@pytest.mark.asyncio
async def test_color_owns_out_of_range_input():
    classification = await _dispatcher().classify("rgb(300, 0, 0)")

    assert classification.interpreter == "color"
    assert classification.results == ()


@pytest.mark.asyncio
async def test_missing_api_key_is_a_warning():
    classification = await _dispatcher().classify("100 USD to EUR")

    assert classification.interpreter == "conversion"
    assert classification.results == ()
    assert len(classification.warnings) == 1
    assert "API key" in classification.warnings[0]


@pytest.mark.asyncio
async def test_network_failure_is_a_warning():
    async def offline(base):
        raise NetworkFailure("exchange-rate service unreachable")

    currency = CurrencyConverter(store=ExchangeRateStore(offline))
    classification = await _dispatcher(currency).classify("100 USD to EUR")

    assert classification.results == ()
    assert classification.warnings == ("exchange-rate service unreachable",)


@pytest.mark.asyncio
async def test_currency_conversion_result():
    async def fetch(base):
        return {"EUR": 0.92}

    currency = CurrencyConverter(store=ExchangeRateStore(fetch))
    classification = await _dispatcher(currency).classify("100 USD to EUR")

    assert [r.title for r in classification.results] == ["€92.00"]
    assert classification.results[0].result_type == ResultType.CURRENCY_CONVERSION


@pytest.mark.asyncio
async def test_unknown_input_is_unclaimed():
    classification = await _dispatcher().classify("firefox")

    assert classification.interpreter is None
    assert classification.results == ()
