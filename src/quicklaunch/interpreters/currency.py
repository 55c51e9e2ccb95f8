"""Currency conversion over the shared exchange-rate cache."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import CurrencySettings
from ..errors import ConfigurationMissing, DomainError, ParseFailure
from ..models.search import ActionType, Payload, ResultType, SearchResult
from ..rates.client import ExchangeRateClient
from ..rates.store import ExchangeRateStore
from .base import UNLABELED
from .formatting import is_finite
from .units import ConversionPhrase

logger = logging.getLogger(__name__)

CURRENCY_CODES = frozenset({
    "USD", "CNY", "EUR", "GBP", "JPY", "KRW", "HKD", "TWD", "SGD", "AUD",
    "CAD", "CHF", "INR", "MXN", "BRL", "RUB", "ZAR", "SEK", "NOK", "DKK",
    "NZD", "THB", "MYR", "IDR", "PHP", "VND", "AED", "SAR", "TRY", "PLN",
    "ILS", "CZK", "HUF", "CLP", "COP", "PEN", "ARS", "NGN", "EGP", "PKR",
    "BDT", "UAH", "RON", "BGN", "ISK",
})

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "KRW": "₩",
    "INR": "₹",
    "RUB": "₽",
    "TRY": "₺",
    "ILS": "₪",
    "VND": "₫",
    "PHP": "₱",
    "NGN": "₦",
    "UAH": "₴",
}


def is_currency_code(token: str) -> bool:
    return token.upper() in CURRENCY_CODES


def format_currency(amount: float, code: str) -> str:
    """Format an amount with the currency's symbol and thousands separators."""
    code = code.upper()
    sign = "-" if amount < 0 else ""
    body = f"{abs(amount):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{body} {code}"


class CurrencyConverter:
    """Converts amounts between ISO currency codes.

    A converter without a rate store has no API key configured and raises
    ConfigurationMissing for every conversion.
    """

    def __init__(self, store: Optional[ExchangeRateStore] = None):
        self.store = store

    @classmethod
    def from_settings(cls, settings: CurrencySettings) -> "CurrencyConverter":
        if not settings.api_key:
            return cls(store=None)
        client = ExchangeRateClient(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
        )
        store = ExchangeRateStore(
            client.fetch,
            base_currency=settings.base_currency,
            ttl_seconds=settings.cache_ttl_seconds,
            grace_seconds=settings.grace_seconds,
            cache_file=settings.cache_file,
        )
        return cls(store=store)

    def handles(self, source: str, target: str) -> bool:
        return is_currency_code(source) and is_currency_code(target)

    async def convert(self, phrase: ConversionPhrase) -> SearchResult:
        """Convert a currency phrase using cached or freshly fetched rates.

        Raises:
            ConfigurationMissing: If no API key is configured
            NetworkFailure: If rates are unavailable
            ParseFailure: If the provider has no rate for a code
        """
        if self.store is None:
            raise ConfigurationMissing("Currency conversion needs an exchange-rate API key")

        source = phrase.source.upper()
        target = phrase.target.upper()
        cache = await self.store.get_rates()

        source_rate = cache.rate(source)
        target_rate = cache.rate(target)
        if source_rate is None or target_rate is None or min(source_rate, target_rate) <= 0:
            raise ParseFailure(f"no exchange rate for {source} -> {target}")

        unit_rate = target_rate / source_rate
        value = phrase.amount * unit_rate
        if not is_finite(value):
            raise DomainError("currency conversion result is not finite")
        formatted = format_currency(value, target)

        subtitle = (
            f"{phrase.amount_text} {source} = {formatted} · "
            f"1 {source} = {unit_rate:.4f} {target} · 1 {target} = {1 / unit_rate:.4f} {source}"
        )
        if cache.from_fallback:
            subtitle += " (cached)"

        return SearchResult(
            title=formatted,
            subtitle=subtitle,
            group_label=UNLABELED,
            result_type=ResultType.CURRENCY_CONVERSION,
            payload=Payload(action=ActionType.COPY_TEXT, target=f"{value:.2f}"),
            score=1.0,
        )
