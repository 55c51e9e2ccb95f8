"""Exchange-rate API client."""

import asyncio
import logging
from typing import Any, Optional

import requests

from ..errors import ConfigurationMissing, NetworkFailure

logger = logging.getLogger(__name__)


class ExchangeRateClient:
    """Client for an exchangerate-api.com compatible v6 endpoint.

    Fetches the full table of rates relative to one base currency.
    """

    BASE_URL = "https://v6.exchangerate-api.com/v6"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        timeout_seconds: float = 5.0,
    ):
        """Initialize the client.

        Args:
            api_key: API key for the rate provider
            base_url: Override for the provider's v6 endpoint
            timeout_seconds: Per-request timeout

        Raises:
            ConfigurationMissing: If no API key is provided
        """
        if not api_key:
            raise ConfigurationMissing(
                "Exchange-rate API key not found. Set [settings.currency].api_key "
                "or QUICKLAUNCH_EXCHANGE_API_KEY."
            )
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds

    def fetch_rates(self, base_currency: str) -> dict[str, float]:
        """Fetch rates for every supported currency relative to base_currency.

        Raises:
            NetworkFailure: On transport errors, HTTP errors, or an
                unsuccessful or malformed response body
        """
        base = base_currency.upper()
        endpoint = f"{self.base_url}/{self.api_key}/latest/{base}"
        logger.info(f"Fetching exchange rates for {base}")

        try:
            response = requests.get(endpoint, timeout=self.timeout_seconds)
            response.raise_for_status()
            data: Any = response.json()
        except requests.RequestException as e:
            raise NetworkFailure(f"Exchange-rate request failed: {e}") from e
        except ValueError as e:
            raise NetworkFailure("Exchange-rate response is not JSON") from e

        if not isinstance(data, dict) or data.get("result") != "success":
            error_type = data.get("error-type", "unknown") if isinstance(data, dict) else "unknown"
            raise NetworkFailure(f"Exchange-rate provider returned an error: {error_type}")

        raw_rates = data.get("conversion_rates")
        if not isinstance(raw_rates, dict) or not raw_rates:
            raise NetworkFailure("Exchange-rate response has no conversion_rates")

        rates: dict[str, float] = {}
        for code, rate in raw_rates.items():
            if isinstance(rate, (int, float)) and not isinstance(rate, bool) and rate > 0:
                rates[str(code).upper()] = float(rate)
        rates.setdefault(base, 1.0)
        return rates

    async def fetch(self, base_currency: str) -> dict[str, float]:
        """Async adapter that runs the blocking request in a worker thread."""
        return await asyncio.to_thread(self.fetch_rates, base_currency)
