"""Exchange-rate fetching and caching."""

from .client import ExchangeRateClient
from .store import ExchangeRateCache, ExchangeRateStore

__all__ = ["ExchangeRateClient", "ExchangeRateCache", "ExchangeRateStore"]
