"""Quoteboard — market data aggregator with stale-fallback caches."""

__version__ = "1.0.0"
