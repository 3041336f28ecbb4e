"""Cache key builders — one deterministic string per cacheable unit."""

SEPARATOR = "_"


def symbol_key(symbol: str) -> str:
    return symbol.strip().upper()


def build_key(*parts: object) -> str:
    """Join key parts with ``_``; ``None`` parts become empty strings so positions stay stable."""
    return SEPARATOR.join("" if p is None else str(p).strip() for p in parts)


# Stores whose whole key is a ticker symbol
SYMBOL_KEYED = frozenset({
    "quote", "previous_close", "profile", "financials", "recommendations",
    "earnings", "estimates", "earnings_calendar", "ai_summary",
})


def store_key(store: str, key: str) -> str:
    """Normalise an externally supplied key the way the store's endpoints build it."""
    return symbol_key(key) if store in SYMBOL_KEYED else key.strip()
