"""
TTL configuration — single source of truth for cache durations and last-resort defaults.
Organised by data domain; one independent store per key in TTL.
"""

MINUTE = 60
HOUR = 60 * MINUTE

# ── Per-store TTL (seconds) ───────────────────────────────────

TTL: dict[str, float] = {
    # Fast-changing
    "quote":             30,
    "firi_balances":     30,
    "firi_rate":         1 * MINUTE,
    "coin":              2 * MINUTE,   # coin detail, OHLCV charts, coin list
    "chart":             5 * MINUTE,
    "search":            5 * MINUTE,
    "exchange_rates":    5 * MINUTE,

    # Slow-changing
    "previous_close":    1 * HOUR,
    "news":              6 * HOUR,
    "profile":           24 * HOUR,
    "financials":        24 * HOUR,
    "recommendations":   24 * HOUR,
    "earnings":          24 * HOUR,    # Alpha Vantage surprises
    "estimates":         24 * HOUR,    # Alpha Vantage estimates
    "earnings_calendar": 24 * HOUR,    # Finnhub history + calendar
    "ai_summary":        24 * HOUR,
}

# ── Clear groups ──────────────────────────────────────────────
# Clearing earnings also clears estimates for the same symbol; the
# Finnhub earnings calendar clears alone.

CLEAR_GROUPS: dict[str, tuple[str, ...]] = {
    "earnings":          ("earnings", "estimates"),
    "earnings_calendar": ("earnings_calendar",),
    "coinpaprika":       ("coin",),
    "firi":              ("firi_balances", "firi_rate"),
}

# ── Last-resort defaults ──────────────────────────────────────
# Served only when the live fetch failed AND nothing was ever cached.
# NOK per unit; these feed displayed portfolio values.

FALLBACK_RATES: dict[str, float] = {"USD": 10.5, "SEK": 1.0, "NOK": 1.0}
FALLBACK_USD_NOK = 10.5
FALLBACK_USDT_NOK = 10.5

# ── Provider timeouts (seconds) ──────────────────────────────

# Everything else uses REQUEST_TIMEOUT_SECONDS

TIMEOUTS: dict[str, float] = {
    "search":   8.0,
    "fx":       5.0,
    "logo":     2.0,
}
