"""
Market Registry — trading sessions for the markets shown on the dashboard.
Adding a market = add one MarketConfig entry here. Zero other changes.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, time, timezone
from enum import Enum
from zoneinfo import ZoneInfo


class MarketCode(str, Enum):
    US = "US"   # NYSE / NASDAQ
    NO = "NO"   # Oslo Børs


@dataclass(frozen=True)
class MarketConfig:
    code:           MarketCode
    name:           str
    exchange:       str
    flag:           str            # response key the dashboard renders
    timezone:       ZoneInfo
    session_open:   str            # "09:30" local time
    session_close:  str            # "16:00" local time
    hours_display:  str            # as shown to Norwegian users

    def is_open(self, now: datetime) -> bool:
        local = now.astimezone(self.timezone)
        if local.weekday() >= 5:
            return False
        return _parse(self.session_open) <= local.time() < _parse(self.session_close)


def _parse(hhmm: str) -> time:
    hour, minute = hhmm.split(":")
    return time(int(hour), int(minute))


MARKET_REGISTRY: dict[MarketCode, MarketConfig] = {

    MarketCode.US: MarketConfig(
        code=MarketCode.US,
        name="United States",
        exchange="NYSE/NASDAQ",
        flag="🇺🇸",
        timezone=ZoneInfo("America/New_York"),
        session_open="09:30",
        session_close="16:00",
        hours_display="15:30-22:00 CET",
    ),

    MarketCode.NO: MarketConfig(
        code=MarketCode.NO,
        name="Norway",
        exchange="Oslo Børs",
        flag="🇳🇴",
        timezone=ZoneInfo("Europe/Oslo"),
        session_open="09:00",
        session_close="16:00",
        hours_display="09:00-16:00 CET",
    ),
}


def get_market(code: str) -> MarketConfig:
    try:
        return MARKET_REGISTRY[MarketCode(code.upper())]
    except (ValueError, KeyError):
        valid = [m.value for m in MARKET_REGISTRY]
        raise ValueError(f"Unknown market '{code}'. Valid: {valid}")


def market_status(now: datetime | None = None) -> dict[str, dict]:
    """Open/closed state per market, keyed by flag."""
    now = now or datetime.now(timezone.utc)
    status = {}
    for m in MARKET_REGISTRY.values():
        is_open = m.is_open(now)
        status[m.flag] = {
            "code":    m.code.value,
            "name":    m.name,
            "isOpen":  is_open,
            "session": "open" if is_open else "closed",
            "hours":   m.hours_display,
        }
    return status
