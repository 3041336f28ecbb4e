from datetime import datetime, timezone

import pytest

from quoteboard.core.markets.registry import MARKET_REGISTRY, MarketCode, get_market, market_status


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_get_us_market():
    m = get_market("us")
    assert m.session_open == "09:30"
    assert m.flag == "🇺🇸"


def test_get_no_market():
    m = get_market("NO")
    assert m.exchange == "Oslo Børs"
    assert m.hours_display == "09:00-16:00 CET"


def test_invalid_market():
    with pytest.raises(ValueError):
        get_market("XX")


def test_both_markets_reported():
    status = market_status(utc(2024, 6, 5, 12, 0))
    assert set(status) == {m.flag for m in MARKET_REGISTRY.values()}


def test_oslo_open_new_york_closed_midday_europe():
    # Wednesday 14:00 in Oslo (CEST), 08:00 in New York
    status = market_status(utc(2024, 6, 5, 12, 0))
    assert status["🇳🇴"]["isOpen"] is True
    assert status["🇳🇴"]["session"] == "open"
    assert status["🇺🇸"]["isOpen"] is False


def test_both_open_in_overlap():
    # Wednesday 15:45 Oslo, 09:45 New York
    status = market_status(utc(2024, 6, 5, 13, 45))
    assert status["🇺🇸"]["isOpen"] and status["🇳🇴"]["isOpen"]


def test_close_is_exclusive():
    # 16:00 sharp in Oslo
    assert market_status(utc(2024, 6, 5, 14, 0))["🇳🇴"]["isOpen"] is False


def test_weekend_closed():
    status = market_status(utc(2024, 6, 8, 15, 0))
    assert not any(s["isOpen"] for s in status.values())


def test_us_session_in_winter():
    # 14:35 UTC in January is 09:35 in New York (EST)
    assert MARKET_REGISTRY[MarketCode.US].is_open(utc(2024, 1, 10, 14, 35)) is True
    assert MARKET_REGISTRY[MarketCode.US].is_open(utc(2024, 1, 10, 14, 25)) is False
