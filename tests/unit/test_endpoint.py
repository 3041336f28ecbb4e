"""CachedEndpoint — the fetch-or-fallback procedure, driven by a fake clock and scripted fetches."""
import pytest

from fakes import MINUTE, ScriptedFetch
from quoteboard.core.cache import FallbackCache, build_key, symbol_key
from quoteboard.core.endpoint import CachedEndpoint, uncached
from quoteboard.core.errors import UpstreamError
from quoteboard.core.results import Failure, FailureKind, Provenance, Success


def make_endpoint(cache, fetch, **overrides):
    options = dict(
        name="test.quote",
        cache=cache,
        key=lambda symbol: symbol_key(symbol),
        fetch=fetch,
        normalize=lambda raw, symbol: raw,
        required=("symbol",),
    )
    options.update(overrides)
    return CachedEndpoint(**options)


@pytest.fixture
def cache(clock):
    return FallbackCache("quote", 5 * MINUTE, clock)


# ── Freshness and fallback ───────────────────────────────────────────────


class TestFetchOrFallback:

    @pytest.mark.asyncio
    async def test_aapl_timeline(self, cache, clock):
        fetch = ScriptedFetch({"price": 100})
        endpoint = make_endpoint(cache, fetch)
        start = clock.now

        live = await endpoint(symbol="AAPL")
        assert live == Success({"price": 100}, Provenance.LIVE, start)

        clock.now = start + 4 * MINUTE
        hit = await endpoint(symbol="AAPL")
        assert hit.data == {"price": 100}
        assert hit.provenance is Provenance.CACHED
        assert fetch.call_count == 1

        clock.now = start + 6 * MINUTE
        fetch.push(UpstreamError("HTTP 500 from finnhub.io", status=500))
        stale = await endpoint(symbol="AAPL")
        assert stale.ok and stale.stale
        assert stale.data == {"price": 100}

        clock.now = start + 7 * MINUTE
        fetch.push({"price": 105})
        recovered = await endpoint(symbol="AAPL")
        assert recovered.provenance is Provenance.LIVE
        assert recovered.data == {"price": 105}

        clock.now = start + 8 * MINUTE
        assert (await endpoint(symbol="AAPL")).data == {"price": 105}

        # once the recovered value has expired, a failure falls back to it and not the older one
        clock.now = start + 13 * MINUTE
        fetch.push(UpstreamError("Request timeout (finnhub.io)", status=504))
        later = await endpoint(symbol="AAPL")
        assert later.provenance is Provenance.STALE
        assert later.data == {"price": 105}
        assert fetch.call_count == 4

    @pytest.mark.asyncio
    async def test_failure_without_prior_data_is_typed(self, cache):
        fetch = ScriptedFetch(UpstreamError("HTTP 503 from finnhub.io", status=503))
        result = await make_endpoint(cache, fetch)(symbol="AAPL")

        assert isinstance(result, Failure)
        assert result.kind is FailureKind.UPSTREAM
        assert result.status == 503
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_unknown_status_maps_to_500(self, cache):
        fetch = ScriptedFetch(UpstreamError("connection reset"))
        result = await make_endpoint(cache, fetch)(symbol="AAPL")
        assert result.status == 500

    @pytest.mark.asyncio
    async def test_upstream_404_is_not_found(self, cache):
        fetch = ScriptedFetch(UpstreamError("HTTP 404", status=404))
        result = await make_endpoint(cache, fetch)(symbol="AAPL")
        assert result.kind is FailureKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_normalize_error_falls_back(self, cache, clock):
        fetch = ScriptedFetch({"price": 100}, {"unexpected": True})
        endpoint = make_endpoint(cache, fetch, normalize=lambda raw, symbol: {"price": raw["price"]})
        await endpoint(symbol="AAPL")
        clock.advance(6 * MINUTE)

        result = await endpoint(symbol="AAPL")
        assert result.provenance is Provenance.STALE
        assert result.data == {"price": 100}

    @pytest.mark.asyncio
    async def test_normalize_error_without_cache(self, cache):
        fetch = ScriptedFetch({"unexpected": True})
        endpoint = make_endpoint(cache, fetch, normalize=lambda raw, symbol: raw["price"])
        result = await endpoint(symbol="AAPL")
        assert result.kind is FailureKind.UPSTREAM
        assert result.message.startswith("Unparseable response")


# ── Soft errors and empties ──────────────────────────────────────────────


def note_soft_error(payload):
    return payload.get("Note") if isinstance(payload, dict) else None


class TestSoftErrors:

    @pytest.mark.asyncio
    async def test_rate_limit_body_never_cached(self, cache):
        fetch = ScriptedFetch({"Note": "API call frequency exceeded"})
        result = await make_endpoint(cache, fetch, soft_error=note_soft_error)(symbol="IBM")

        assert not result.ok
        assert result.message == "API call frequency exceeded"
        assert cache.get("IBM") is None

    @pytest.mark.asyncio
    async def test_rate_limit_body_serves_stale(self, cache, clock):
        fetch = ScriptedFetch({"eps": 1.2}, {"Note": "API call frequency exceeded"})
        endpoint = make_endpoint(cache, fetch, soft_error=note_soft_error)
        await endpoint(symbol="IBM")
        clock.advance(10 * MINUTE)

        result = await endpoint(symbol="IBM")
        assert result.stale
        assert result.data == {"eps": 1.2}
        assert cache.get("IBM").value == {"eps": 1.2}

    @pytest.mark.asyncio
    async def test_empty_is_success_and_cached(self, cache):
        fetch = ScriptedFetch([])
        endpoint = make_endpoint(cache, fetch, is_empty=lambda raw: not raw)

        first = await endpoint(symbol="TINY")
        second = await endpoint(symbol="TINY")

        assert first == Success([], Provenance.LIVE, first.stored_at)
        assert second.data == [] and second.provenance is Provenance.CACHED
        assert fetch.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_treated_as_failure_when_configured(self, cache):
        fetch = ScriptedFetch({})
        endpoint = make_endpoint(
            cache, fetch, is_empty=lambda raw: not raw, empty_is_success=False, empty_message="No recommendations found"
        )
        result = await endpoint(symbol="TINY")

        assert result.kind is FailureKind.NOT_FOUND
        assert result.status == 404
        assert result.message == "No recommendations found"
        assert len(cache) == 0


# ── Validation, credentials, defaults ────────────────────────────────────


class TestGuards:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("symbol", [None, "", "   "])
    async def test_missing_param_touches_nothing(self, cache, symbol):
        fetch = ScriptedFetch()
        result = await make_endpoint(cache, fetch)(symbol=symbol)

        assert result == Failure.validation("symbol parameter is required")
        assert result.status == 400
        assert fetch.call_count == 0
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_missing_credentials_skip_fallback(self, cache):
        cache.set("AAPL", {"price": 100})
        fetch = ScriptedFetch()
        endpoint = make_endpoint(cache, fetch, credentials=lambda: "Finnhub API key not configured")

        result = await endpoint(symbol="AAPL")
        assert result.kind is FailureKind.CONFIGURATION
        assert result.status == 500
        assert fetch.call_count == 0

    @pytest.mark.asyncio
    async def test_default_used_when_nothing_cached(self, cache):
        fetch = ScriptedFetch(UpstreamError("down"))
        endpoint = make_endpoint(cache, fetch, default=lambda error, symbol: {"rate": 10.5})

        result = await endpoint(symbol="USDNOK")
        assert result.provenance is Provenance.DEFAULT
        assert result.data == {"rate": 10.5}
        # defaults are never stored
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_stale_preferred_over_default(self, cache, clock):
        fetch = ScriptedFetch({"rate": 11.2}, UpstreamError("down"))
        endpoint = make_endpoint(cache, fetch, default=lambda error, symbol: {"rate": 10.5})
        await endpoint(symbol="USDNOK")
        clock.advance(10 * MINUTE)

        result = await endpoint(symbol="USDNOK")
        assert result.provenance is Provenance.STALE
        assert result.data == {"rate": 11.2}

    @pytest.mark.asyncio
    async def test_default_may_decline(self, cache):
        fetch = ScriptedFetch(UpstreamError("quota", status=503))
        endpoint = make_endpoint(cache, fetch, default=lambda error, symbol: None)
        result = await endpoint(symbol="AAPL")
        assert result.status == 503

    @pytest.mark.asyncio
    async def test_value_built_from_default_inputs_is_flagged_not_stored(self, cache):
        fetch = ScriptedFetch({"price": 1050.0, "rate_assumed": True}, {"price": 1080.0, "rate_assumed": False})
        endpoint = make_endpoint(cache, fetch, uses_default=lambda raw: raw["rate_assumed"])

        first = await endpoint(symbol="BTC")
        assert first.provenance is Provenance.DEFAULT
        assert first.data["price"] == 1050.0
        assert len(cache) == 0

        second = await endpoint(symbol="BTC")
        assert second.provenance is Provenance.LIVE
        assert cache.get("BTC").value["price"] == 1080.0


# ── Key isolation ────────────────────────────────────────────────────────


class TestKeyIsolation:

    @pytest.mark.asyncio
    async def test_secondary_param_gets_own_entry(self, cache):
        fetch = ScriptedFetch({"range": "1d"}, {"range": "5d"})
        endpoint = make_endpoint(
            cache,
            fetch,
            key=lambda symbol, chart_range: build_key(symbol_key(symbol), chart_range),
            normalize=lambda raw, symbol, chart_range: raw,
        )

        await endpoint(symbol="AAPL", chart_range="1d")
        await endpoint(symbol="AAPL", chart_range="5d")
        assert sorted(cache.keys()) == ["AAPL_1d", "AAPL_5d"]

        cache.delete("AAPL_1d")
        again = await endpoint(symbol="AAPL", chart_range="5d")
        assert again.provenance is Provenance.CACHED
        assert again.data == {"range": "5d"}
        assert fetch.call_count == 2


class TestUncached:

    @pytest.mark.asyncio
    async def test_value_passes_through(self):
        async def call():
            return [{"id": "btcnok"}]

        result = await uncached("firi.markets", call(), lambda raw: len(raw))
        assert result == Success(1)

    @pytest.mark.asyncio
    async def test_error_becomes_failure(self):
        async def call():
            raise UpstreamError("HTTP 401 from public.nordnet.se", status=401)

        result = await uncached("nordnet.accounts", call())
        assert result.status == 401
        assert result.kind is FailureKind.UPSTREAM
