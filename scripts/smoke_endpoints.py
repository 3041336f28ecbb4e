#!/usr/bin/env python3
"""Hit every cached endpoint twice against a running server and report provenance."""
import json
import sys
import time

import requests

API = "http://localhost:3000/api"

CHECKS = [
    ("finnhub/quote/{symbol}", {}),
    ("previous-closes", {"symbols": "{symbol},MSFT"}),
    ("finnhub-profile", {"symbol": "{symbol}"}),
    ("yahoo/chart", {"symbol": "{symbol}", "range": "1d", "interval": "5m"}),
    ("search", {"q": "{symbol}"}),
    ("news", {"ticker": "{symbol}", "limit": 5}),
    ("financials", {"symbol": "{symbol}"}),
    ("recommendations", {"symbol": "{symbol}"}),
    ("earnings", {"symbol": "{symbol}"}),
    ("earnings-estimates", {"symbol": "{symbol}"}),
    ("yahoo-earnings", {"symbol": "{symbol}"}),
    ("exchangeRates", {}),
    ("coinpaprika/coins/btc-bitcoin", {}),
    ("coinpaprika/coins/btc-bitcoin/chart", {"days": 7}),
    ("firi/usdt-nok-rate", {}),
    ("market-status", {}),
]


def call(path: str, params: dict, symbol: str) -> dict:
    url = f"{API}/{path.format(symbol=symbol)}"
    params = {k: str(v).format(symbol=symbol) for k, v in params.items()}
    t0 = time.time()
    resp = requests.get(url, params=params, timeout=30)
    elapsed = round((time.time() - t0) * 1000)
    body = resp.json()
    if "success" not in body:
        provenance = "plain"
    elif not body["success"]:
        provenance = f"error: {body.get('error')}"
    elif body.get("fallback"):
        provenance = "default"
    elif body.get("stale"):
        provenance = "stale"
    else:
        provenance = "cached" if body.get("cached") else "live"
    return {"path": path, "status": resp.status_code, "provenance": provenance, "ms": elapsed}


def main():
    symbol = sys.argv[1] if len(sys.argv) > 1 else "AAPL"

    print(f"\n{'='*60}")
    print(f"  Smoke-testing {len(CHECKS)} endpoints for {symbol}")
    print(f"{'='*60}\n")

    results = []
    for path, params in CHECKS:
        try:
            first = call(path, params, symbol)
            second = call(path, params, symbol)
        except requests.RequestException as e:
            print(f"✗ {path}: {e}")
            results.append({"path": path, "status": "error", "error": str(e)})
            continue
        mark = "✓" if first["status"] == 200 else "✗"
        print(f"{mark} {path:<40} {first['provenance']:<10} → {second['provenance']:<10} "
              f"{first['ms']:>5}ms / {second['ms']:>4}ms")
        results.append({"first": first, "second": second})

    stats = requests.get(f"{API}/cache", timeout=10).json()["data"]
    print(f"\n{'Store':<20} {'TTL(s)':>8} {'Entries':>8} {'Fresh':>6}")
    print("-" * 46)
    for name, s in stats.items():
        print(f"{name:<20} {s['ttl_seconds']:>8} {s['entries']:>8} {s['fresh']:>6}")

    with open("smoke_results.json", "w") as f:
        json.dump(results, f, indent=2, default=str)
    print("\nFull results saved to smoke_results.json")


if __name__ == "__main__":
    main()
