"""Norges Bank provider — official USD and SEK to NOK reference rates (SDMX-JSON)."""
from __future__ import annotations

from typing import Any

from quoteboard.core.providers.base import HttpClient, Provider

NORGES_BANK_EXR = "https://data.norges-bank.no/api/data/EXR/B.USD+SEK.NOK.SP"

# SDMX series keys in the order requested: B.USD.NOK.SP, B.SEK.NOK.SP
SERIES_KEYS = {"USD": "0:0:0:0", "SEK": "0:1:0:0"}


class NorgesBankProvider(Provider):

    def __init__(self, http: HttpClient | None = None, timeout: float = 5.0):
        super().__init__(http)
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "Norges Bank"

    async def exchange_rates(self) -> dict:
        return await self._http.get_json(
            NORGES_BANK_EXR, params={"lastNObservations": 1, "format": "sdmx-json"}, timeout=self._timeout
        )


def _latest(series: dict, key: str) -> float | None:
    observations = (series.get(key) or {}).get("observations") or {}
    first = next(iter(observations.values()), None)
    if not first or first[0] in (None, ""):
        return None
    return float(first[0])


def normalize_rates(payload: Any) -> dict[str, float]:
    rates = {"USD": 1.0, "SEK": 1.0, "NOK": 1.0}
    data_sets = ((payload or {}).get("data") or {}).get("dataSets") or []
    if not data_sets:
        return rates
    series = data_sets[0].get("series") or {}
    for currency, key in SERIES_KEYS.items():
        value = _latest(series, key)
        if value:
            rates[currency] = value
    return rates
