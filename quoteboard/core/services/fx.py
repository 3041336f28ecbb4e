"""Exchange rate service — NOK reference rates with documented last-resort values."""
from __future__ import annotations

from quoteboard.core.cache import CacheRegistry
from quoteboard.core.cache.ttl_config import FALLBACK_RATES, FALLBACK_USD_NOK
from quoteboard.core.endpoint import CachedEndpoint
from quoteboard.core.providers import norges_bank as nb
from quoteboard.core.providers.norges_bank import NorgesBankProvider
from quoteboard.core.results import Provenance, Result, Success

RATES_KEY = "rates"


class ExchangeRateService:

    def __init__(self, norges_bank: NorgesBankProvider, caches: CacheRegistry):
        self.rates = CachedEndpoint(
            name="norgesbank.rates",
            cache=caches["exchange_rates"],
            key=lambda: RATES_KEY,
            fetch=norges_bank.exchange_rates,
            normalize=lambda raw: nb.normalize_rates(raw),
            default=lambda error: dict(FALLBACK_RATES),
        )

    async def exchange_rates(self) -> Result:
        return await self.rates()

    async def usd_to_nok(self) -> Success:
        """The USD rate, carrying the provenance of the rates it was read from."""
        result = await self.rates()
        if not result.ok or not result.data.get("USD"):
            return Success(FALLBACK_USD_NOK, Provenance.DEFAULT)
        return Success(result.data["USD"], result.provenance, result.stored_at)
