"""Typed handler results — every request path converges to a Success or a Failure."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Provenance(str, Enum):
    LIVE = "live"          # fetched from the provider on this request
    CACHED = "cached"      # fresh cache hit, provider not called
    STALE = "stale"        # provider failed, expired entry served instead
    DEFAULT = "default"    # provider failed, nothing cached, documented constant served


class FailureKind(str, Enum):
    VALIDATION = "VALIDATION_ERROR"
    CONFIGURATION = "CONFIGURATION_ERROR"
    UPSTREAM = "UPSTREAM_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"


@dataclass(frozen=True)
class Success:
    data: Any
    provenance: Provenance = Provenance.LIVE
    stored_at: float | None = None

    ok = True

    @property
    def cached(self) -> bool:
        return self.provenance in (Provenance.CACHED, Provenance.STALE)

    @property
    def stale(self) -> bool:
        return self.provenance is Provenance.STALE


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str
    status: int = 500

    ok = False

    @classmethod
    def validation(cls, message: str) -> Failure:
        return cls(FailureKind.VALIDATION, message, 400)

    @classmethod
    def configuration(cls, message: str) -> Failure:
        return cls(FailureKind.CONFIGURATION, message, 500)

    @classmethod
    def not_found(cls, message: str) -> Failure:
        return cls(FailureKind.NOT_FOUND, message, 404)

    @classmethod
    def unauthorized(cls, message: str) -> Failure:
        return cls(FailureKind.UNAUTHORIZED, message, 401)


Result = Success | Failure


def combine_provenance(results: list[Success]) -> Provenance:
    """Provenance of an aggregate: stale if any part is stale, cached only if every part is."""
    if any(r.provenance is Provenance.STALE for r in results):
        return Provenance.STALE
    if results and all(r.provenance is Provenance.CACHED for r in results):
        return Provenance.CACHED
    return Provenance.LIVE
