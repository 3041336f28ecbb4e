"""Error taxonomy shared by providers and the fetch-or-fallback handler."""


class QuoteboardError(Exception):
    """Base class for all service errors."""


class UpstreamError(QuoteboardError):
    """Network error, timeout, non-2xx status or unparseable body from a provider."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class SoftFailure(UpstreamError):
    """A 2xx response whose body carries an error, rate-limit or quota notice."""


class EmptyResult(SoftFailure):
    """An empty payload from a provider where empty means throttled or unknown, not 'no data'."""

    def __init__(self, message: str = "No data available", status: int | None = 404):
        super().__init__(message, status)
