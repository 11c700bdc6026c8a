"""Error taxonomy shared by the upstream adapter, search services and routers."""


class StayCompareError(Exception):
    """Base class for all service errors."""


class ConfigurationError(StayCompareError):
    """Upstream credentials are missing."""


class AuthenticationError(StayCompareError):
    """Upstream rejected our credential."""


class UpstreamError(StayCompareError):
    """An upstream call failed with an HTTP status or a transport error."""

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    @property
    def is_http_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 400


class SearchError(StayCompareError):
    """No fallback tier recovered from an upstream failure."""

    def __init__(self, detail: str = "Hotel search failed"):
        super().__init__(detail)
        self.detail = detail


class EnrichmentFailure(StayCompareError):
    """The batched offer lookup failed. Never surfaced past the enricher."""
