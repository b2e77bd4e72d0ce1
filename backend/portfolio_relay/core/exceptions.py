"""Application-level exceptions."""

from typing import Optional


class PortfolioRelayError(Exception):
    """Base exception for portfolio cache errors."""

    def __init__(self, message: str, code: str = "RELAY_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class UpstreamFetchError(PortfolioRelayError):
    """Raised when the upstream document cannot be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, code="UPSTREAM_FETCH_ERROR")


class UpstreamDecodeError(PortfolioRelayError):
    """Raised when the upstream body is not valid JSON."""

    def __init__(self, message: str):
        super().__init__(message, code="UPSTREAM_DECODE_ERROR")


class ValidationError(PortfolioRelayError):
    """Raised when a document does not match the portfolio schema."""

    def __init__(self, issues: list[str]):
        self.issues = issues
        summary = "; ".join(issues[:5])
        if len(issues) > 5:
            summary += f" (+{len(issues) - 5} more)"
        super().__init__(f"Invalid portfolio document: {summary}", code="VALIDATION_ERROR")


class ResourceUnavailableError(PortfolioRelayError):
    """Raised when a cache key is still empty after a refresh."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Resource unavailable after refresh: {key}", code="RESOURCE_UNAVAILABLE")


class StoreError(PortfolioRelayError):
    """Raised when the cache store cannot be reached."""

    def __init__(self, message: str):
        super().__init__(message, code="STORE_ERROR")
