"""Exception types shared across the store, sources and services."""
from __future__ import annotations


class HirelyError(Exception):
    pass


class RemoteUnavailable(HirelyError):
    """Hosted store timed out, refused the connection or answered non-2xx."""

    def __init__(self, method: str, path: str, reason: str, status: int | None = None) -> None:
        self.method = method
        self.path = path
        self.reason = reason
        self.status = status
        super().__init__(f"{method} {path}: {reason}")


class ProviderError(HirelyError):
    """A third-party job search API failed or is not configured."""

    def __init__(self, provider: str, message: str, status: int | None = None) -> None:
        self.provider = provider
        self.status = status
        super().__init__(f"{provider}: {message}")


class ValidationError(HirelyError):
    """Required input missing or invalid; raised before any network call."""
