"""Exceptions raised by the Home Assistant REST client."""

from __future__ import annotations


class HomeAssistantError(RuntimeError):
    """Base class for every error surfaced by this library."""


class ConfigurationError(HomeAssistantError, ValueError):
    """Raised when the URL or token cannot be resolved."""


class TransportError(HomeAssistantError):
    """Raised when a request could not be sent or returned a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(HomeAssistantError):
    """Raised when a response body does not match the expected shape."""
