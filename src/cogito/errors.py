"""Exception hierarchy for Cogito."""

from __future__ import annotations


class CogitoError(Exception):
    """Base exception for all Cogito errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(CogitoError):
    """Configuration validation or resolution failed."""


class TransportError(CogitoError):
    """The HTTP round trip to a provider failed.

    Surfaced as-is to the caller; Cogito never retries. ``status_code`` is set
    when the provider answered with a non-success status.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        provider: str | None = None,
        uri: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.provider = provider
        self.uri = uri


class DeserializationError(CogitoError):
    """A provider payload did not match the expected schema."""


class FormatError(DeserializationError):
    """A model identifier is not part of the provider's catalog."""
