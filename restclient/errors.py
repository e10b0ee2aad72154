"""
Errors
======

Exception taxonomy for restclient.

Configuration and programming mistakes (bad options, unknown verbs,
mutating parsed data) are raised immediately. Network failures are *not*
exceptions: they are recorded on the Response (`error`, `success`) so that
whatever was received stays inspectable. Decoding failures are raised
separately and carry the parsed Response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from restclient.core.response import Response


class RestClientError(Exception):
    """Base class for all restclient errors."""


class ConfigurationError(RestClientError, ValueError):
    """Raised for an invalid option name or value."""


class InvalidArgumentError(RestClientError, ValueError):
    """Raised for a malformed argument (URL port, parameter value, ...)."""


class BadMethodError(RestClientError):
    """Raised when an HTTP verb is unknown or not allowed on the client."""


class DecodingError(RestClientError):
    """
    Raised when a response body cannot be decoded.

    Attributes:
        format:
            Format tag the decoder was looked up with, if known.
        response:
            The parsed Response; `body`, `headers` and `status_lines`
            remain available even though `data` could not be produced.
    """

    def __init__(
        self,
        message: str,
        *,
        format: Optional[str] = None,
        response: Optional["Response"] = None,
    ) -> None:
        super().__init__(message)
        self.format = format
        self.response = response


class DecodingFormatError(DecodingError):
    """Raised when no decoder is registered for the response format."""


class TransportError(RestClientError):
    """Raised by `Response.raise_for_error()` for network-level failures."""


class ImmutabilityViolation(RestClientError, TypeError):
    """Raised when parsed headers or decoded response data are mutated."""


__all__ = [
    "RestClientError",
    "ConfigurationError",
    "InvalidArgumentError",
    "BadMethodError",
    "DecodingError",
    "DecodingFormatError",
    "TransportError",
    "ImmutabilityViolation",
]
