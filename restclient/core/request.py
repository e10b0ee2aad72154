"""
Request
=======

The immutable bundle handed from the client to the transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from restclient.core.headers import Headers
from restclient.core.params import Params
from restclient.core.resource import Resource
from restclient.errors import BadMethodError


class Verb(str, Enum):
    """HTTP verbs understood by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def coerce(cls, method: Union[str, "Verb"]) -> "Verb":
        """Upper-case `method` and return the matching Verb."""
        if isinstance(method, Verb):
            return method
        try:
            return cls(str(method).strip().upper())
        except ValueError:
            raise BadMethodError(f"Unknown HTTP method {method!r}") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Request:
    """
    A request ready to be executed.

    Attributes:
        method:
            HTTP verb.
        url:
            Fully merged target URL (base URL already applied).
        params:
            Parameters; a literal string is sent verbatim.
        headers:
            Read-only request headers.
    """

    method: Verb
    url: Resource
    params: Union[Params, str]
    headers: Headers

    @property
    def has_body(self) -> bool:
        """Everything but GET sends its parameters as the request body."""
        return self.method is not Verb.GET


__all__ = ["Verb", "Request"]
