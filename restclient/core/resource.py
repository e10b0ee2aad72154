"""
Resource
========

A URL split into scheme, host, port, Path and Params (the query).

    >>> r = Resource("http://example.com:80/a/index.html?foo=bar&baz=qux")
    >>> r.host, r.port, str(r.path), str(r.query)
    ('example.com', 80, '/a/index.html', 'foo=bar&baz=qux')

Serialization rules
-------------------

- `scheme://` only when a scheme is set (`//` for a bare host)
- `:port` only when a port is set
- `/` before the path only when the path is non-empty and relative
- `?` only when the query is non-empty and a host, port or path is set

so `Resource("")` is `""`, `Resource("https://")` is `"https://"` and
`Resource("?a=b")` serializes to just `"a=b"`.
"""

from __future__ import annotations

import re
from typing import Optional, Union
from urllib.parse import urlsplit

from restclient.core.params import Params, ParamsInput
from restclient.core.path import Path, PathLike
from restclient.errors import InvalidArgumentError

_SCHEME_ONLY = re.compile(r"^(\w+)://$")
_BARE_AUTHORITY = re.compile(r"^[A-Za-z0-9.-]+:\d+(?:[/?#]|$)")


def _check_port(port: Optional[int]) -> Optional[int]:
    if port is None:
        return None
    if not 1 <= int(port) <= 65535:
        raise InvalidArgumentError(f"Port out of range 1-65535: {port}")
    return int(port)


class Resource:
    """
    A URL (uniform resource locator).

    Args:
        url:
            URL string to parse. When omitted, the keyword parts are used.
        indexed:
            Array encoding flag for the query Params.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        path: Optional[PathLike] = None,
        query: ParamsInput = None,
        indexed: Optional[bool] = None,
    ) -> None:
        if url:
            scheme, host, port, path, query = self._split(url)

        self.scheme: Optional[str] = scheme or None
        self.host: Optional[str] = host or None
        self.port: Optional[int] = _check_port(port)
        self.path: Path = Path(path)
        if isinstance(query, Params) and indexed is None:
            self.query: Params = Params(query, indexed=query.indexed, encode_keys=query.encode_keys)
        else:
            self.query = Params(query, indexed=indexed)

    @staticmethod
    def _split(url: str):
        match = _SCHEME_ONLY.match(url)
        if match:
            return match.group(1), None, None, None, None

        if "://" not in url and _BARE_AUTHORITY.match(url):
            url = f"//{url}"

        parts = urlsplit(url)
        try:
            port = parts.port
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid port in URL {url!r}: {exc}") from exc
        return parts.scheme, parts.hostname, port, parts.path, parts.query

    # Combination ------------------------------------------------------------

    def merge(self, resource: Union["Resource", str, None]) -> "Resource":
        """
        Lay `resource` over this one and return the result.

        Scheme, host and port come from `resource` when set. Path and query
        are taken whole from `resource` when non-empty (they are not
        joined), otherwise copied from here. The query keeps our `indexed`
        flag.
        """
        overlay = resource if isinstance(resource, Resource) else Resource(resource)
        merged = Resource()
        merged.scheme = overlay.scheme if overlay.scheme is not None else self.scheme
        merged.host = overlay.host if overlay.host is not None else self.host
        merged.port = overlay.port if overlay.port is not None else self.port
        merged.path = (overlay.path if len(overlay.path) else self.path).copy()
        query = overlay.query if len(overlay.query) else self.query
        merged.query = query.with_flags(indexed=self.query.indexed)
        return merged

    def with_query(self, query: ParamsInput) -> "Resource":
        return Resource(
            scheme=self.scheme,
            host=self.host,
            port=self.port,
            path=self.path,
            query=query if isinstance(query, Params) else Params(query, indexed=self.query.indexed),
        )

    def copy(self) -> "Resource":
        return self.with_query(self.query)

    # Serialization ----------------------------------------------------------

    def __str__(self) -> str:
        host = self.host or ""
        if ":" in host:
            host = f"[{host}]"
        parts = [
            f"{self.scheme}://" if self.scheme else ("//" if host else ""),
            host,
            f":{self.port}" if self.port else "",
        ]
        if len(self.path):
            parts.append("" if self.path.is_absolute() else "/")
            parts.append(str(self.path))
        if len(self.query) and (self.host or self.port or len(self.path)):
            parts.append("?")
        parts.append(str(self.query))
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Resource({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Resource):
            return str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented


__all__ = ["Resource"]
