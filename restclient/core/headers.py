"""
Headers
=======

Ordered, case-sensitive HTTP header mapping.

A header value is either a single string or, for headers that occurred
more than once on the wire, a list of strings in arrival order. Keys are
stored exactly as supplied; `lookup()` offers case- and separator-
insensitive access (`Content-Type`, `content-type` and `content_type` all
match).
"""

from __future__ import annotations

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    Union,
)

from restclient.errors import ImmutabilityViolation

HeaderValue = Union[str, List[str]]
HeadersInput = Union[None, Mapping[str, Any], Iterable[Tuple[str, Any]]]


def normalize_header_name(name: str) -> str:
    """`Content-Type` -> `content_type`."""
    return name.strip().lower().replace("-", "_")


def _coerce(value: Any) -> HeaderValue:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return str(value)


class Headers(MutableMapping[str, HeaderValue]):
    """
    HTTP headers.

    Construction and item assignment overwrite; only `add()` accumulates
    repeated names into a list. `freeze()` turns the instance read-only,
    which is how parsed response headers and request headers are handed out.
    """

    def __init__(self, headers: HeadersInput = None) -> None:
        self._headers: Dict[str, HeaderValue] = {}
        self._frozen = False
        if headers is None:
            return
        items = headers.items() if isinstance(headers, Mapping) else headers
        for key, value in items:
            self[key] = value

    # Mapping interface ------------------------------------------------------

    def __getitem__(self, key: str) -> HeaderValue:
        value = self._headers[key]
        return list(value) if isinstance(value, list) else value

    def __setitem__(self, key: str, value: Any) -> None:
        self._check_mutable()
        self._headers[key] = _coerce(value)

    def __delitem__(self, key: str) -> None:
        self._check_mutable()
        del self._headers[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"

    def has_key(self, key: str) -> bool:
        """Exact-key membership; kept for callers of the old API."""
        return key in self._headers

    # Accumulation / lookup --------------------------------------------------

    def add(self, key: str, value: str) -> None:
        """Record one more occurrence of `key`, turning the value into a list."""
        self._check_mutable()
        current = self._headers.get(key)
        if current is None:
            self._headers[key] = str(value)
        elif isinstance(current, list):
            current.append(str(value))
        else:
            self._headers[key] = [current, str(value)]

    def lookup(self, name: str, default: Optional[HeaderValue] = None) -> Optional[HeaderValue]:
        """Case- and separator-insensitive get; the last matching key wins."""
        wanted = normalize_header_name(name)
        found: Optional[HeaderValue] = default
        for key in self._headers:
            if normalize_header_name(key) == wanted:
                found = self[key]
        return found

    def normalized(self) -> Dict[str, HeaderValue]:
        return {normalize_header_name(key): self[key] for key in self._headers}

    def items_multi(self) -> List[Tuple[str, str]]:
        """One (name, value) pair per value, list values expanded in order."""
        pairs: List[Tuple[str, str]] = []
        for key, value in self._headers.items():
            if isinstance(value, list):
                pairs.extend((key, item) for item in value)
            else:
                pairs.append((key, value))
        return pairs

    # Combination ------------------------------------------------------------

    def merge(self, headers: HeadersInput) -> "Headers":
        """
        Return a new Headers with `headers` laid over this one.

        Every key of `headers` replaces ours outright (no accumulation);
        keys only we have survive unchanged.
        """
        other = headers if isinstance(headers, Headers) else Headers(headers)
        merged = Headers(self)
        for key, value in other.items():
            merged[key] = value
        return merged

    def copy(self) -> "Headers":
        return Headers(self)

    # Immutability -----------------------------------------------------------

    def freeze(self) -> "Headers":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ImmutabilityViolation("Headers are read-only.")

    # Serialization ----------------------------------------------------------

    def __str__(self) -> str:
        return "\n".join(f"{key}: {value}" for key, value in self.items_multi())


__all__ = ["Headers", "HeaderValue", "HeadersInput", "normalize_header_name"]
