"""
Params
======

Query string / form body parameters.

Params is an ordered, read-only mapping of keys to values, where a value is
a string, a number, or a (possibly nested) list or mapping of values. It
serializes to `application/x-www-form-urlencoded` text and parses such
text back:

    >>> str(Params({"foo": " bar", "baz": 1, "bat": ["foo", "bar"]}))
    'foo=+bar&baz=1&bat%5B%5D=foo&bat%5B%5D=bar'

Array encoding
--------------

- indexed=False (default): `bat[]=foo&bat[]=bar`
- indexed=True:            `bat[0]=foo&bat[1]=bar`

Nested lists repeat the brackets (`key[][]=`). Brackets are part of the key
and therefore percent-encoded unless `encode_keys=False`.
"""

from __future__ import annotations

import copy
import re
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote_plus, unquote_plus

from restclient.config import DEFAULT_INDEXED_QUERIES

ParamsInput = Union[None, str, Mapping[Any, Any], "Params"]

_ARRAY_KEY = re.compile(r"^(.+)\[(\d*)\]$")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, Mapping):
        return list(value.values())
    if _is_sequence(value):
        return list(value)
    return [value]


def _collapse(slots: Dict[int, Any]) -> Union[List[Any], Dict[int, Any]]:
    # `a[]=x&a[]=y` becomes a list; anything sparse or out of order keeps its indices
    if list(slots) == list(range(len(slots))):
        return list(slots.values())
    return slots


def parse_query(query: str) -> Dict[str, Any]:
    """
    Parse a query string into a dict, stacking `name[]` / `name[i]` keys.

    Empty brackets append after the highest index seen so far; numeric
    brackets set that index and may overwrite an earlier value.
    """
    params: Dict[str, Any] = {}
    arrays: Dict[str, Dict[int, Any]] = {}

    for pair in query.split("&"):
        if not pair:
            continue
        raw_key, _, raw_value = pair.partition("=")
        key, value = unquote_plus(raw_key), unquote_plus(raw_value)

        match = _ARRAY_KEY.match(key)
        if match is None:
            params[key] = value
            arrays.pop(key, None)
            continue

        name, index = match.groups()
        slots = arrays.get(name)
        if slots is None:
            slots = arrays[name] = {}
            params[name] = slots
        if index == "":
            slots[max(slots) + 1 if slots else 0] = value
        else:
            slots[int(index)] = value

    return {
        key: _collapse(value) if key in arrays else value
        for key, value in params.items()
    }


def _merge_recursive(base: Mapping[Any, Any], incoming: Mapping[Any, Any]) -> Dict[Any, Any]:
    merged = copy.deepcopy(dict(base))
    for key, value in incoming.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
            continue
        current = merged[key]
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _merge_recursive(current, value)
        elif _is_sequence(current) or _is_sequence(value):
            merged[key] = _as_list(current) + copy.deepcopy(_as_list(value))
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Params(Mapping[Any, Any]):
    """
    Ordered query/body parameters.

    Args:
        params:
            A mapping, another Params (copied), or a pre-encoded query string.
        indexed:
            Serialize list elements as `key[i]` rather than `key[]`.
            Defaults to `restclient.config.DEFAULT_INDEXED_QUERIES`.
        encode_keys:
            Percent-encode keys (including their brackets). Default True.
    """

    def __init__(
        self,
        params: ParamsInput = None,
        *,
        indexed: Optional[bool] = None,
        encode_keys: Optional[bool] = None,
    ) -> None:
        self.indexed: bool = DEFAULT_INDEXED_QUERIES if indexed is None else indexed
        self.encode_keys: bool = True if encode_keys is None else encode_keys

        if isinstance(params, Params):
            self._params: Dict[Any, Any] = params.to_dict()
        elif isinstance(params, str):
            self._params = parse_query(params)
        else:
            self._params = copy.deepcopy(dict(params or {}))

    # Mapping interface ------------------------------------------------------

    def __getitem__(self, key: Any) -> Any:
        return self._params[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"Params({self._params!r}, indexed={self.indexed}, encode_keys={self.encode_keys})"

    def to_dict(self) -> Dict[Any, Any]:
        return copy.deepcopy(self._params)

    # Combination ------------------------------------------------------------

    def merge(self, params: ParamsInput) -> "Params":
        """
        Deep-merge `params` over this instance and return a new Params.

        Scalars in both are taken from `params`; when either side holds a
        list the values accumulate (ours first); nested mappings merge key
        by key. The result keeps this instance's flags.
        """
        other = params if isinstance(params, Params) else Params(params)
        return Params(
            _merge_recursive(self._params, other._params),
            indexed=self.indexed,
            encode_keys=self.encode_keys,
        )

    def with_flags(
        self,
        *,
        indexed: Optional[bool] = None,
        encode_keys: Optional[bool] = None,
    ) -> "Params":
        return Params(
            self,
            indexed=self.indexed if indexed is None else indexed,
            encode_keys=self.encode_keys if encode_keys is None else encode_keys,
        )

    # Serialization ----------------------------------------------------------

    def __str__(self) -> str:
        return self._build_query(self._params.items())

    def _build_query(self, pairs: Iterable[Tuple[Any, Any]]) -> str:
        encoded = (self._build_pair(key, value) for key, value in pairs)
        return "&".join(pair for pair in encoded if pair)

    def _build_pair(self, key: Any, value: Any) -> str:
        if isinstance(value, Mapping):
            items = list(value.items())
        elif _is_sequence(value):
            items = list(enumerate(value))
        else:
            return f"{self._encode_key(key)}={self._encode_value(value)}"

        return self._build_query(
            (f"{key}[{index}]" if self.indexed else f"{key}[]", item)
            for index, item in items
        )

    def _encode_key(self, key: Any) -> str:
        return quote_plus(str(key)) if self.encode_keys else str(key)

    @staticmethod
    def _encode_value(value: Any) -> str:
        if isinstance(value, Enum):
            value = value.value
        if value is None or value is False:
            return ""
        if value is True:
            return "1"
        if isinstance(value, (int, float)):
            return str(value)
        return quote_plus(str(value))


__all__ = ["Params", "ParamsInput", "parse_query"]
