"""
Decoders
========

Turning a response body into data.

A *format tag* is derived from the Content-Type subtype
(`application/json; charset=utf-8` -> `json`) and looked up in a
registry of decoder callables `(body: str) -> Any`.

Default decoders
----------------
text, plain, html   identity
json                json.loads
python              ast.literal_eval (Python literal serialization)

Structured decoders map an empty body (HEAD, 204) to None.
"""

from __future__ import annotations

import ast
import json
import re
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from restclient.config import DEFAULT_FORMAT, DEFAULT_FORMAT_REGEX
from restclient.errors import DecodingFormatError

Decoder = Callable[[str], Any]


def _allow_empty(decoder: Decoder) -> Decoder:
    def decode(body: str) -> Any:
        if not body.strip():
            return None
        return decoder(body)

    decode.__name__ = getattr(decoder, "__name__", "decode")
    return decode


DEFAULT_DECODERS: Mapping[str, Decoder] = MappingProxyType(
    {
        "text": str,
        "plain": str,
        "html": str,
        "json": _allow_empty(json.loads),
        "python": _allow_empty(ast.literal_eval),
    }
)


class FormatResolver:
    """
    Derive a format tag from a Content-Type value.

    `fixed` short-circuits detection entirely; otherwise the second group of
    `pattern` is the tag, and `default` is used when nothing matches.
    """

    def __init__(
        self,
        pattern: Union[str, "re.Pattern[str]"] = DEFAULT_FORMAT_REGEX,
        default: str = DEFAULT_FORMAT,
        fixed: Optional[str] = None,
    ) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.default = default
        self.fixed = fixed

    def resolve(self, content_type: Optional[str]) -> str:
        if self.fixed:
            return self.fixed
        match = self.pattern.search(content_type or "")
        if match is None:
            return self.default
        return match.group(2)


class DecoderRegistry:
    """
    Format tag -> decoder mapping.

    Starts from DEFAULT_DECODERS; entries passed in or registered later
    augment the defaults and overwrite on collision.
    """

    def __init__(self, decoders: Optional[Mapping[str, Decoder]] = None) -> None:
        self._decoders: Dict[str, Decoder] = dict(DEFAULT_DECODERS)
        if decoders:
            self._decoders.update(decoders)

    def register(self, format: str, decoder: Decoder) -> None:
        if not callable(decoder):
            raise TypeError(f"Decoder for {format!r} must be callable, got {type(decoder)!r}")
        self._decoders[format] = decoder

    def get(self, format: str) -> Decoder:
        """
        Raises:
            DecodingFormatError: if nothing is registered for `format`.
        """
        try:
            return self._decoders[format]
        except KeyError:
            raise DecodingFormatError(f"No decoder for format '{format}'", format=format) from None

    def formats(self) -> List[str]:
        return list(self._decoders)

    def __contains__(self, format: object) -> bool:
        return format in self._decoders


__all__ = [
    "Decoder",
    "DEFAULT_DECODERS",
    "DecoderRegistry",
    "FormatResolver",
]
