"""
Response
========

Raw HTTP response text -> status lines, headers, body -> decoded data.

Parsing
-------

The raw buffer is read line by line:

- a line starting with `HTTP` is a status line (there may be several:
  `100 Continue` or redirect hops precede the final one)
- any other non-blank line is a `Name: value` header; repeated names
  (compared case-insensitively, `-` == `_`) collect into a list under the
  first spelling seen
- blank lines are skipped until a header has been recorded; the first blank
  line after that ends the header block and the rest of the buffer,
  verbatim, is the body

Decoding
--------

`decode()` runs once and caches its result. The decoder is looked up by
`format` (derived from the last Content-Type header) unless one is passed
in explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional
import logging
import warnings

from restclient.core.decoders import Decoder, DecoderRegistry, FormatResolver
from restclient.core.headers import Headers, normalize_header_name
from restclient.errors import DecodingError, ImmutabilityViolation, TransportError
from restclient.http_client import TransportInfo

if TYPE_CHECKING:  # pragma: no cover
    from restclient.core.request import Request

logger = logging.getLogger(__name__)

_DEFAULT_REGISTRY = DecoderRegistry()
_DEFAULT_RESOLVER = FormatResolver()


@dataclass(frozen=True)
class ParsedResponse:
    """Structured parts of a raw response buffer."""

    status_lines: List[str] = field(default_factory=list)
    headers: Headers = field(default_factory=Headers)
    body: str = ""
    content_type: str = ""


def parse_raw_response(raw: str) -> ParsedResponse:
    """Split a raw HTTP/1.x response into status lines, headers and body."""
    status_lines: List[str] = []
    headers = Headers()
    spellings: Dict[str, str] = {}
    body = ""

    pos = 0
    while pos < len(raw):
        end = raw.find("\n", pos)
        if end == -1:
            line, pos = raw[pos:], len(raw)
        else:
            line, pos = raw[pos:end], end + 1

        if not line.strip():
            if len(headers):
                body = raw[pos:]
                break
            continue

        if line.startswith("HTTP"):
            status_lines.append(line.strip())
            continue

        name, sep, value = line.partition(":")
        if not sep:
            logger.debug("skipping malformed header line %r", line)
            continue
        name = name.strip()
        key = spellings.setdefault(normalize_header_name(name), name)
        headers.add(key, value.strip())

    content_type = headers.lookup("content-type") or ""
    if isinstance(content_type, list):
        content_type = content_type[-1]

    return ParsedResponse(
        status_lines=status_lines,
        headers=headers.freeze(),
        body=body,
        content_type=content_type,
    )


class Response:
    """
    A response from the server.

    Attributes:
        request:
            The Request that produced this response, if any.
        raw:
            Raw response text including status lines and headers.
        error:
            Transport error message; empty on success.
        info:
            TransportInfo (status code, effective URL, timing, ...).
        status_code:
            Final HTTP status code, 0 when nothing was received.
        success / fail:
            Whether the status code is 2xx.
        status_lines, headers, body, content_type:
            Filled by `parse()`.
        data:
            Decoded body, produced by `decode()` or on first access.
    """

    def __init__(
        self,
        request: Optional["Request"] = None,
        raw: Optional[str] = None,
        error: str = "",
        info: Optional[TransportInfo] = None,
    ) -> None:
        self.request = request
        self.raw: str = raw or ""
        self.error: str = error
        self.info: TransportInfo = info or TransportInfo()
        self.status_code: int = self.info.status_code
        self.success: bool = 200 <= self.status_code < 300
        self.fail: bool = not self.success

        self.status_lines: List[str] = []
        self.headers: Headers = Headers().freeze()
        self.body: str = ""
        self.content_type: str = ""

        self._format: Optional[str] = None
        self._parsed = False
        self._decoded = False
        self._data: Any = None

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"

    # Parsing ----------------------------------------------------------------

    def parse(self) -> "Response":
        """Fill status_lines, headers, body and content_type (once)."""
        if self._parsed:
            return self
        parsed = parse_raw_response(self.raw)
        self.status_lines = parsed.status_lines
        self.headers = parsed.headers
        self.body = parsed.body
        self.content_type = parsed.content_type
        self._parsed = True
        return self

    @property
    def format(self) -> str:
        """
        Format tag of the body, e.g. `application/json` -> `json`.

        Detected from the Content-Type with the default resolver unless a
        client has set the tag it resolved.
        """
        if self._format is not None:
            return self._format
        return _DEFAULT_RESOLVER.resolve(self.content_type)

    @format.setter
    def format(self, value: Optional[str]) -> None:
        self._format = value

    # Decoding ---------------------------------------------------------------

    def decode(self, decoder: Optional[Decoder] = None) -> Any:
        """
        Decode the body and cache the result.

        Raises:
            DecodingFormatError: no decoder registered for `format`.
            DecodingError: the decoder itself failed.
        """
        if self._decoded:
            return self._data
        self.parse()

        if decoder is None:
            try:
                decoder = _DEFAULT_REGISTRY.get(self.format)
            except DecodingError as exc:
                exc.response = self
                raise

        try:
            self._data = decoder(self.body)
        except Exception as exc:
            raise DecodingError(
                f"Could not decode response body: {exc}",
                response=self,
            ) from exc
        self._decoded = True
        return self._data

    @property
    def data(self) -> Any:
        return self.decode()

    def raise_for_error(self) -> "Response":
        """Raise TransportError if the request failed at the network level."""
        if self.error:
            raise TransportError(self.error)
        return self

    # Read-only access to data -----------------------------------------------

    def __getitem__(self, key: Any) -> Any:
        return self.data[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data)

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __setitem__(self, key: Any, value: Any) -> None:
        raise ImmutabilityViolation("Response data is immutable.")

    def __delitem__(self, key: Any) -> None:
        raise ImmutabilityViolation("Response data is immutable.")

    # Legacy -----------------------------------------------------------------

    @property
    def response_status_lines(self) -> List[str]:
        """Deprecated alias of `status_lines`."""
        warnings.warn(
            "`response_status_lines` is deprecated, use `status_lines`",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.status_lines

    def decode_response(self) -> Any:
        """Deprecated: use the `data` property."""
        warnings.warn(
            "`decode_response()` is deprecated, use the `data` property",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.data


__all__ = ["ParsedResponse", "Response", "parse_raw_response"]
