"""
HTTP transports for restclient.

This module exposes a minimal typed interface `RestClientTransport` used by
`RestClient` and a concrete httpx-based adapter `HttpxRestClientTransport`.

Notes:
- A transport returns the *raw* HTTP/1.x response text (status line(s),
  header block, blank line, body). Parsing is the Response's job.
- Network failures never raise out of `send()`; they come back as the
  `error` string of the TransportResult so the caller can still inspect
  whatever metadata exists.
- One call at a time per instance. `reset()` runs after every call so no
  state (cookies) leaks between requests.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import time

import httpx

HeaderPairs = Sequence[Tuple[str, str]]


@dataclass(frozen=True)
class TransportInfo:
    """
    Metadata about one round trip.

    Attributes:
        status_code:
            Final HTTP status code; 0 when no response arrived.
        url:
            Effective URL after any redirects the transport followed.
        total_time:
            Round trip duration in seconds.
        http_version:
            Protocol of the final response, e.g. "HTTP/1.1".
        redirect_count:
            Number of redirect hops followed.
    """

    status_code: int = 0
    url: str = ""
    total_time: float = 0.0
    http_version: str = ""
    redirect_count: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TransportResult:
    """Raw response text, error string (empty on success) and metadata."""

    raw: str = ""
    error: str = ""
    info: TransportInfo = field(default_factory=TransportInfo)


class RestClientTransport:
    """
    Minimal transport interface used by RestClient.

    Implementations must not raise for ordinary network failures; report
    them through `TransportResult.error` instead.
    """

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: HeaderPairs = (),
        body: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> TransportResult:
        raise NotImplementedError("RestClientTransport.send must be implemented by the runtime transport")

    def reset(self) -> None:
        """Drop per-call state before the next request."""

    def close(self) -> None:
        """Release the underlying connection resources."""

    def __enter__(self) -> "RestClientTransport":
        return self

    def __exit__(self, exc_type: Optional[type], exc: Optional[BaseException], tb: Optional[Any]) -> None:
        self.close()


# Concrete httpx adapter ----------------------------------------------------

def _status_line(response: httpx.Response) -> str:
    line = f"{response.http_version} {response.status_code}"
    if response.reason_phrase:
        line = f"{line} {response.reason_phrase}"
    return line


def render_raw_response(response: httpx.Response) -> str:
    """
    Rebuild HTTP/1.x response text from an httpx response.

    Each redirect hop contributes a bare status line block (like an interim
    `100 Continue`); the final response contributes its status line, its
    headers exactly as received (spelling and repeats kept), a blank line
    and the decoded body text.
    """
    lines: List[str] = []
    for hop in response.history:
        lines.append(_status_line(hop))
        lines.append("")
    lines.append(_status_line(response))
    for name, value in response.headers.raw:
        lines.append(f"{name.decode('latin-1')}: {value.decode('latin-1')}")
    lines.append("")
    return "\r\n".join(lines) + "\r\n" + response.text


class HttpxRestClientTransport(RestClientTransport):
    """
    Synchronous httpx-based implementation of RestClientTransport.

    Example:
        transport = HttpxRestClientTransport(follow_redirects=True)
        result = transport.send("GET", "https://api.example.com/v1/things")
        transport.close()

    `transport` is forwarded to `httpx.Client`, which lets tests plug in
    `httpx.MockTransport`.
    """

    def __init__(
        self,
        *,
        follow_redirects: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(follow_redirects=follow_redirects, transport=transport)

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: HeaderPairs = (),
        body: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> TransportResult:
        options: Dict[str, Any] = {"headers": list(headers), "content": body}
        if timeout is not None:
            options["timeout"] = timeout

        started = time.monotonic()
        try:
            resp = self._client.request(method, url, **options)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return TransportResult(
                raw="",
                error=str(exc) or type(exc).__name__,
                info=TransportInfo(url=url, total_time=time.monotonic() - started),
            )

        return TransportResult(
            raw=render_raw_response(resp),
            error="",
            info=TransportInfo(
                status_code=resp.status_code,
                url=str(resp.url),
                total_time=time.monotonic() - started,
                http_version=resp.http_version,
                redirect_count=len(resp.history),
            ),
        )

    def reset(self) -> None:
        self._client.cookies.clear()

    def close(self) -> None:
        self._client.close()


__all__ = [
    "HeaderPairs",
    "TransportInfo",
    "TransportResult",
    "RestClientTransport",
    "HttpxRestClientTransport",
    "render_raw_response",
]
