"""
RestClient
==========

High-level client tying the core together:

    base URL + per-call URL   -> Resource.merge
    default + per-call params -> Params.merge (deep)
    default + per-call headers-> Headers.merge (shallow)
    -> Request -> transport -> Response (parse + decode)

Usage
-----

    with RestClient("https://api.example.com", headers={"Accept": "application/json"}) as api:
        resp = api.get("/things", {"page": 2})
        if resp.success:
            print(resp.data)

Subclasses may declare their defaults as class attributes (`base_url`,
`headers`, `params`, `decoders`, `allowed_verbs`, ...). For every option a
keyword argument wins over the class attribute, which wins over the
ClientConfig.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Mapping, Optional, Tuple, Union
import logging
import warnings

from restclient.config import DEFAULT_FORMAT_REGEX, ClientConfig
from restclient.core.decoders import Decoder, DecoderRegistry, FormatResolver
from restclient.core.headers import Headers, HeadersInput
from restclient.core.params import Params, ParamsInput
from restclient.core.request import Request, Verb
from restclient.core.resource import Resource
from restclient.core.response import Response
from restclient.errors import BadMethodError, ConfigurationError, DecodingError
from restclient.http_client import HttpxRestClientTransport, RestClientTransport
from restclient.logging_utils import get_logger

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

URLInput = Union[None, str, Resource]
MethodInput = Union[str, Verb]


class RestClient:
    """
    REST client.

    Args:
        base_url:
            URL every request is resolved against.
        headers / params:
            Defaults merged into every request.
        user_agent, timeout, indexed_queries:
            See ClientConfig.
        allowed_verbs:
            Verbs `execute()` accepts; defaults to every Verb.
        decoders:
            Extra format -> decoder entries on top of the defaults.
        format:
            Fixed format tag; disables Content-Type detection.
        format_regex:
            Pattern whose second group is the format tag.
        config:
            Fallback for options not given otherwise.
        transport:
            RestClientTransport; defaults to HttpxRestClientTransport.
        logger:
            Logger to use instead of the package logger.

    A client is reusable across calls but must not be shared by two
    in-flight requests at once.
    """

    base_url: Any = None
    headers: Any = {}
    params: Any = {}
    user_agent: Optional[str] = None
    timeout: Optional[float] = None
    indexed_queries: Optional[bool] = None
    allowed_verbs: Any = tuple(Verb)
    decoders: Any = {}
    format: Optional[str] = None
    format_regex: str = DEFAULT_FORMAT_REGEX

    _option_keys: ClassVar[Tuple[str, ...]] = (
        "base_url",
        "headers",
        "params",
        "user_agent",
        "timeout",
        "indexed_queries",
        "allowed_verbs",
        "format",
        "format_regex",
    )

    def __init__(
        self,
        base_url: URLInput = None,
        headers: HeadersInput = None,
        params: ParamsInput = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        indexed_queries: Optional[bool] = None,
        *,
        allowed_verbs: Optional[Iterable[MethodInput]] = None,
        decoders: Optional[Mapping[str, Decoder]] = None,
        format: Optional[str] = None,
        format_regex: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[RestClientTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        cls = type(self)
        self.config = config or ClientConfig()
        self.logger = logger or get_logger()

        self.user_agent = _first(user_agent, cls.user_agent, self.config.user_agent)
        self.timeout = _first(timeout, cls.timeout, self.config.timeout)
        self.indexed_queries = _first(indexed_queries, cls.indexed_queries, self.config.indexed_queries)
        _check_timeout(self.timeout)

        self.allowed_verbs = self._coerce_verbs(_first(allowed_verbs, cls.allowed_verbs))
        self.format = _first(format, cls.format, self.config.format)
        self.format_regex = _first(format_regex, cls.format_regex)

        self.base_url = self._coerce_base_url(_first(base_url, cls.base_url, self.config.base_url))
        self.headers = Headers(cls.headers).merge(headers)
        self.params = Params(cls.params, indexed=self.indexed_queries).merge(params)

        self.decoders = DecoderRegistry(cls.decoders)
        for name, decoder in (decoders or {}).items():
            self.decoders.register(name, decoder)

        self.transport = transport or HttpxRestClientTransport(
            follow_redirects=self.config.follow_redirects
        )

    # Option coercion --------------------------------------------------------

    def _coerce_base_url(self, base_url: URLInput) -> Resource:
        if isinstance(base_url, Resource):
            return base_url.with_query(base_url.query.with_flags(indexed=self.indexed_queries))
        return Resource(base_url or "", indexed=self.indexed_queries)

    @staticmethod
    def _coerce_verbs(verbs: Iterable[MethodInput]) -> Tuple[Verb, ...]:
        try:
            return tuple(Verb.coerce(verb) for verb in verbs)
        except BadMethodError as exc:
            raise ConfigurationError(f"Invalid allowed_verbs entry: {exc}") from exc

    def _resolver(self) -> FormatResolver:
        return FormatResolver(self.format_regex, fixed=self.format)

    # Decoders ---------------------------------------------------------------

    def register_decoder(self, format: str, decoder: Decoder) -> None:
        """Register (or replace) the decoder for a response format tag."""
        self.decoders.register(format, decoder)

    def get_decoder(self, format: str) -> Decoder:
        """
        Raises:
            DecodingFormatError: if no decoder is registered for `format`.
        """
        decoder = self.decoders.get(format)
        self.logger.debug("using decoder %r for format %r", decoder, format)
        return decoder

    # Requests ---------------------------------------------------------------

    def execute(
        self,
        method: MethodInput = Verb.GET,
        url: URLInput = None,
        params: ParamsInput = None,
        headers: HeadersInput = None,
    ) -> Response:
        """
        Build a Request from defaults plus per-call values and send it.

        Args:
            method:
                HTTP verb, case-insensitive; must be in `allowed_verbs`.
            url:
                Resolved against `base_url`.
            params:
                A mapping/Params is deep-merged onto the default params. A
                string is treated as pre-encoded and used as-is, without
                the defaults.
            headers:
                Shallow-merged onto the default headers.

        Raises:
            BadMethodError: unknown or disallowed verb (before any I/O).
            DecodingError: the body could not be decoded; `exc.response`
                holds the parsed Response.
        """
        verb = Verb.coerce(method)
        if verb not in self.allowed_verbs:
            raise BadMethodError(f"Method {verb.value} is not allowed on {type(self).__name__}")

        target = self.base_url.merge(url if isinstance(url, Resource) else Resource(url or ""))

        if isinstance(params, str):
            request_params: Union[Params, str] = params
        else:
            request_params = self.params.merge(params)

        request = Request(
            method=verb,
            url=target,
            params=request_params,
            headers=self.headers.merge(headers).freeze(),
        )
        self.logger.debug("%s %s", verb.value, target)
        return self.send(request)

    def send(self, request: Request) -> Response:
        """Execute a prepared Request and return the parsed, decoded Response."""
        headers = request.headers.copy()
        if headers.lookup("user-agent") is None and self.user_agent:
            headers["User-Agent"] = self.user_agent

        body: Optional[str] = None
        if request.has_body:
            url = str(request.url)
            body = str(request.params)
            if body and headers.lookup("content-type") is None:
                headers["Content-Type"] = FORM_CONTENT_TYPE
        else:
            url = self._query_url(request)

        self.logger.debug("request headers: %s", dict(headers.items_multi()))
        try:
            result = self.transport.send(
                request.method.value,
                url,
                headers=headers.items_multi(),
                body=body,
                timeout=self.timeout,
            )
            if result.error:
                self.logger.warning("%s %s failed: %s", request.method.value, url, result.error)

            response = Response(request=request, raw=result.raw, error=result.error, info=result.info)
            response.parse()
            fmt = self._resolver().resolve(response.content_type)
            response.format = fmt
            try:
                response.decode(self.get_decoder(fmt))
            except DecodingError as exc:
                exc.response = response
                raise
            return response
        finally:
            self.transport.reset()

    @staticmethod
    def _query_url(request: Request) -> str:
        if isinstance(request.params, Params):
            if not len(request.params):
                return str(request.url)
            return str(request.url.with_query(request.url.query.merge(request.params)))

        url = str(request.url)
        if not request.params:
            return url
        separator = "&" if len(request.url.query) else "?"
        return f"{url}{separator}{request.params}"

    # Verb wrappers ----------------------------------------------------------

    def get(self, url: URLInput = None, params: ParamsInput = None, headers: HeadersInput = None) -> Response:
        return self.execute(Verb.GET, url, params, headers)

    def post(self, url: URLInput = None, params: ParamsInput = None, headers: HeadersInput = None) -> Response:
        return self.execute(Verb.POST, url, params, headers)

    def put(self, url: URLInput = None, params: ParamsInput = None, headers: HeadersInput = None) -> Response:
        return self.execute(Verb.PUT, url, params, headers)

    def delete(self, url: URLInput = None, params: ParamsInput = None, headers: HeadersInput = None) -> Response:
        return self.execute(Verb.DELETE, url, params, headers)

    def patch(self, url: URLInput = None, params: ParamsInput = None, headers: HeadersInput = None) -> Response:
        return self.execute(Verb.PATCH, url, params, headers)

    def head(self, url: URLInput = None, params: ParamsInput = None, headers: HeadersInput = None) -> Response:
        return self.execute(Verb.HEAD, url, params, headers)

    def options(self, url: URLInput = None, params: ParamsInput = None, headers: HeadersInput = None) -> Response:
        return self.execute(Verb.OPTIONS, url, params, headers)

    # Legacy -----------------------------------------------------------------

    @property
    def parameters(self) -> Params:
        """Deprecated alias of `params`."""
        warnings.warn("`parameters` is deprecated, use `params`", DeprecationWarning, stacklevel=2)
        return self.params

    def set_option(self, key: str, value: Any) -> None:
        """
        Deprecated: pass options to the constructor or set them on a subclass.

        Raises:
            ConfigurationError: if `key` is not a known option.
        """
        warnings.warn(
            "set_option() is deprecated, set options via the constructor or on a subclass",
            DeprecationWarning,
            stacklevel=2,
        )
        if key not in self._option_keys:
            raise ConfigurationError(f"'{key}' is not a valid option.")

        if key == "base_url":
            value = self._coerce_base_url(value)
        elif key == "headers":
            value = Headers(value)
        elif key == "params":
            value = Params(value, indexed=self.indexed_queries)
        elif key == "allowed_verbs":
            value = self._coerce_verbs(value)
        elif key == "timeout":
            _check_timeout(value)
        elif key == "indexed_queries":
            value = bool(value)
            self.base_url = self.base_url.with_query(self.base_url.query.with_flags(indexed=value))
            self.params = self.params.with_flags(indexed=value)
        setattr(self, key, value)

    # Lifecycle --------------------------------------------------------------

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, exc_type: Optional[type], exc: Optional[BaseException], tb: Optional[Any]) -> None:
        self.close()


def _check_timeout(timeout: Optional[float]) -> None:
    if timeout is not None and timeout <= 0:
        raise ConfigurationError(f"timeout must be positive, got {timeout!r}")


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


__all__ = ["RestClient", "FORM_CONTENT_TYPE"]
