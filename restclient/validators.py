"""
Request specs
=============

Explicit parameter/header declarations for domain clients.

Instead of decorating methods, a client builds a RequestSpec once and runs
per-call input through it:

    FORECAST = RequestSpec(
        params=[ParamSpec("units", allowed=Unit, default="us")],
        headers=[HeaderSpec("Accept", "application/geo+json")],
    )

    def get_forecast(self, location, params=None):
        params, headers = FORECAST.apply(params)
        return self.get(f"/gridpoints/{location}/forecast", params, headers)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from restclient.core.headers import Headers, HeadersInput
from restclient.core.params import Params, ParamsInput
from restclient.errors import InvalidArgumentError

_SUPPORTED_TYPES = (int, float, str, list)


@dataclass(frozen=True)
class ParamSpec:
    """
    Declares one query/body parameter.

    Attributes:
        key:
            Parameter name.
        type:
            One of int, float, str, list.
        allowed:
            Iterable of permitted values, or an Enum class whose member
            values are permitted. None allows anything.
        default:
            Value filled in when the parameter is missing (None: leave out).
    """

    key: str
    type: type = str
    allowed: Any = None
    default: Any = None

    def __post_init__(self) -> None:
        if self.type not in _SUPPORTED_TYPES:
            raise InvalidArgumentError(
                f"ParamSpec {self.key!r}: type must be one of int, float, str, list"
            )

    def allowed_values(self) -> Optional[Tuple[Any, ...]]:
        if self.allowed is None:
            return None
        if isinstance(self.allowed, type) and issubclass(self.allowed, Enum):
            return tuple(member.value for member in self.allowed)
        return tuple(
            item.value if isinstance(item, Enum) else item for item in self.allowed
        )

    def is_allowed(self, value: Any) -> bool:
        """Always true when no allowed values are declared."""
        allowed = self.allowed_values()
        if allowed is None:
            return True
        if isinstance(value, Enum):
            value = value.value
        return value in allowed

    def validate(self, value: Any) -> Any:
        if isinstance(value, Enum):
            value = value.value
        if self.type is float:
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        elif self.type is int:
            ok = isinstance(value, int) and not isinstance(value, bool)
        elif self.type is list:
            ok = isinstance(value, (list, tuple))
        else:
            ok = isinstance(value, str)
        if not ok:
            raise InvalidArgumentError(
                f"Parameter {self.key!r} must be {self.type.__name__}, got {type(value).__name__}"
            )

        values = value if self.type is list else [value]
        for item in values:
            if not self.is_allowed(item):
                raise InvalidArgumentError(
                    f"Parameter {self.key!r} does not allow {item!r}; allowed: {self.allowed_values()}"
                )
        return value


@dataclass(frozen=True)
class HeaderSpec:
    """A header that is always sent with a given value."""

    key: str
    value: str


@dataclass(frozen=True)
class RequestSpec:
    """Bundle of ParamSpecs and HeaderSpecs applied to per-call input."""

    params: Sequence[ParamSpec] = ()
    headers: Sequence[HeaderSpec] = ()

    def apply(
        self,
        params: ParamsInput = None,
        headers: HeadersInput = None,
    ) -> Tuple[Params, Headers]:
        """
        Fill defaults, validate declared params and enforce headers.

        Undeclared params and headers pass through untouched.

        Raises:
            InvalidArgumentError: a declared param has the wrong type or a
                value outside its allowed set.
        """
        source = params if isinstance(params, Params) else Params(params)
        data = source.to_dict()
        for spec in self.params:
            if spec.key in data:
                data[spec.key] = spec.validate(data[spec.key])
            elif spec.default is not None:
                data[spec.key] = spec.validate(spec.default)

        result_headers = Headers(headers)
        for header in self.headers:
            result_headers[header.key] = header.value

        return (
            Params(data, indexed=source.indexed, encode_keys=source.encode_keys),
            result_headers,
        )


__all__ = ["ParamSpec", "HeaderSpec", "RequestSpec"]
