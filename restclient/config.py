"""
Configuration
=============

Client-wide defaults and their environment loader.

As with authentication context, configuration is attached to a client
instance rather than kept as global state. This module provides:

- ClientConfig: typed, immutable client defaults
- ClientConfig.from_env(): convenience loader for server-side usage
- VERSION / DEFAULT_USER_AGENT and the other library-wide constants
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
import os
import platform

import httpx

from restclient.errors import ConfigurationError

VERSION = "0.2.0"

DEFAULT_USER_AGENT = (
    f"Python RestClient/{VERSION} ({platform.system()}) "
    f"Python/{platform.python_version()} httpx/{httpx.__version__}"
)
DEFAULT_TIMEOUT = 10.0

# Single source of truth for `key[0]=` vs `key[]=` array encoding; Params,
# Resource and the client all fall back to this value.
DEFAULT_INDEXED_QUERIES = False

# The second group is the format tag: application/json -> json
DEFAULT_FORMAT_REGEX = r"(\w+)/(\w+)(;.+)?"
DEFAULT_FORMAT = "text"

# Environment variable names.
ENV_BASE_URL = "RESTCLIENT_BASE_URL"
ENV_USER_AGENT = "RESTCLIENT_USER_AGENT"
ENV_TIMEOUT = "RESTCLIENT_TIMEOUT"
ENV_INDEXED_QUERIES = "RESTCLIENT_INDEXED_QUERIES"
ENV_FOLLOW_REDIRECTS = "RESTCLIENT_FOLLOW_REDIRECTS"
ENV_FORMAT = "RESTCLIENT_FORMAT"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _parse_timeout(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class ClientConfig:
    """
    Default options for a RestClient.

    Attributes:
        base_url:
            URL every request is resolved against.
        user_agent:
            Value of the User-Agent header unless a request supplies one.
        timeout:
            Overall per-request timeout in seconds, handed to the transport.
        indexed_queries:
            Emit `key[0]=` instead of `key[]=` for array parameters.
        follow_redirects:
            Let the default transport follow redirects.
        format:
            Fixed response format tag; disables Content-Type detection.
    """

    base_url: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    indexed_queries: bool = DEFAULT_INDEXED_QUERIES
    follow_redirects: bool = False
    format: Optional[str] = None

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Load client defaults from environment variables.

        All variables are optional:
            - RESTCLIENT_BASE_URL
            - RESTCLIENT_USER_AGENT
            - RESTCLIENT_TIMEOUT
            - RESTCLIENT_INDEXED_QUERIES
            - RESTCLIENT_FOLLOW_REDIRECTS
            - RESTCLIENT_FORMAT

        Raises:
            ConfigurationError: if a numeric or boolean value is malformed.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        timeout = env.get(ENV_TIMEOUT)
        indexed = env.get(ENV_INDEXED_QUERIES)
        redirects = env.get(ENV_FOLLOW_REDIRECTS)

        return cls(
            base_url=env.get(ENV_BASE_URL) or defaults.base_url,
            user_agent=env.get(ENV_USER_AGENT) or defaults.user_agent,
            timeout=_parse_timeout(ENV_TIMEOUT, timeout) if timeout else defaults.timeout,
            indexed_queries=(
                _parse_bool(ENV_INDEXED_QUERIES, indexed)
                if indexed is not None
                else defaults.indexed_queries
            ),
            follow_redirects=(
                _parse_bool(ENV_FOLLOW_REDIRECTS, redirects)
                if redirects is not None
                else defaults.follow_redirects
            ),
            format=env.get(ENV_FORMAT) or None,
        )


__all__ = [
    "ClientConfig",
    "VERSION",
    "DEFAULT_USER_AGENT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_INDEXED_QUERIES",
    "DEFAULT_FORMAT_REGEX",
    "DEFAULT_FORMAT",
    "ENV_BASE_URL",
    "ENV_USER_AGENT",
    "ENV_TIMEOUT",
    "ENV_INDEXED_QUERIES",
    "ENV_FOLLOW_REDIRECTS",
    "ENV_FORMAT",
]
