"""Configuration model for SimpleRESTClient."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .errors import ConfigurationError

HTTP_PORT = 80
HTTPS_PORT = 443

DEFAULT_OPEN_TIMEOUT_SECONDS = 5.0
DEFAULT_READ_TIMEOUT_SECONDS = 30.0


def _empty_mapping() -> Mapping[str, Any]:
    """Return immutable empty mapping."""

    return MappingProxyType({})


@dataclass(frozen=True)
class ClientConfig:
    """Client-wide defaults applied to every request.

    ``port`` and ``use_tls`` are resolved against each other: an unset port
    defaults to 443 under TLS and 80 otherwise, and an unset TLS flag is
    switched on when the port is 443.
    """

    address: str
    port: int | None = None
    use_tls: bool | None = None
    base_path: str | None = None
    base_query: Mapping[str, str] = field(default_factory=_empty_mapping)
    base_headers: Mapping[str, str] = field(default_factory=_empty_mapping)
    username: str | None = None
    password: str | None = None
    expected_status_codes: Mapping[str, Any] = field(
        default_factory=_empty_mapping
    )
    user_agent: str | None = None
    open_timeout_seconds: float | None = DEFAULT_OPEN_TIMEOUT_SECONDS
    read_timeout_seconds: float | None = DEFAULT_READ_TIMEOUT_SECONDS
    verify_tls: bool = True
    # Values as passed in, before port/TLS resolution.
    _requested_port: int | None = field(
        default=None, init=False, repr=False, compare=False
    )
    _requested_use_tls: bool | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self.address:
            raise ConfigurationError("address must be a non-empty string")
        if self.port is not None and not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port!r}.")
        if (
            self.open_timeout_seconds is not None
            and self.open_timeout_seconds <= 0
        ):
            raise ConfigurationError(
                "open_timeout_seconds must be > 0 when provided"
            )
        if (
            self.read_timeout_seconds is not None
            and self.read_timeout_seconds <= 0
        ):
            raise ConfigurationError(
                "read_timeout_seconds must be > 0 when provided"
            )

        object.__setattr__(self, "_requested_port", self.port)
        object.__setattr__(self, "_requested_use_tls", self.use_tls)
        use_tls = self.use_tls
        if use_tls is None:
            use_tls = self.port == HTTPS_PORT
        port = self.port
        if port is None:
            port = HTTPS_PORT if use_tls else HTTP_PORT
        object.__setattr__(self, "use_tls", use_tls)
        object.__setattr__(self, "port", port)

        lowered = [name.lower() for name in self.base_headers]
        if len(set(lowered)) != len(lowered):
            raise ConfigurationError(
                "base_headers contains duplicate header names "
                "(header names are case-insensitive)"
            )

        # Freeze copies so callers mutating their dicts cannot leak in.
        object.__setattr__(
            self, "base_query", MappingProxyType(dict(self.base_query))
        )
        object.__setattr__(
            self,
            "base_headers",
            MappingProxyType(
                {str(k): str(v) for k, v in self.base_headers.items()}
            ),
        )
        object.__setattr__(
            self,
            "expected_status_codes",
            MappingProxyType(
                {
                    verb.upper(): expectation
                    for verb, expectation in self.expected_status_codes.items()
                }
            ),
        )

    @property
    def scheme(self) -> str:
        return "https" if self.use_tls else "http"

    @property
    def default_port(self) -> int:
        return HTTPS_PORT if self.use_tls else HTTP_PORT

    @property
    def base_url(self) -> str:
        """Scheme and authority, e.g. ``https://api.example.com:8443``."""
        host = self.address
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        if self.port == self.default_port:
            return f"{self.scheme}://{host}"
        return f"{self.scheme}://{host}:{self.port}"

    def replace(self, **changes: Any) -> "ClientConfig":
        """Return a copy with ``changes`` applied.

        A port or TLS flag that was derived rather than given is derived
        again, so ``replace(use_tls=True)`` on a port-80 default moves to 443.
        """
        changes.setdefault("port", self._requested_port)
        changes.setdefault("use_tls", self._requested_use_tls)
        return dataclasses.replace(self, **changes)
