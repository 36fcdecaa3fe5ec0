"""Request construction: merges client-level and call-level settings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import IO, Any, Iterable, Mapping, Union

import requests
from requests.auth import HTTPBasicAuth
from requests.structures import CaseInsensitiveDict

from ._version import __version__
from .config import ClientConfig
from .errors import ConfigurationError, KeyConflictError
from .response import RECEIVE_FORMAT_MEDIA_TYPES

# RFC 7230 section 3.2.6 token.
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_REPEATED_SLASHES = re.compile(r"/+")

# Methods whose semantics forbid a request body.
BODYLESS_METHODS = frozenset({"GET", "HEAD", "DELETE", "OPTIONS", "TRACE"})

BodyStream = Union[IO[bytes], Iterable[bytes]]


def default_user_agent() -> str:
    return (
        f"simple-rest-client/{__version__} "
        f"python-requests/{requests.__version__}"
    )


def normalize_method(verb: str) -> str:
    """Return the upper-cased method token, rejecting invalid ones."""
    if not isinstance(verb, str) or not _METHOD_TOKEN.fullmatch(verb):
        raise ConfigurationError(f"Unknown HTTP method named {verb!r}!")
    return verb.upper()


def join_path(base_path: str | None, path: str | None) -> str:
    """Join ``base_path`` and ``path``, collapsing repeated separators."""
    return _REPEATED_SLASHES.sub("/", f"/{base_path or ''}/{path or ''}")


def merge_query(
    base_query: Mapping[str, Any], query: Mapping[str, Any] | None
) -> dict[str, str]:
    query = query or {}
    conflicting = [key for key in query if key in base_query]
    if conflicting:
        raise KeyConflictError(
            "Passed query parameters conflict with base_query parameters",
            conflicting,
        )
    merged = {str(k): str(v) for k, v in base_query.items()}
    merged.update({str(k): str(v) for k, v in query.items()})
    return merged


def merge_headers(
    base_headers: Mapping[str, Any],
    headers: Mapping[str, Any] | None,
    *,
    user_agent: str | None = None,
) -> CaseInsensitiveDict[str]:
    headers = headers or {}
    base_names = {str(name).lower() for name in base_headers}
    conflicting = [
        str(name) for name in headers if str(name).lower() in base_names
    ]
    if conflicting:
        raise KeyConflictError(
            "Passed headers conflict with base_headers", conflicting
        )
    merged: CaseInsensitiveDict[str] = CaseInsensitiveDict()
    merged["User-Agent"] = user_agent or default_user_agent()
    for name, value in base_headers.items():
        merged[str(name)] = str(value)
    for name, value in headers.items():
        merged[str(name)] = str(value)
    return merged


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to send one request, built fresh per call."""

    method: str
    url: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    body: bytes | None = None
    body_stream: BodyStream | None = None
    auth: HTTPBasicAuth | None = None

    def prepare(self) -> requests.PreparedRequest:
        """Build the transport-level request."""
        data = self.body if self.body is not None else self.body_stream
        return requests.Request(
            method=self.method,
            url=self.url,
            headers=dict(self.headers),
            params=dict(self.query),
            data=data,
            auth=self.auth,
        ).prepare()


def build_request(
    config: ClientConfig,
    verb: str,
    path: str = "/",
    *,
    query: Mapping[str, Any] | None = None,
    headers: Mapping[str, Any] | None = None,
    body: bytes | str | None = None,
    body_stream: BodyStream | None = None,
    receive_format: str | None = None,
) -> RequestDescriptor:
    """Merge ``config`` with call-level settings into a RequestDescriptor.

    Raises:
        ConfigurationError: On an invalid method, colliding query or header
            keys, a body for a body-less method, both ``body`` and
            ``body_stream``, or an unknown ``receive_format``.
    """
    method = normalize_method(verb)

    if body is not None and body_stream is not None:
        raise ConfigurationError(
            "body and body_stream are mutually exclusive"
        )
    if method in BODYLESS_METHODS and (
        body is not None or body_stream is not None
    ):
        raise ConfigurationError(f"{method} requests cannot carry a body")
    if isinstance(body, str):
        body = body.encode("utf-8")

    headers = dict(headers or {})
    if receive_format is not None:
        media_type = RECEIVE_FORMAT_MEDIA_TYPES.get(receive_format)
        if media_type is None:
            raise ConfigurationError(
                f"Unknown receive_format: {receive_format!r}."
            )
        if any(str(name).lower() == "accept" for name in headers):
            raise KeyConflictError(
                "Passed headers conflict with receive_format", ["Accept"]
            )
        headers["Accept"] = media_type

    request_path = join_path(config.base_path, path)
    auth = None
    if config.username is not None:
        # Encoded up front; requests falls back to latin-1 for str values.
        auth = HTTPBasicAuth(
            config.username.encode("utf-8"),
            (config.password or "").encode("utf-8"),
        )

    return RequestDescriptor(
        method=method,
        url=f"{config.base_url}{request_path}",
        path=request_path,
        query=MappingProxyType(merge_query(config.base_query, query)),
        headers=merge_headers(
            config.base_headers, headers, user_agent=config.user_agent
        ),
        body=body,
        body_stream=body_stream,
        auth=auth,
    )
