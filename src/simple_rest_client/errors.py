"""Error types raised by the simple_rest_client package."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from .response import Response


class SimpleRESTClientError(Exception):
    """Base exception for all library errors."""


class ConfigurationError(SimpleRESTClientError, ValueError):
    """Invalid client or request configuration.

    Raised while building a request, before any network I/O happens.
    """


class KeyConflictError(ConfigurationError):
    """Request-level keys collide with client-level base keys."""

    def __init__(self, message: str, keys: Iterable[str]) -> None:
        self.keys = tuple(keys)
        super().__init__(f"{message}: {', '.join(self.keys)}.")


class UnexpectedStatusCode(SimpleRESTClientError):
    """Raised when an unexpected HTTP status code was returned."""

    def __init__(self, expected_status_code: Any, response: Response) -> None:
        super().__init__(expected_status_code, response)
        self.expected_status_code = expected_status_code
        self.response = response

    def __str__(self) -> str:
        return (
            f"Expected HTTP status code to be {self.expected_status_code!r}, "
            f"but got {self.response.status_code}."
        )


class UnexpectedContentType(SimpleRESTClientError):
    """Raised when an unexpected content type was returned."""

    def __init__(self, expected_content_type: str, response: Response) -> None:
        super().__init__(expected_content_type, response)
        self.expected_content_type = expected_content_type
        self.response = response

    def __str__(self) -> str:
        return (
            f"Expected content type to be {self.expected_content_type!r}, "
            f"but got {self.response.headers.get('Content-Type')!r}."
        )


class HookError(SimpleRESTClientError):
    """An around-request hook misused its continuation."""
