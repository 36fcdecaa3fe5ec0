"""Helpers for building typed REST API clients on top of requests."""

from ._version import __version__
from .client import DEFAULT, SimpleRESTClient, TransportAttributes
from .config import ClientConfig
from .errors import (
    ConfigurationError,
    HookError,
    KeyConflictError,
    SimpleRESTClientError,
    UnexpectedContentType,
    UnexpectedStatusCode,
)
from .request import RequestDescriptor, build_request
from .response import Response
from .status import (
    DEFAULT_EXPECTED_STATUS_CODES,
    StatusClass,
    is_client_error,
    is_informational,
    is_redirection,
    is_server_error,
    is_successful,
    validate_status_code,
)

__all__ = [
    "DEFAULT",
    "DEFAULT_EXPECTED_STATUS_CODES",
    "ClientConfig",
    "ConfigurationError",
    "HookError",
    "KeyConflictError",
    "RequestDescriptor",
    "Response",
    "SimpleRESTClient",
    "SimpleRESTClientError",
    "StatusClass",
    "TransportAttributes",
    "UnexpectedContentType",
    "UnexpectedStatusCode",
    "__version__",
    "build_request",
    "is_client_error",
    "is_informational",
    "is_redirection",
    "is_server_error",
    "is_successful",
    "validate_status_code",
]
