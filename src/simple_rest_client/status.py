"""HTTP status code expectations and validation."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Collection, Mapping, Union

from .errors import ConfigurationError, UnexpectedStatusCode

if TYPE_CHECKING:
    from .response import Response


class StatusClass(str, Enum):
    """Symbolic HTTP status code classes (RFC 7231 section 6)."""

    INFORMATIONAL = "informational"
    SUCCESSFUL = "successful"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"

    def __repr__(self) -> str:
        return repr(self.value)

    @property
    def codes(self) -> range:
        return STATUS_CLASS_RANGES[self]


STATUS_CLASS_RANGES: Mapping[StatusClass, range] = MappingProxyType(
    {
        StatusClass.INFORMATIONAL: range(100, 200),
        StatusClass.SUCCESSFUL: range(200, 300),
        StatusClass.REDIRECTION: range(300, 400),
        StatusClass.CLIENT_ERROR: range(400, 500),
        StatusClass.SERVER_ERROR: range(500, 600),
    }
)

StatusExpectation = Union[
    None,
    int,
    str,
    StatusClass,
    range,
    Collection[int],
    Callable[["Response"], bool],
]

_BODY_METHODS_CODES = (200, 201, 202, 204, 205)

DEFAULT_EXPECTED_STATUS_CODES: Mapping[str, StatusExpectation] = (
    MappingProxyType(
        {
            "GET": 200,
            "HEAD": 200,
            "POST": _BODY_METHODS_CODES,
            "PUT": _BODY_METHODS_CODES,
            "DELETE": (200, 202, 204),
            "OPTIONS": (200, 204),
            "TRACE": 200,
            "PATCH": _BODY_METHODS_CODES,
        }
    )
)
FALLBACK_EXPECTED_STATUS_CODE = StatusClass.SUCCESSFUL


def default_expected_status_code(
    verb: str,
    overrides: Mapping[str, StatusExpectation] | None = None,
) -> StatusExpectation:
    """Return the expectation used when a request does not name one."""
    verb = verb.upper()
    if overrides and verb in overrides:
        return overrides[verb]
    return DEFAULT_EXPECTED_STATUS_CODES.get(
        verb, FALLBACK_EXPECTED_STATUS_CODE
    )


def _status_class(symbol: str) -> StatusClass:
    try:
        return StatusClass(symbol)
    except ValueError:
        raise ConfigurationError(
            f"Invalid expected_status_code symbol: {symbol!r}."
        ) from None


def _accepted_codes(expectation: Any) -> Collection[int]:
    """Resolve a numeric expectation into a membership-testable collection."""
    if isinstance(expectation, bool):
        raise ConfigurationError(
            f"Invalid expected_status_code argument: {expectation!r}."
        )
    if isinstance(expectation, int):
        return (expectation,)
    if isinstance(expectation, str):
        return _status_class(expectation).codes
    if isinstance(expectation, range):
        return expectation
    if isinstance(expectation, (list, tuple, set, frozenset)):
        if not all(
            isinstance(code, int) and not isinstance(code, bool)
            for code in expectation
        ):
            raise ConfigurationError(
                "expected_status_code collections must contain only "
                f"integers, got {expectation!r}."
            )
        return expectation
    raise ConfigurationError(
        f"Invalid expected_status_code argument: {expectation!r}."
    )


def check_expectation(expectation: StatusExpectation) -> None:
    """Raise ConfigurationError when ``expectation`` has an invalid shape."""
    if expectation is None or callable(expectation):
        return
    _accepted_codes(expectation)


def status_code_matches(
    response: Response, expectation: StatusExpectation
) -> bool:
    """Return True when ``response`` satisfies ``expectation``.

    A callable expectation is a response-kind predicate: it receives the
    wrapped response and decides on its own, bypassing numeric comparison.
    """
    if expectation is None:
        return True
    if callable(expectation):
        return bool(expectation(response))
    return int(response.status_code) in _accepted_codes(expectation)


def validate_status_code(
    response: Response, expectation: StatusExpectation
) -> None:
    """Raise UnexpectedStatusCode unless ``response`` meets ``expectation``."""
    if not status_code_matches(response, expectation):
        raise UnexpectedStatusCode(expectation, response)


def _kind(status_class: StatusClass) -> Callable[[Any], bool]:
    def predicate(response: Any) -> bool:
        return int(response.status_code) in status_class.codes

    predicate.__name__ = f"is_{status_class.value}"
    predicate.__qualname__ = predicate.__name__
    return predicate


# Response-kind predicates, usable directly as expected_status_code.
is_informational = _kind(StatusClass.INFORMATIONAL)
is_successful = _kind(StatusClass.SUCCESSFUL)
is_redirection = _kind(StatusClass.REDIRECTION)
is_client_error = _kind(StatusClass.CLIENT_ERROR)
is_server_error = _kind(StatusClass.SERVER_ERROR)
