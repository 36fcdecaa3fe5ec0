"""Synchronous REST client helper built on requests.

Subclass or wrap ``SimpleRESTClient`` to expose methods named after your own
API's resources:

    class ExampleAPI(SimpleRESTClient):
        def __init__(self) -> None:
            super().__init__(address="api.example.com", use_tls=True)

        def resource_list(self, filter: str) -> str:
            return self.get("/resource_list", query={"filter": filter}).body

A client instance is not safe for concurrent use; create one per thread.
"""

from __future__ import annotations

import dataclasses
import logging
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import requests

from .config import ClientConfig
from .errors import ConfigurationError, UnexpectedStatusCode
from .hooks import (
    AroundRequestHook,
    HookPipeline,
    PostRequestHook,
    PreRequestHook,
    log_failures,
    log_request,
)
from .request import BodyStream, RequestDescriptor, build_request
from .response import Response
from .status import (
    StatusExpectation,
    check_expectation,
    default_expected_status_code,
)

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "<default>"


# Distinguishes "use the verb default" from None, which disables validation.
DEFAULT = _Unset()


@dataclass
class TransportAttributes:
    """Mutable transport tuning, overridable per request."""

    open_timeout_seconds: float | None
    read_timeout_seconds: float | None
    verify_tls: bool

    @classmethod
    def from_config(cls, config: ClientConfig) -> "TransportAttributes":
        return cls(
            open_timeout_seconds=config.open_timeout_seconds,
            read_timeout_seconds=config.read_timeout_seconds,
            verify_tls=config.verify_tls,
        )

    @property
    def timeout(self) -> tuple[float | None, float | None]:
        return (self.open_timeout_seconds, self.read_timeout_seconds)


_TRANSPORT_ATTRIBUTE_NAMES = frozenset(
    field.name for field in dataclasses.fields(TransportAttributes)
)


def _close_session(session: requests.Session) -> None:
    logger.debug("Closing HTTP session %r", session)
    session.close()


class SimpleRESTClient:
    """Base class to help easily create REST HTTP clients.

    Every request merges the client's base path, query and headers with the
    call's own, validates the response status code against an expectation
    (per-verb defaults apply when none is given) and wraps the response so
    text bodies honor the charset declared by the server.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        **config_kwargs: Any,
    ) -> None:
        """Create a new SimpleRESTClient.

        Args:
            config: Client configuration. When omitted, ``config_kwargs`` are
                passed to :class:`ClientConfig`.
            logger: Optional logger; when given, every request is logged at
                INFO and every failure at ERROR.
        """
        if config is None:
            config = ClientConfig(**config_kwargs)
        elif config_kwargs:
            raise ConfigurationError(
                "Pass either a ClientConfig or keyword arguments, not both"
            )
        self._check_expected_status_codes(config)
        self._config = config
        self.transport_attrs = TransportAttributes.from_config(config)
        self.hooks = HookPipeline()
        self._session: requests.Session | None = None
        self._finalizer: weakref.finalize | None = None
        self.logger = logger
        if logger is not None:
            self.hooks.add_pre_request_hook(log_request(logger))
            self.hooks.add_around_request_hook(log_failures(logger))

    @staticmethod
    def _check_expected_status_codes(config: ClientConfig) -> None:
        for expectation in config.expected_status_codes.values():
            check_expectation(expectation)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def configure(self, **changes: Any) -> ClientConfig:
        """Replace configuration fields, returning the new config.

        Transport attributes are reset from the new config.
        """
        config = self._config.replace(**changes)
        self._check_expected_status_codes(config)
        self._config = config
        self.transport_attrs = TransportAttributes.from_config(config)
        return config

    @property
    def address(self) -> str:
        return self._config.address

    @property
    def port(self) -> int:
        assert self._config.port is not None
        return self._config.port

    @property
    def session(self) -> requests.Session:
        """Get or create the persistent session."""
        if self._session is None:
            self._session = requests.Session()
            self._finalizer = weakref.finalize(
                self, _close_session, self._session
            )
            logger.debug("Opened HTTP session for %s", self._config.base_url)
        return self._session

    def close(self) -> None:
        """Close the underlying session. Safe to call more than once."""
        if self._finalizer is not None:
            self._finalizer()
            self._finalizer = None
        self._session = None

    def __enter__(self) -> "SimpleRESTClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def add_pre_request_hook(self, hook: PreRequestHook) -> PreRequestHook:
        """Register ``hook(request)`` to run before each request."""
        return self.hooks.add_pre_request_hook(hook)

    def add_around_request_hook(
        self, hook: AroundRequestHook
    ) -> AroundRequestHook:
        """Register ``hook(call_next, request) -> response``.

        ``call_next()`` must be invoked at most once; not invoking it skips
        the request, in which case the hook must return a substitute response.
        """
        return self.hooks.add_around_request_hook(hook)

    def add_post_request_hook(self, hook: PostRequestHook) -> PostRequestHook:
        """Register ``hook(response, request)`` to run after each request.

        Post hooks are skipped when the request raised, including on an
        unexpected status code.
        """
        return self.hooks.add_post_request_hook(hook)

    def _apply_transport_attrs(
        self, overrides: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Apply ``overrides`` and return the values they replaced."""
        unknown = [
            name
            for name in overrides
            if name not in _TRANSPORT_ATTRIBUTE_NAMES
        ]
        if unknown:
            raise ConfigurationError(
                f"Unknown transport attributes: {', '.join(unknown)}."
            )
        saved = {
            name: getattr(self.transport_attrs, name) for name in overrides
        }
        for name, value in overrides.items():
            setattr(self.transport_attrs, name, value)
        return saved

    def _send(
        self,
        prepared: requests.PreparedRequest,
        *,
        expected_status_code: StatusExpectation,
        receive_format: str | None,
        stream: bool,
    ) -> Response:
        transport_response = self.session.send(
            prepared,
            timeout=self.transport_attrs.timeout,
            verify=self.transport_attrs.verify_tls,
            allow_redirects=False,
            stream=stream,
        )
        response = Response(
            transport_response,
            expected_status_code=expected_status_code,
            receive_format=receive_format,
        )
        try:
            response.validate_status_code()
        except UnexpectedStatusCode:
            # Release the connection a streamed response still holds.
            if stream:
                transport_response.close()
            raise
        return response

    def build_request(
        self,
        verb: str,
        path: str = "/",
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        body: bytes | str | None = None,
        body_stream: BodyStream | None = None,
        receive_format: str | None = None,
    ) -> RequestDescriptor:
        """Merge this client's configuration with call-level settings."""
        return build_request(
            self._config,
            verb,
            path,
            query=query,
            headers=headers,
            body=body,
            body_stream=body_stream,
            receive_format=receive_format,
        )

    def request(
        self,
        verb: str,
        path: str = "/",
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        body: bytes | str | None = None,
        body_stream: BodyStream | None = None,
        expected_status_code: StatusExpectation | _Unset = DEFAULT,
        receive_format: str | None = None,
        transport_attrs: Mapping[str, Any] | None = None,
        stream: bool = False,
        handler: Callable[[Response], Any] | None = None,
    ) -> Any:
        """Perform a request with any HTTP method.

        Args:
            verb: HTTP method token, e.g. ``"get"`` or ``"MKCOL"``.
            path: Path appended to the configured base path.
            query: Query parameters; must not repeat ``base_query`` keys.
            headers: Headers; must not repeat ``base_headers`` names.
            body: Request body. Only for methods that accept one.
            body_stream: File-like object or byte iterable streamed as the
                body. Mutually exclusive with ``body``.
            expected_status_code: Status expectation; defaults per verb,
                ``None`` disables validation.
            receive_format: Response format hint, sets the Accept header.
            transport_attrs: Transport attribute overrides for this call only.
            stream: Defer downloading the body until it is read.
            handler: Called with the response; its return value is returned
                and the response is closed afterwards.

        Returns:
            The wrapped :class:`Response`, or the ``handler`` return value.

        Raises:
            ConfigurationError: Invalid request settings, before any I/O.
            UnexpectedStatusCode: Response status did not meet expectation.
            requests.exceptions.RequestException: Transport failures.
        """
        descriptor = self.build_request(
            verb,
            path,
            query=query,
            headers=headers,
            body=body,
            body_stream=body_stream,
            receive_format=receive_format,
        )
        if isinstance(expected_status_code, _Unset):
            expected_status_code = default_expected_status_code(
                descriptor.method, self._config.expected_status_codes
            )
        else:
            check_expectation(expected_status_code)
        prepared = descriptor.prepare()

        saved = self._apply_transport_attrs(transport_attrs or {})
        try:
            response = self.hooks.run(
                prepared,
                lambda request: self._send(
                    request,
                    expected_status_code=expected_status_code,
                    receive_format=receive_format,
                    stream=stream,
                ),
            )
        finally:
            for name, value in saved.items():
                setattr(self.transport_attrs, name, value)

        if handler is None:
            return response
        try:
            return handler(response)
        finally:
            response.close()

    def request_json(self, verb: str, path: str = "/", **kwargs: Any) -> Any:
        """Perform a request accepting JSON and return the parsed body."""
        kwargs["receive_format"] = "json"
        return self.request(
            verb, path, handler=Response.parsed_body, **kwargs
        )

    def get_json(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request_json("GET", path, **kwargs)

    # RFC 7231 methods.

    def get(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def head(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("HEAD", path, **kwargs)

    def post(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    def options(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("OPTIONS", path, **kwargs)

    def trace(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("TRACE", path, **kwargs)

    # RFC 5789.

    def patch(self, path: str = "/", **kwargs: Any) -> Any:
        return self.request("PATCH", path, **kwargs)
