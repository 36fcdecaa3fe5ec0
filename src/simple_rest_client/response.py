"""Response wrapper with charset-aware body accessors.

``requests`` falls back to ISO-8859-1 (or a charset guess) when a response
does not declare its charset. This wrapper instead decodes strictly with the
charset named in the ``Content-Type`` header and hands back the untouched
wire bytes when none is declared, for whole-body and streamed reads alike.
"""

from __future__ import annotations

import codecs
import json
import logging
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping

import requests

from .errors import ConfigurationError, UnexpectedContentType
from .status import StatusExpectation, validate_status_code

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192

# Media types announced through the Accept header for a receive format.
RECEIVE_FORMAT_MEDIA_TYPES: Mapping[str, str] = MappingProxyType(
    {"json": "application/json"}
)


def parse_content_type(value: str | None) -> tuple[str | None, dict[str, str]]:
    """Split a Content-Type header into its media type and parameters."""
    if not value:
        return None, {}
    media_type, *raw_params = value.split(";")
    params: dict[str, str] = {}
    for raw_param in raw_params:
        name, sep, param_value = raw_param.partition("=")
        if not sep:
            continue
        params[name.strip().lower()] = param_value.strip().strip("\"'")
    return media_type.strip().lower() or None, params


def declared_charset(headers: Mapping[str, str]) -> str | None:
    """Return the codec name declared by ``headers``, or None."""
    _, params = parse_content_type(headers.get("Content-Type"))
    charset = params.get("charset")
    if not charset:
        return None
    try:
        codecs.lookup(charset)
    except LookupError:
        logger.warning(
            "Ignoring unknown charset %r in Content-Type header", charset
        )
        return None
    return charset


class Response:
    """Wrapper around :class:`requests.Response`.

    Attributes not defined here are delegated to the wrapped response, so
    ``content``, ``iter_content``, ``reason``, ``url`` and friends keep their
    native behavior.
    """

    def __init__(
        self,
        transport_response: requests.Response,
        *,
        expected_status_code: StatusExpectation = None,
        receive_format: str | None = None,
    ) -> None:
        self.transport_response = transport_response
        self.expected_status_code = expected_status_code
        self.receive_format = receive_format

    def __getattr__(self, name: str) -> Any:
        if name == "transport_response":
            raise AttributeError(name)
        return getattr(self.transport_response, name)

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"

    @property
    def status_code(self) -> int:
        return self.transport_response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self.transport_response.headers

    @property
    def content_type(self) -> str | None:
        """Media type without parameters, lower-cased."""
        media_type, _ = parse_content_type(self.headers.get("Content-Type"))
        return media_type

    @property
    def charset(self) -> str | None:
        return declared_charset(self.headers)

    @property
    def body(self) -> str | bytes:
        """Whole body, decoded with the declared charset.

        Returns the raw bytes when no charset is declared.
        """
        content = self.transport_response.content or b""
        charset = self.charset
        if charset is None:
            return content
        return content.decode(charset, errors="replace")

    def iter_body(
        self, chunk_size: int | None = DEFAULT_CHUNK_SIZE
    ) -> Iterator[str | bytes]:
        """Yield body chunks as they arrive.

        Chunks are decoded with the declared charset, or passed through
        unmodified as bytes when none is declared.
        """
        chunks = self.transport_response.iter_content(chunk_size=chunk_size)
        charset = self.charset
        if charset is None:
            yield from chunks
            return

        decoder = codecs.getincrementaldecoder(charset)(errors="replace")
        for chunk in chunks:
            text = decoder.decode(chunk)
            if text:
                yield text
        tail = decoder.decode(b"", final=True)
        if tail:
            yield tail

    def read_body(
        self,
        callback: Callable[[str | bytes], Any] | None = None,
        chunk_size: int | None = DEFAULT_CHUNK_SIZE,
    ) -> str | bytes | None:
        """Return the whole body, or feed it chunk by chunk to ``callback``."""
        if callback is None:
            return self.body
        for chunk in self.iter_body(chunk_size=chunk_size):
            callback(chunk)
        return None

    def validate_status_code(self) -> None:
        """Raise UnexpectedStatusCode unless the expectation is met."""
        validate_status_code(self, self.expected_status_code)

    def parsed_body(self) -> Any:
        """Return the body parsed according to ``receive_format``."""
        if not self.receive_format:
            raise ConfigurationError("receive_format unset!")
        parser = getattr(self, f"_parse_{self.receive_format}", None)
        if parser is None:
            raise ConfigurationError(
                "Don't know how to parse receive_format: "
                f"{self.receive_format!r}!"
            )
        return parser()

    def _parse_json(self) -> Any:
        expected_content_type = RECEIVE_FORMAT_MEDIA_TYPES["json"]
        if self.content_type != expected_content_type:
            raise UnexpectedContentType(expected_content_type, self)
        body = self.body
        return json.loads(body)
