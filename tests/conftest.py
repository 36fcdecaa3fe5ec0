from __future__ import annotations

import io
from typing import Mapping

import pytest
import requests
from requests.structures import CaseInsensitiveDict


def make_response(
    *,
    body: bytes = b"",
    status: int = 200,
    headers: Mapping[str, str] | None = None,
    url: str = "http://example.com/",
    reason: str = "OK",
) -> requests.Response:
    """Build a real requests.Response whose body is read from memory."""
    response = requests.Response()
    response.status_code = status
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = io.BytesIO(body)
    response.url = url
    response.reason = reason
    return response


@pytest.fixture
def response_factory():
    return make_response
