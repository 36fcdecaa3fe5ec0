# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
from unittest.mock import patch

import pytest

from simple_rest_client.client import SimpleRESTClient
from simple_rest_client.errors import ConfigurationError, UnexpectedStatusCode
from simple_rest_client.status import StatusClass, is_successful

PATH = "/test_path"


@pytest.fixture
def client():
    return SimpleRESTClient(address="example.com")


@pytest.mark.parametrize(
    "expected, unexpected, real",
    [
        (200, 202, 200),
        ([200, 202], 201, 200),
        (range(200, 300), range(300, 400), 204),
        ("informational", 201, 100),
        ("successful", 301, 202),
        ("redirection", 201, 301),
        ("client_error", 201, 400),
        ("server_error", 201, 503),
        (is_successful, StatusClass.INFORMATIONAL, 200),
    ],
)
def test_expected_status_code(
    client, response_factory, expected, unexpected, real
):
    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response_factory(status=real)

        response = client.get(PATH, expected_status_code=expected)
        assert response.status_code == real

        with pytest.raises(UnexpectedStatusCode) as excinfo:
            client.get(PATH, expected_status_code=unexpected)

    assert excinfo.value.expected_status_code == unexpected
    assert excinfo.value.response.status_code == real
    assert mock_send.call_count == 2


def test_get_default_accepts_200(client, response_factory):
    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response_factory(status=200)
        client.get(PATH)


def test_get_default_rejects_300(client, response_factory):
    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response_factory(
            status=300, reason="Multiple Choices"
        )

        with pytest.raises(UnexpectedStatusCode):
            client.get(PATH)


def test_none_disables_validation(client, response_factory):
    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response_factory(status=500)

        response = client.get(PATH, expected_status_code=None)

    assert response.status_code == 500


@pytest.mark.parametrize(
    "verb, accepted, rejected",
    [
        ("post", 201, 203),
        ("put", 205, 203),
        ("patch", 204, 206),
        ("delete", 202, 201),
        ("options", 204, 201),
        ("trace", 200, 204),
        ("head", 200, 204),
    ],
)
def test_per_verb_defaults(client, response_factory, verb, accepted, rejected):
    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response_factory(status=accepted)
        getattr(client, verb)(PATH)

        mock_send.return_value = response_factory(status=rejected)
        with pytest.raises(UnexpectedStatusCode):
            getattr(client, verb)(PATH)


def test_unknown_verb_defaults_to_successful_class(client, response_factory):
    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response_factory(status=207)
        client.request("PROPFIND", PATH)

        mock_send.return_value = response_factory(status=302)
        with pytest.raises(UnexpectedStatusCode):
            client.request("PROPFIND", PATH)


def test_configured_default_overrides_builtin(response_factory):
    client = SimpleRESTClient(
        address="example.com",
        expected_status_codes={"get": [200, 404], "delete": None},
    )

    with patch("requests.Session.send") as mock_send:
        mock_send.return_value = response_factory(status=404)
        client.get(PATH)

        mock_send.return_value = response_factory(status=500)
        client.delete(PATH)


def test_invalid_expectation_fails_before_io(client):
    with patch("requests.Session.send") as mock_send:
        with pytest.raises(ConfigurationError):
            client.get(PATH, expected_status_code="teapot")

        with pytest.raises(ConfigurationError):
            client.get(PATH, expected_status_code=2.5)

    mock_send.assert_not_called()
