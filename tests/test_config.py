# pyright: reportUnknownMemberType=false
import pytest

from simple_rest_client.config import ClientConfig
from simple_rest_client.errors import ConfigurationError


def test_config_defaults_are_stable():
    config = ClientConfig(address="example.com")

    assert config.port == 80
    assert config.use_tls is False
    assert config.base_path is None
    assert dict(config.base_query) == {}
    assert dict(config.base_headers) == {}
    assert config.username is None
    assert config.password is None
    assert dict(config.expected_status_codes) == {}
    assert config.open_timeout_seconds == 5.0
    assert config.read_timeout_seconds == 30.0
    assert config.verify_tls is True


def test_config_port_defaults_to_443_with_tls():
    config = ClientConfig(address="example.com", use_tls=True)

    assert config.port == 443
    assert config.scheme == "https"


def test_config_port_443_implies_tls():
    config = ClientConfig(address="example.com", port=443)

    assert config.use_tls is True
    assert config.base_url == "https://example.com"


def test_config_port_443_keeps_explicit_tls_flag():
    config = ClientConfig(address="example.com", port=443, use_tls=False)

    assert config.use_tls is False
    assert config.base_url == "http://example.com:443"


def test_config_base_url_includes_non_default_port():
    config = ClientConfig(address="example.com", port=8080)

    assert config.base_url == "http://example.com:8080"


def test_config_base_url_brackets_ipv6_address():
    config = ClientConfig(address="::1", port=8080)

    assert config.base_url == "http://[::1]:8080"


def test_config_mappings_are_independent():
    first = ClientConfig(address="example.com")
    second = ClientConfig(address="example.com")

    assert first.base_headers is not second.base_headers
    assert first.base_query is not second.base_query


def test_config_base_headers_are_immutable():
    config = ClientConfig(address="example.com", base_headers={"X-Test": "1"})

    with pytest.raises(TypeError):
        config.base_headers["X-Test"] = "2"  # type: ignore[index]


def test_config_copies_external_mappings():
    headers = {"X-Test": "1"}
    query = {"page": "1"}
    config = ClientConfig(
        address="example.com", base_headers=headers, base_query=query
    )
    headers["X-Test"] = "2"
    query["page"] = "2"

    assert config.base_headers["X-Test"] == "1"
    assert config.base_query["page"] == "1"


def test_config_normalizes_expected_status_code_verbs():
    config = ClientConfig(
        address="example.com", expected_status_codes={"get": 204}
    )

    assert dict(config.expected_status_codes) == {"GET": 204}


def test_config_rejects_case_insensitive_duplicate_base_headers():
    with pytest.raises(ConfigurationError):
        ClientConfig(
            address="example.com",
            base_headers={"X-Test": "1", "x-test": "2"},
        )


def test_config_rejects_empty_address():
    with pytest.raises(ConfigurationError):
        ClientConfig(address="")


def test_config_rejects_invalid_port():
    with pytest.raises(ConfigurationError):
        ClientConfig(address="example.com", port=0)
    with pytest.raises(ConfigurationError):
        ClientConfig(address="example.com", port=70000)


def test_config_rejects_non_positive_timeouts():
    with pytest.raises(ConfigurationError):
        ClientConfig(address="example.com", open_timeout_seconds=0)
    with pytest.raises(ConfigurationError):
        ClientConfig(address="example.com", read_timeout_seconds=-1)


def test_config_allows_disabled_timeouts():
    config = ClientConfig(
        address="example.com",
        open_timeout_seconds=None,
        read_timeout_seconds=None,
    )

    assert config.open_timeout_seconds is None
    assert config.read_timeout_seconds is None


def test_config_replace_rederives_port_from_tls_flag():
    config = ClientConfig(address="example.com")

    secure = config.replace(use_tls=True)

    assert secure.port == 443
    assert secure.base_url == "https://example.com"

    plain = secure.replace(use_tls=False)

    assert plain.port == 80
    assert plain.base_url == "http://example.com"


def test_config_replace_keeps_explicit_port():
    config = ClientConfig(address="example.com", port=8080)

    secure = config.replace(use_tls=True)

    assert secure.port == 8080
    assert secure.base_url == "https://example.com:8080"


def test_config_replace_rederives_tls_flag_from_port():
    config = ClientConfig(address="example.com", port=443)

    plain = config.replace(port=8080)

    assert plain.use_tls is False
    assert plain.base_url == "http://example.com:8080"
