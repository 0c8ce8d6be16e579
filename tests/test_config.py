"""
Tests for config models, env resolution and auth headers.
"""
import pytest
from pydantic import ValidationError

from fetch_resource.auth.auth_handler import BearerAuthHandler, _mask_value, merge_auth_headers
from fetch_resource.config import (
    TimeoutConfig,
    TransportConfig,
    normalize_timeout,
    resolve_transport_config,
)
from fetch_resource.env import env_flag, env_or, env_seconds


def test_transport_config_base_url_validation():
    config = TransportConfig(base_url="https://api.example.com/")
    assert config.base_url == "https://api.example.com"

    with pytest.raises(ValidationError) as exc:
        TransportConfig(base_url="ftp://example.com")
    assert "base_url must start with http:// or https://" in str(exc.value)


def test_normalize_timeout():
    assert normalize_timeout(None).connect == 5.0
    assert normalize_timeout(2).read == 2.0
    custom = TimeoutConfig(connect=1.0)
    assert normalize_timeout(custom) is custom


def test_resolve_transport_config_defaults(monkeypatch):
    for key in ("FETCH_RESOURCE_BASE_URL", "FETCH_RESOURCE_TIMEOUT", "FETCH_RESOURCE_FOLLOW_REDIRECTS"):
        monkeypatch.delenv(key, raising=False)

    resolved = resolve_transport_config()

    assert resolved.base_url is None
    assert resolved.timeout.read == 30.0
    assert resolved.follow_redirects is True


def test_resolve_transport_config_env(monkeypatch):
    monkeypatch.setenv("FETCH_RESOURCE_BASE_URL", "https://env.example.com/")
    monkeypatch.setenv("FETCH_RESOURCE_TIMEOUT", "7.5")
    monkeypatch.setenv("FETCH_RESOURCE_FOLLOW_REDIRECTS", "off")

    resolved = resolve_transport_config()

    assert resolved.base_url == "https://env.example.com"
    assert resolved.timeout.connect == 7.5
    assert resolved.follow_redirects is False


def test_resolve_transport_config_argument_wins(monkeypatch):
    monkeypatch.setenv("FETCH_RESOURCE_BASE_URL", "https://env.example.com")
    resolved = resolve_transport_config(TransportConfig(base_url="https://arg.example.com", timeout=1))
    assert resolved.base_url == "https://arg.example.com"
    assert resolved.timeout.write == 1.0


def test_env_or_priority(monkeypatch):
    monkeypatch.setenv("TEST_FETCH_ENV", "from-env")
    assert env_or("arg", "TEST_FETCH_ENV", "default") == "arg"
    assert env_or(None, "TEST_FETCH_ENV", "default") == "from-env"

    monkeypatch.setenv("TEST_FETCH_ENV", "")
    assert env_or(None, "TEST_FETCH_ENV", "default") == "default"
    assert env_or(None, "TEST_FETCH_MISSING") is None


def test_env_flag_and_seconds(monkeypatch):
    monkeypatch.setenv("TEST_FETCH_FLAG", " Yes ")
    assert env_flag(None, "TEST_FETCH_FLAG", False) is True
    assert env_flag(False, "TEST_FETCH_FLAG", True) is False
    monkeypatch.setenv("TEST_FETCH_FLAG", "0")
    assert env_flag(None, "TEST_FETCH_FLAG", True) is False
    assert env_flag(None, "TEST_FETCH_MISSING", True) is True

    monkeypatch.setenv("TEST_FETCH_SECONDS", "2.5")
    assert env_seconds(None, "TEST_FETCH_SECONDS") == 2.5
    assert env_seconds(4.0, "TEST_FETCH_SECONDS") == 4.0
    monkeypatch.setenv("TEST_FETCH_SECONDS", "abc")
    assert env_seconds(None, "TEST_FETCH_SECONDS") is None


def test_bearer_auth_handler():
    assert BearerAuthHandler("tok").get_header() == {"Authorization": "Bearer tok"}
    assert BearerAuthHandler(None).get_header() is None
    assert BearerAuthHandler("").get_header() is None


def test_merge_auth_headers_caller_wins():
    merged = merge_auth_headers({"Authorization": "Bearer tok"}, {"AUTHORIZATION": "Token x"})
    assert merged == {"AUTHORIZATION": "Token x"}

    merged = merge_auth_headers({"Authorization": "Bearer tok"}, {"Accept": "*/*"})
    assert merged == {"Authorization": "Bearer tok", "Accept": "*/*"}


def test_mask_value():
    assert _mask_value(None) == "<empty>"
    assert _mask_value("short") == "*****"
    assert _mask_value("abcdefghijklmnop") == "abcdefghij******"
