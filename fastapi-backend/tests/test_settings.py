import pytest
from pydantic import ValidationError

from settings import DEFAULT_OPENOBSERVE_URL, AppSettings


def test_parse_list_accepts_json_csv_and_wildcard():
    assert AppSettings._parse_list('["http://a", " http://b "]') == ["http://a", "http://b"]
    assert AppSettings._parse_list("http://a, http://b,,") == ["http://a", "http://b"]
    assert AppSettings._parse_list("*") == ["*"]
    assert AppSettings._parse_list(None) == []


def test_parse_list_rejects_unsupported_types():
    with pytest.raises(TypeError):
        AppSettings._parse_list(42)


def test_log_level_is_normalized_and_validated():
    assert AppSettings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        AppSettings(log_level="chatty")


def test_demo_mode_only_in_production_without_store_url():
    assert AppSettings(environment="Production", openobserve_url=None).demo_mode is True
    assert AppSettings(environment="production", openobserve_url="").demo_mode is True
    assert AppSettings(environment="production", openobserve_url="http://oo:5080").demo_mode is False
    assert AppSettings(environment="development", openobserve_url=None).demo_mode is False


def test_telemetry_url_defaults_to_local_store():
    assert AppSettings(openobserve_url=None).telemetry_url == DEFAULT_OPENOBSERVE_URL
    assert AppSettings(openobserve_url="http://oo:5080/").telemetry_url == "http://oo:5080"
