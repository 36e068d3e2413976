import pytest

from settings import DEFAULT_WEATHER_URL, get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for name in (
        "WEATHER_API_URL",
        "WEATHER_TIMEZONE",
        "WEATHER_TIMEOUT_SECONDS",
        "WEATHER_REFRESH_SECONDS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.weather_api_url == DEFAULT_WEATHER_URL
    assert settings.weather_timezone == "Asia/Manila"
    assert settings.weather_timeout == 10.0
    assert settings.weather_refresh_seconds == 600.0
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("WEATHER_API_URL", "http://localhost:8081/forecast")
    monkeypatch.setenv("WEATHER_TIMEZONE", "UTC")
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("WEATHER_REFRESH_SECONDS", "60")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.weather_api_url == "http://localhost:8081/forecast"
    assert settings.weather_timezone == "UTC"
    assert settings.weather_timeout == 2.5
    assert settings.weather_refresh_seconds == 60.0
    assert settings.log_level == "DEBUG"


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("WEATHER_REFRESH_SECONDS", "-5")

    settings = get_settings()

    assert settings.weather_timeout == 10.0
    assert settings.weather_refresh_seconds == 600.0
