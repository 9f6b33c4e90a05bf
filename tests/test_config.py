"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from salon_booking.config import AppConfig, ProviderConfig, config_search_paths


def test_defaults():
    config = AppConfig()

    assert config.booking_window_days == 7
    assert config.provider.availability_url() == "http://127.0.0.1:8000/get-free-time"
    assert config.provider.booking_url() == "http://127.0.0.1:8000/book-appointment"


def test_load_explicit_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "timezone: Europe/Berlin\n"
        "booking_window_days: 5\n"
        "log_level: debug\n"
        "provider:\n"
        "  base_url: https://salon.example.com/api/\n"
        "  timeout_seconds: 2.5\n",
        encoding="utf-8",
    )

    config = AppConfig.load(path)

    assert config.timezone == "Europe/Berlin"
    assert config.booking_window_days == 5
    assert config.log_level == "DEBUG"
    assert config.provider.availability_url() == "https://salon.example.com/api/get-free-time"
    assert config.provider.timeout_seconds == 2.5


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert AppConfig.load(path) == AppConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="No config at"):
        AppConfig.load(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("timezone: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid YAML"):
        AppConfig.load(path)


def test_root_must_be_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load(path)


@pytest.mark.parametrize(
    "data",
    [
        {"timezone": "Mars/Olympus"},
        {"booking_window_days": 0},
        {"log_level": "chatty"},
        {"provider": {"base_url": "ftp://example.com"}},
        {"provider": {"timeout_seconds": 0}},
        {"provider": {"availability_path": "same", "booking_path": "same"}},
    ],
)
def test_invalid_values(data):
    with pytest.raises(ValidationError):
        AppConfig(**data)


def test_paths_are_normalized():
    provider = ProviderConfig(availability_path="/get-free-time/")
    assert provider.availability_path == "get-free-time"


def test_load_without_path_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.setattr("salon_booking.config.config_search_paths", lambda: (tmp_path / "config.yaml",))

    assert AppConfig.load() == AppConfig()


def test_load_without_path_uses_first_file_found(tmp_path, monkeypatch):
    second = tmp_path / "second.yaml"
    second.write_text("booking_window_days: 3\n", encoding="utf-8")
    monkeypatch.setattr(
        "salon_booking.config.config_search_paths",
        lambda: (tmp_path / "missing.yaml", second),
    )

    assert AppConfig.load().booking_window_days == 3


def test_search_starts_in_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert config_search_paths()[0] == tmp_path.resolve() / "config.yaml"
