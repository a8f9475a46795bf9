from datetime import datetime

import pytest

from todo_api.config import Settings, validate_config
from todo_api.errors import InvalidQueryError
from todo_api.middleware.cors import allowed_origins
from todo_api.utils.dates import parse_date_bound


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://todo.example.com, https://admin.example.com")
    monkeypatch.setenv("JWT_EXPIRES_MINUTES", "15")

    settings = Settings.from_env()

    assert settings.is_production
    assert settings.port == 9000
    assert settings.allowed_origins == ["https://todo.example.com", "https://admin.example.com"]
    assert settings.jwt_expires_minutes == 15


def test_server_port_is_used_when_port_is_unset(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.setenv("SERVER_PORT", "3000")
    assert Settings.from_env().port == 3000


def test_validate_config_reports_missing_variables(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    assert validate_config() == ["JWT_SECRET"]


def test_dev_origins_are_only_added_outside_production():
    dev = Settings(environment="development", allowed_origins=["https://todo.example.com"])
    prod = Settings(environment="production", allowed_origins=["https://todo.example.com"])

    assert "http://localhost:4200" in allowed_origins(dev)
    assert allowed_origins(prod) == ["https://todo.example.com"]


def test_parse_date_bound():
    assert parse_date_bound(None) is None
    assert parse_date_bound("  ") is None
    assert parse_date_bound("2024-01-15") == datetime(2024, 1, 15)
    assert parse_date_bound("2024-01-15", end_of_day=True) == datetime(2024, 1, 15, 23, 59, 59, 999999)
    assert parse_date_bound("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30)
    assert parse_date_bound("2024-01-15T12:30:00+02:00", end_of_day=True) == datetime(2024, 1, 15, 10, 30)

    with pytest.raises(InvalidQueryError):
        parse_date_bound("15/01/2024")
