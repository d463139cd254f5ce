"""
Tests for environment-driven settings.
"""

import pytest

from booktalk.core.config import Settings, build_logging_config

ENV_VARS = [
    'DATABASE_URL', 'JWT_SECRET', 'JWT_LIFETIME_MINUTES', 'PASSWORD_RESET_MINUTES', 'PORT',
    'RATE_LIMIT_REQUESTS', 'RATE_LIMIT_WINDOW_SECONDS', 'LOG_LEVEL', 'SQL_ECHO', 'EMAIL',
    'MAILJET_API_KEY', 'MAILJET_API_SECRET',
    'CLOUDINARY_CLOUD_NAME', 'CLOUDINARY_API_KEY', 'CLOUDINARY_API_SECRET',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///books.db')
    monkeypatch.setenv('JWT_SECRET', 's3cret')
    settings = Settings.from_env()

    assert settings.database_url == 'sqlite:///books.db'
    assert settings.jwt_lifetime_minutes == 43200
    assert settings.port == 8000
    assert settings.rate_limit_requests == 100
    assert settings.rate_limit_window_seconds == 900
    assert settings.log_level == 'INFO'
    assert not settings.mailjet.configured
    assert not settings.cloudinary.configured


def test_overrides(monkeypatch):
    monkeypatch.setenv('DATABASE_URL', 'postgresql://localhost/books')
    monkeypatch.setenv('JWT_SECRET', 's3cret')
    monkeypatch.setenv('PORT', '5050')
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    monkeypatch.setenv('EMAIL', 'club@example.org')
    monkeypatch.setenv('MAILJET_API_KEY', 'k')
    monkeypatch.setenv('MAILJET_API_SECRET', 's')
    settings = Settings.from_env()

    assert settings.port == 5050
    assert settings.log_level == 'DEBUG'
    assert settings.mailjet.configured
    assert settings.mailjet.sender_email == 'club@example.org'


@pytest.mark.parametrize('missing', ['DATABASE_URL', 'JWT_SECRET'])
def test_required_variables(monkeypatch, missing):
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///books.db')
    monkeypatch.setenv('JWT_SECRET', 's3cret')
    monkeypatch.delenv(missing)
    with pytest.raises(ValueError, match=missing):
        Settings.from_env()


def test_logging_config_level():
    config = build_logging_config('DEBUG')
    assert config['loggers']['booktalk']['level'] == 'DEBUG'
    assert config['handlers']['console']['class'] == 'logging.StreamHandler'
