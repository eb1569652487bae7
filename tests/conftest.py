# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Environment variables are set before importing the package, which loads
# config/config.yml and reads secrets at import/app-creation time.
# =============================================================================

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes!")
os.environ.pop("DATABASE_URL", None)

from dataclasses import replace
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from api_template.application import create_app
from api_template.config import configuration
from api_template.security import JwtSettings, create_access_token


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config():
    """A private copy of the loaded configuration, safe to modify per test."""
    return configuration.model_copy(deep=True)


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def jwt_settings(config):
    return JwtSettings.from_config(config.jwt)


@pytest.fixture
def make_token(jwt_settings):
    """Factory for signed tokens; override settings fields or claims as needed."""

    def _make(subject="user-123", claims=None, expires_in=None, **overrides):
        settings = jwt_settings
        if overrides:
            settings = replace(jwt_settings, **overrides)
        return create_access_token(
            subject,
            settings,
            claims=claims,
            expires_in=expires_in,
        )

    return _make


@pytest.fixture
def auth_headers(make_token):
    token = make_token(claims={"email": "jane@example.com", "name": "Jane", "roles": ["admin"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def expired_token(make_token):
    return make_token(expires_in=timedelta(minutes=-5))
