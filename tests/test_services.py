# =============================================================================
# tests/test_services.py - CORS, mapper, database and health wiring
# =============================================================================

import logging
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from api_template.application import create_app
from api_template.data_models import TokenClaims, UserResponse
from api_template.extensions import add_custom_database, add_custom_mapper
from api_template.persistence import database
from api_template.persistence.database import get_db_connection
from api_template.utils.exceptions import DatabaseNotConfiguredError, MappingNotFoundError
from api_template.utils.mapping import MappingProfile, ObjectMapper


class TestCors:

    def test_preflight_allows_any_origin(self, client):
        response = client.options(
            "/v2/samples/echo",
            headers={
                "Origin": "https://somewhere.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization, Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_simple_request_gets_allow_origin(self, client):
        response = client.get("/v2/samples/public", headers={"Origin": "https://a.example"})

        assert response.headers["access-control-allow-origin"] == "*"

    def test_policy_name_only_labels_the_log(self, config, caplog):
        caplog.set_level(logging.INFO)
        config.cors.policy_name = "partners"
        client = TestClient(create_app(config))

        response = client.get("/v2/samples/public", headers={"Origin": "https://a.example"})

        assert response.headers["access-control-allow-origin"] == "*"
        assert "CORS policy 'partners' enabled." in caplog.text


class _Account:
    def __init__(self, id, email):
        self.id = id
        self.email = email


class _AdminAccount(_Account):
    pass


class _AccountOut(BaseModel):
    id: str
    email: str


class TestObjectMapper:

    def test_attributes_are_mapped_into_model(self):
        mapper = ObjectMapper().register(_Account, _AccountOut)

        result = mapper.map(_Account("1", "a@b.c"), _AccountOut)

        assert result == _AccountOut(id="1", email="a@b.c")

    def test_base_class_registration_covers_subclasses(self):
        mapper = ObjectMapper().register(_Account, _AccountOut)

        assert mapper.map(_AdminAccount("2", "x@y.z"), _AccountOut).id == "2"

    def test_unregistered_pair_raises(self):
        with pytest.raises(MappingNotFoundError):
            ObjectMapper().map(_Account("1", "a@b.c"), _AccountOut)

    def test_non_model_destination_needs_converter(self):
        with pytest.raises(TypeError):
            ObjectMapper().register(_Account, dict)

        mapper = ObjectMapper().register(_Account, dict, lambda a: {"id": a.id})
        assert mapper.map(_Account("3", "e"), dict) == {"id": "3"}

    def test_profiles_register_maps(self):
        class AccountProfile(MappingProfile):
            def configure(self, mapper):
                mapper.register(_Account, _AccountOut)

        app = add_custom_mapper(FastAPI(), [AccountProfile()])

        assert app.state.mapper.has_mapping(_Account, _AccountOut)

    def test_default_profile_maps_claims_to_user(self):
        app = add_custom_mapper(FastAPI())
        claims = TokenClaims(sub="42", email="e@x.io", roles=["reader"])

        user = app.state.mapper.map(claims, UserResponse)

        assert user == UserResponse(id="42", email="e@x.io", roles=["reader"])


class _FakePool:
    def __init__(self, conninfo, min_size, max_size, open):
        self.conninfo = conninfo
        self.min_size = min_size
        self.max_size = max_size
        self.opened = open
        self.closed = False

    def open(self):
        self.opened = True

    def close(self):
        self.closed = True


class TestDatabase:

    def test_pool_is_skipped_without_connection_string(self, config):
        app = add_custom_database(FastAPI(), config)

        assert app.state.db_pool is None

    def test_pool_uses_named_secret(self, config, monkeypatch):
        monkeypatch.setattr(database, "ConnectionPool", _FakePool)
        monkeypatch.setenv(config.database.connection_string_secret_name, "postgresql://u:p@db/app")

        app = add_custom_database(FastAPI(), config)

        pool = app.state.db_pool
        assert pool.conninfo == "postgresql://u:p@db/app"
        assert (pool.min_size, pool.max_size) == (config.database.pool_min_size, config.database.pool_max_size)
        assert pool.opened is False

    def test_lifespan_opens_and_closes_pool(self, config, monkeypatch):
        monkeypatch.setattr(database, "ConnectionPool", _FakePool)
        monkeypatch.setenv(config.database.connection_string_secret_name, "postgresql://u:p@db/app")
        app = create_app(config)

        with TestClient(app) as client:
            assert app.state.db_pool.opened is True
            assert client.get("/v1/health").json()["databaseConfigured"] is True

        assert app.state.db_pool.closed is True

    def test_dependency_without_pool_raises(self):
        request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

        with pytest.raises(DatabaseNotConfiguredError):
            next(get_db_connection(request))


class TestHealth:

    def test_root_is_up(self, client):
        assert client.get("/").json() == {"message": "API Template is up and running."}

    def test_health_reports_state(self, client):
        response = client.get("/v1/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "environment": "development",
            "databaseConfigured": False,
            "supportedVersions": ["2.0"],
        }
