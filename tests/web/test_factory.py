# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for building the CORS filter from configuration."""

from __future__ import annotations

import pytest
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from pycors.core.config import Config
from pycors.kernel.exceptions import ConfigurationException, MissingDependencyException
from pycors.web.adapters.starlette.app import create_app
from pycors.web.adapters.starlette.factory import cors_filter_from_config, route_allowed_methods
from pycors.web.adapters.starlette.filters import CorsFilter
from pycors.web.adapters.starlette.http import StarletteRequestView


async def ok(request):
    return PlainTextResponse("ok")


ROUTES = [
    Route("/items", ok, methods=["GET", "POST"]),
    Route("/items/{item_id}", ok, methods=["PUT", "DELETE"]),
]


def _preflight(client: TestClient, path: str, method: str):
    return client.options(path, headers={"Origin": "example.com", "Access-Control-Request-Method": method})


class TestRouteAllowedMethods:
    def test_methods_for_path(self):
        callback = route_allowed_methods(ROUTES)
        view = StarletteRequestView.from_scope({"type": "http", "method": "OPTIONS", "path": "/items", "headers": []})
        assert callback(view) == ["GET", "HEAD", "POST"]

    def test_path_parameters(self):
        callback = route_allowed_methods(ROUTES)
        view = StarletteRequestView.from_scope({"type": "http", "method": "OPTIONS", "path": "/items/3", "headers": []})
        assert callback(view) == ["DELETE", "PUT"]

    def test_unknown_path(self):
        callback = route_allowed_methods(ROUTES)
        view = StarletteRequestView.from_scope({"type": "http", "method": "OPTIONS", "path": "/nope", "headers": []})
        assert callback(view) == []


class TestCorsFilterFromConfig:
    def test_missing_section(self):
        with pytest.raises(MissingDependencyException) as exc_info:
            cors_filter_from_config(Config({"pycors": {}}))
        assert exc_info.value.code == "MISSING_DEPENDENCY"
        assert exc_info.value.context == {"dependency": "config['pycors.cors']", "service": "CorsFilter"}
        assert 'Missing dependency "config[\'pycors.cors\']" for service "CorsFilter"' in str(exc_info.value)

    def test_section_not_a_mapping(self):
        with pytest.raises(ConfigurationException) as exc_info:
            cors_filter_from_config(Config({"pycors": {"cors": "yes"}}))
        assert exc_info.value.code == "CORS_CONFIG_NOT_MAPPING"

    def test_builds_filter(self):
        config = Config(
            {
                "pycors": {
                    "cors": {
                        "origin": ["example.com"],
                        "allow_methods": "GET",
                        "max_age": 120,
                        "exclude_patterns": ["/health"],
                    }
                }
            }
        )
        cors = cors_filter_from_config(config)
        assert isinstance(cors, CorsFilter)
        assert cors.exclude_patterns == ["/health"]
        data = cors.settings.to_dict()
        assert data["origin"] == ["example.com"]
        assert data["allow_methods"] == "GET"
        assert data["max_age"] == 120

    def test_unset_fields_keep_defaults(self):
        cors = cors_filter_from_config(Config({"pycors": {"cors": {}}}))
        assert cors.settings.to_dict()["allow_methods"] == "GET,HEAD,PUT,POST,DELETE"


class TestRouteDerivedPolicy:
    def _client(self) -> TestClient:
        config = Config({"pycors": {"cors": {"origin": "example.com"}}})
        return TestClient(create_app(config=config, extra_routes=ROUTES))

    def test_preflight_lists_routed_methods(self):
        resp = _preflight(self._client(), "/items", "post")
        assert resp.status_code == 204
        assert resp.headers["access-control-allow-methods"] == "GET, HEAD, POST"

    def test_unrouted_method_rejected(self):
        resp = _preflight(self._client(), "/items", "DELETE")
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "CORS_METHOD_NOT_ALLOWED"

    def test_unknown_path_has_no_methods(self):
        resp = _preflight(self._client(), "/nope", "GET")
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "CORS_NO_METHODS_CONFIGURED"

    def test_configured_methods_win(self):
        config = Config({"pycors": {"cors": {"allow_methods": ["PATCH"]}}})
        client = TestClient(create_app(config=config, extra_routes=ROUTES))
        resp = _preflight(client, "/items", "PATCH")
        assert resp.headers["access-control-allow-methods"] == "PATCH"


class TestCreateAppFromConfig:
    def test_max_age_from_config(self):
        config = Config({"pycors": {"cors": {"max_age": 600, "allow_methods": "GET"}}})
        resp = _preflight(TestClient(create_app(config=config, extra_routes=ROUTES)), "/items", "GET")
        assert resp.headers["access-control-max-age"] == "600"

    def test_disabled(self):
        config = Config({"pycors": {"cors": {"enabled": False}}})
        resp = TestClient(create_app(config=config, extra_routes=ROUTES)).get(
            "/items", headers={"Origin": "example.com"}
        )
        assert "access-control-allow-origin" not in resp.headers

    def test_no_section_means_no_cors(self):
        resp = TestClient(create_app(config=Config({}), extra_routes=ROUTES)).get(
            "/items", headers={"Origin": "example.com"}
        )
        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PYCORS_CORS_MAX_AGE", "42")
        config = Config({"pycors": {"cors": {"allow_methods": "GET"}}})
        resp = _preflight(TestClient(create_app(config=config, extra_routes=ROUTES)), "/items", "GET")
        assert resp.headers["access-control-max-age"] == "42"

    def test_env_origin_list(self, monkeypatch):
        monkeypatch.setenv("PYCORS_CORS_ORIGIN", "a.com, b.com")
        config = Config({"pycors": {"cors": {}}})
        client = TestClient(create_app(config=config, extra_routes=ROUTES))
        assert client.get("/items", headers={"Origin": "b.com"}).headers["access-control-allow-origin"] == "b.com"

    def test_title(self):
        assert create_app(title="Api").state.title == "Api"
