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
"""Build a CorsFilter from configuration.

The ``pycors.cors`` section must be present.  When it does not configure
``allow_methods`` and the application's routes are supplied, the allowed
methods are derived per request from the routes matching the request path.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from starlette.routing import BaseRoute, Match

from pycors.config.properties.cors import CorsProperties
from pycors.core.config import Config
from pycors.kernel.exceptions import ConfigurationException, MissingDependencyException
from pycors.web.adapters.starlette.filters.cors_filter import CorsFilter

CORS_SECTION = "pycors.cors"


def route_allowed_methods(routes: Sequence[BaseRoute]) -> Callable[[Any], list[str]]:
    """Return an ``allow_methods`` callback listing the methods routed for the request path.

    ``OPTIONS`` is never listed.  The callback expects a request view
    exposing the ASGI ``scope``.
    """

    def allowed_methods(request: Any) -> list[str]:
        scope = {**request.scope, "type": "http"}
        methods: set[str] = set()
        for route in routes:
            route_methods = getattr(route, "methods", None)
            if not route_methods:
                continue
            match, _ = route.matches(scope)
            if match is not Match.NONE:
                methods.update(route_methods)
        methods.discard("OPTIONS")
        return sorted(methods)

    return allowed_methods


def cors_filter_from_config(
    config: Config,
    routes: Sequence[BaseRoute] | None = None,
    log: Any = None,
) -> CorsFilter:
    """Create a :class:`CorsFilter` from the ``pycors.cors`` configuration section.

    Raises:
        MissingDependencyException: the section is absent.
        ConfigurationException: the section is not a mapping.
        SettingsInvalid: the configured policy does not validate.
    """
    if not config.has(CORS_SECTION):
        raise MissingDependencyException.dependency_for_service(f"config['{CORS_SECTION}']", CorsFilter.__name__)
    if not isinstance(config.get(CORS_SECTION), dict):
        raise ConfigurationException(f"config['{CORS_SECTION}'] is not a mapping", code="CORS_CONFIG_NOT_MAPPING")

    properties = config.bind(CorsProperties)
    settings = properties.to_settings()
    if "allow_methods" not in settings and routes is not None:
        settings["allow_methods"] = route_allowed_methods(routes)

    return CorsFilter(
        settings,
        url_patterns=properties.url_patterns,
        exclude_patterns=properties.exclude_patterns,
        log=log,
    )
