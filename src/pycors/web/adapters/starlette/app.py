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
"""PyCors application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from pycors.config.properties.cors import CorsProperties
from pycors.core.config import Config
from pycors.cors.settings import PolicySettings
from pycors.logging import LoggingPort, StructlogAdapter
from pycors.web.adapters.starlette.factory import CORS_SECTION, cors_filter_from_config
from pycors.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from pycors.web.adapters.starlette.filters import CorsFilter, RequestLoggingFilter
from pycors.web.filters import WebFilter, get_order


def create_app(
    title: str = "PyCors",
    debug: bool = False,
    cors: CorsFilter | PolicySettings | Mapping[str, Any] | None = None,
    config: Config | None = None,
    extra_routes: Sequence[BaseRoute] | None = None,
    filters: Sequence[WebFilter] | None = None,
    request_logging: bool = True,
    logging_port: LoggingPort | None = None,
) -> Starlette:
    """Create a Starlette application with the WebFilter chain and CORS enforcement.

    The CORS policy comes from ``cors`` when given, otherwise from the
    ``pycors.cors`` section of ``config`` (unless ``enabled`` is false).
    Without either, no CORS headers are produced.

    When ``config`` is given, ``logging_port`` (a :class:`StructlogAdapter`
    by default) is configured from it and supplies the CORS engine logger.
    """
    routes = list(extra_routes or [])
    chain: list[WebFilter] = list(filters or [])

    cors_log = None
    if config is not None:
        logging_port = logging_port or StructlogAdapter()
        logging_port.configure(config)
        cors_log = logging_port.get_logger("pycors.cors")

    if request_logging:
        chain.append(RequestLoggingFilter())

    if cors is not None:
        chain.append(cors if isinstance(cors, CorsFilter) else CorsFilter(cors, log=cors_log))
    elif config is not None and config.has(CORS_SECTION) and config.bind(CorsProperties).enabled:
        chain.append(cors_filter_from_config(config, routes, log=cors_log))

    chain.sort(key=lambda f: get_order(type(f)))

    app = Starlette(
        debug=debug,
        routes=routes,
        middleware=[Middleware(WebFilterChainMiddleware, filters=chain)],
    )
    app.state.title = title
    return app
