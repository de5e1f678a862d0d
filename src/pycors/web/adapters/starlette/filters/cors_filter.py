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
"""CorsFilter — handler-style CORS enforcement inside the WebFilter chain."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from pycors.cors.engine import CorsPolicyEngine, DecisionKind
from pycors.cors.settings import PolicySettings
from pycors.web.adapters.starlette.errors import cors_error_response
from pycors.web.adapters.starlette.http import StarletteRequestView, StarletteResponseWriter, empty_response
from pycors.web.filters import HIGHEST_PRECEDENCE, CallNext, OncePerRequestFilter, order


@order(HIGHEST_PRECEDENCE + 100)
class CorsFilter(OncePerRequestFilter):
    """Applies a CORS policy to every request the filter matches.

    Preflights are answered here without reaching the route.  Rejected
    requests get a JSON error response (403 for client errors, 500 for a
    broken policy) unless ``raise_rejections`` is set, in which case the
    :class:`~pycors.cors.errors.CorsException` propagates.
    """

    def __init__(
        self,
        settings: PolicySettings | Mapping[str, Any] | None = None,
        *,
        engine: CorsPolicyEngine | None = None,
        url_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        raise_rejections: bool = False,
        log: Any = None,
    ) -> None:
        self._engine = engine if engine is not None else CorsPolicyEngine(settings, log)
        self._raise_rejections = raise_rejections
        if url_patterns is not None:
            self.url_patterns = list(url_patterns)
        if exclude_patterns is not None:
            self.exclude_patterns = list(exclude_patterns)

    @property
    def engine(self) -> CorsPolicyEngine:
        return self._engine

    @property
    def settings(self) -> PolicySettings:
        return self._engine.settings

    def set_settings(self, settings: PolicySettings | Mapping[str, Any]) -> CorsFilter:
        self._engine.set_settings(settings)
        return self

    def set_logger(self, log: Any) -> None:
        self._engine.set_logger(log)

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        decision = self._engine.evaluate(StarletteRequestView.from_request(request))

        if decision.rejection is not None:
            if self._raise_rejections:
                raise decision.rejection
            return cors_error_response(decision.rejection, request.url.path)

        if decision.kind is DecisionKind.NOT_CORS:
            return await call_next(request)

        if decision.kind is DecisionKind.PREFLIGHT:
            return self._engine.apply(decision, empty_response()).response

        response = await call_next(request)
        self._engine.apply(decision, StarletteResponseWriter(response))
        return response
