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
"""CorsMiddleware — callback-style CORS enforcement as a pure ASGI middleware.

Wraps the downstream ``send`` callable and adds the CORS headers to the
``http.response.start`` message.  Use it where a WebFilter chain is not
available, e.g. ``app.add_middleware(CorsMiddleware, settings={...})``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pycors.cors.engine import CorsPolicyEngine, DecisionKind
from pycors.cors.settings import PolicySettings
from pycors.web.adapters.starlette.errors import cors_error_response
from pycors.web.adapters.starlette.http import AsgiMessageWriter, StarletteRequestView, empty_response


class CorsMiddleware:
    """ASGI middleware sharing the same engine as :class:`CorsFilter`."""

    def __init__(
        self,
        app: ASGIApp,
        settings: PolicySettings | Mapping[str, Any] | None = None,
        *,
        engine: CorsPolicyEngine | None = None,
        raise_rejections: bool = False,
        log: Any = None,
    ) -> None:
        self.app = app
        self._engine = engine if engine is not None else CorsPolicyEngine(settings, log)
        self._raise_rejections = raise_rejections

    @property
    def engine(self) -> CorsPolicyEngine:
        return self._engine

    @property
    def settings(self) -> PolicySettings:
        return self._engine.settings

    def set_settings(self, settings: PolicySettings | Mapping[str, Any]) -> CorsMiddleware:
        self._engine.set_settings(settings)
        return self

    def set_logger(self, log: Any) -> None:
        self._engine.set_logger(log)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        decision = self._engine.evaluate(StarletteRequestView.from_scope(scope))

        if decision.rejection is not None:
            if self._raise_rejections:
                raise decision.rejection
            response = cors_error_response(decision.rejection, scope.get("path", ""))
            await response(scope, receive, send)
            return

        if decision.kind is DecisionKind.NOT_CORS:
            await self.app(scope, receive, send)
            return

        if decision.kind is DecisionKind.PREFLIGHT:
            preflight = self._engine.apply(decision, empty_response()).response
            await preflight(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                self._engine.apply(decision, AsgiMessageWriter(message))
            await send(message)

        await self.app(scope, receive, send_with_cors)
