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
"""WebFilterChainMiddleware — pure ASGI middleware running a sorted WebFilter chain."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pycors.web.filters import CallNext, WebFilter


class _ResponseRecorder:
    """ASGI ``send`` replacement that records the downstream response."""

    def __init__(self) -> None:
        self.status_code = 200
        self.raw_headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status_code = message["status"]
            self.raw_headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            self.body.extend(message.get("body", b""))

    def to_response(self) -> Response:
        response = Response(content=bytes(self.body), status_code=self.status_code)
        response.raw_headers[:] = self.raw_headers
        return response


class WebFilterChainMiddleware:
    """Runs each :class:`WebFilter` around the downstream ASGI app.

    The chain is composed once, outermost filter first.  A filter whose
    ``should_not_filter()`` returns ``True`` is skipped for that request.
    A filter that returns without calling ``call_next`` (a CORS preflight
    or rejection) keeps the request from reaching the app at all.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters = list(filters)
        self._chain: CallNext = self._downstream
        for web_filter in reversed(self._filters):
            self._chain = _wrap(web_filter, self._chain)

    @property
    def filters(self) -> list[WebFilter]:
        return list(self._filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response = cast(Response, await self._chain(Request(scope, receive, send)))
        await response(scope, receive, send)

    async def _downstream(self, request: Any) -> Response:
        # Buffered so filters can still change status and headers afterwards.
        recorder = _ResponseRecorder()
        await self.app(request.scope, request.receive, recorder)
        return recorder.to_response()


def _wrap(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    async def _inner(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return _inner
