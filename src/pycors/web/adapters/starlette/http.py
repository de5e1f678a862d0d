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
"""Starlette/ASGI views satisfying the CORS engine ports."""

from __future__ import annotations

from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import HTTPConnection
from starlette.responses import Response
from starlette.types import Message, Scope


class StarletteRequestView:
    """Exposes a Starlette request (or raw ASGI scope) as a ``CorsRequest``.

    Setting callbacks receive this view; ``scope`` and ``request`` give them
    access to the underlying connection.
    """

    def __init__(
        self,
        method: str,
        headers: Headers,
        scope: Scope | None = None,
        request: HTTPConnection | None = None,
    ) -> None:
        self._method = method
        self._headers = headers
        self.scope = scope
        self.request = request

    @classmethod
    def from_request(cls, request: HTTPConnection) -> StarletteRequestView:
        return cls(request.scope.get("method", ""), request.headers, request.scope, request)

    @classmethod
    def from_scope(cls, scope: Scope) -> StarletteRequestView:
        return cls(scope.get("method", ""), Headers(scope=scope), scope)

    @property
    def method(self) -> str:
        return self._method

    def header_line(self, name: str) -> str:
        return ", ".join(self._headers.getlist(name))


class StarletteResponseWriter:
    """Exposes a Starlette ``Response`` as a ``CorsResponse``."""

    def __init__(self, response: Response) -> None:
        self.response = response

    def set_header(self, name: str, value: str) -> None:
        self.response.headers[name] = value

    def add_header(self, name: str, value: str) -> None:
        self.response.headers.append(name, value)

    def remove_header(self, name: str) -> None:
        if name in self.response.headers:
            del self.response.headers[name]

    def set_status(self, status_code: int, reason: str = "") -> None:
        self.response.status_code = status_code


class AsgiMessageWriter:
    """Exposes an ``http.response.start`` ASGI message as a ``CorsResponse``."""

    def __init__(self, message: Message) -> None:
        message.setdefault("headers", [])
        self.message = message
        self.headers = MutableHeaders(scope=message)

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def add_header(self, name: str, value: str) -> None:
        self.headers.append(name, value)

    def remove_header(self, name: str) -> None:
        if name in self.headers:
            del self.headers[name]

    def set_status(self, status_code: int, reason: str = "") -> None:
        self.message["status"] = status_code


def empty_response() -> Any:
    """A bodiless response used to answer preflights without calling downstream."""
    return StarletteResponseWriter(Response(status_code=204))
