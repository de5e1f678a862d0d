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
"""PreflightNegotiator — answers ``OPTIONS`` preflight requests.

Runs two checks in order, then finalizes::

    start -> method checked -> headers checked -> finalized

Each check either adds its response header or raises a terminal error.
Headers are accumulated in a request-local dict and only written to a
response once every check has passed.
"""

from __future__ import annotations

from typing import Any

import structlog

from pycors.cors.errors import (
    HeaderNotAllowed,
    MethodNotAllowed,
    NoHeadersAllowed,
    NoMethodProvided,
    NoMethodsConfigured,
)
from pycors.cors.ports import CorsRequest, CorsResponse
from pycors.cors.resolver import SettingValueResolver, split_list
from pycors.cors.settings import PolicySettings

logger = structlog.get_logger("pycors.cors")

ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
MAX_AGE = "Access-Control-Max-Age"
REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"


class PreflightNegotiator:
    """Negotiates allowed methods and headers for a preflight request."""

    def __init__(self, resolver: SettingValueResolver | None = None, log: Any = None) -> None:
        self._log = log if log is not None else logger
        self._resolver = resolver or SettingValueResolver(self._log)

    def set_logger(self, log: Any) -> None:
        self._log = log
        self._resolver.set_logger(log)

    def check_method(self, settings: PolicySettings, request: CorsRequest, headers: dict[str, str]) -> None:
        """Validate Access-Control-Request-Method against ``allow_methods``.

        Raises:
            NoMethodsConfigured: the policy allows no methods at all.
            NoMethodProvided: the client did not say which method it will use.
            MethodNotAllowed: the requested method is not allowed.
        """
        allow_methods = self._resolver.resolve(settings, "allow_methods", request)
        if allow_methods == "":
            raise NoMethodsConfigured("No methods configured to be allowed for request")

        methods = split_list(allow_methods.upper())
        requested = request.header_line(REQUEST_METHOD)
        if requested == "":
            raise NoMethodProvided("No method provided", allowed=methods)

        requested = requested.upper()
        if requested not in methods:
            self._log.debug("cors_preflight_method_rejected", method=requested, allowed=methods)
            raise MethodNotAllowed("Method not allowed", sent=requested, allowed=methods)

        headers[ALLOW_METHODS] = allow_methods

    def check_headers(self, settings: PolicySettings, request: CorsRequest, headers: dict[str, str]) -> None:
        """Validate Access-Control-Request-Headers against ``allow_headers``.

        Raises:
            NoHeadersAllowed: headers were requested but none are configured.
            HeaderNotAllowed: a requested header is missing from the allow-list.
        """
        allow_headers = self._resolver.resolve(settings, "allow_headers", request)
        requested = request.header_line(REQUEST_HEADERS)

        if requested == "":
            headers[ALLOW_HEADERS] = allow_headers
            return

        if allow_headers == "":
            raise NoHeadersAllowed("No headers are allowed", sent=requested)

        allowed = split_list(allow_headers.lower())
        for header in split_list(requested.lower()):
            if header not in allowed:
                self._log.debug("cors_preflight_header_rejected", header=header, allowed=allowed)
                raise HeaderNotAllowed(f'Header "{header}" not allowed', sent=requested, allowed=allowed)

        headers[ALLOW_HEADERS] = allow_headers

    def negotiate(self, settings: PolicySettings, request: CorsRequest, headers: dict[str, str]) -> dict[str, str]:
        """Run both checks and add max-age; return the complete header set.

        *headers* is not modified; a copy is extended so that a failed
        check leaves nothing behind.
        """
        accumulated = dict(headers)
        self.check_method(settings, request, accumulated)
        self.check_headers(settings, request, accumulated)

        max_age = self._resolver.resolve_int(settings, "max_age", request)
        if max_age > 0:
            accumulated[MAX_AGE] = str(max_age)
        return accumulated

    def finalize(self, response: CorsResponse, headers: dict[str, str], origin: str) -> CorsResponse:
        """Write *headers* to *response* and turn it into a ``204 No Content``."""
        for name, value in headers.items():
            response.set_header(name, value)
        if origin != "*":
            response.add_header("Vary", "Origin")
        response.set_status(204, "No Content")
        response.remove_header("Content-Type")
        response.remove_header("Content-Length")
        self._log.debug("cors_preflight_finalized", origin=origin)
        return response
