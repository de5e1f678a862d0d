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
"""CorsPolicyEngine — the single entry point used by every HTTP adapter.

Decision flow for one request:

- No ``Origin`` header: not a CORS request, nothing is added.
- ``Origin`` not allowed: the bad-origin handler runs (by default it raises
  :class:`~pycors.cors.errors.BadOrigin`).
- ``OPTIONS``: preflight negotiation, answered with ``204`` without
  reaching the downstream handler.
- Anything else: CORS headers are added to the downstream response.

:meth:`CorsPolicyEngine.evaluate` returns the outcome as a
:class:`CorsDecision`, with any rejection carried as a value.
:meth:`CorsPolicyEngine.handle` is the synchronous convenience wrapper.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

import structlog

from pycors.cors.errors import CorsException
from pycors.cors.origin import OriginResolver
from pycors.cors.ports import CorsRequest, CorsResponse
from pycors.cors.preflight import PreflightNegotiator
from pycors.cors.resolver import SettingValueResolver
from pycors.cors.settings import PolicySettings

logger = structlog.get_logger("pycors.cors")

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"

R = TypeVar("R", bound=CorsResponse)


class DecisionKind(StrEnum):
    NOT_CORS = "not_cors"
    SIMPLE = "simple"
    PREFLIGHT = "preflight"


@dataclass(frozen=True)
class CorsDecision:
    """What to do with one request.

    ``headers`` is empty whenever ``rejection`` is set.
    """

    kind: DecisionKind
    origin: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    rejection: CorsException | None = None

    @property
    def rejected(self) -> bool:
        return self.rejection is not None

    def raise_for_rejection(self) -> None:
        if self.rejection is not None:
            raise self.rejection


class CorsPolicyEngine:
    """Evaluates requests against a :class:`PolicySettings`.

    Settings are read once per evaluation; :meth:`set_settings` swaps in a
    fully validated replacement, so in-flight requests keep the settings
    they started with.
    """

    def __init__(self, settings: PolicySettings | Mapping[str, Any] | None = None, log: Any = None) -> None:
        if not isinstance(settings, PolicySettings):
            settings = PolicySettings.from_mapping(settings)
        self._settings = settings
        self._log = log if log is not None else logger
        self._resolver = SettingValueResolver(self._log)
        self._origins = OriginResolver(self._log)
        self._preflight = PreflightNegotiator(self._resolver, self._log)

    @property
    def settings(self) -> PolicySettings:
        return self._settings

    def set_settings(self, settings: PolicySettings | Mapping[str, Any]) -> CorsPolicyEngine:
        """Merge a mapping onto the current settings, or replace them with a PolicySettings.

        Raises:
            SettingsInvalid: the update is rejected and the current settings stay active.
        """
        if isinstance(settings, PolicySettings):
            self._settings = settings
        else:
            self._settings = self._settings.merged(settings)
        return self

    def set_logger(self, log: Any) -> None:
        self._log = log
        self._resolver.set_logger(log)
        self._origins.set_logger(log)
        self._preflight.set_logger(log)

    # -- evaluation ---------------------------------------------------------

    def evaluate(self, request: CorsRequest) -> CorsDecision:
        """Classify *request* and compute the CORS headers it should receive."""
        if request.header_line("origin") == "":
            self._log.debug("cors_not_a_cors_request")
            return CorsDecision(DecisionKind.NOT_CORS)

        settings = self._settings
        is_preflight = request.method.upper() == "OPTIONS"
        try:
            return self._evaluate(settings, request, is_preflight)
        except CorsException as exc:
            self._log.info(
                "cors_request_rejected",
                method=request.method,
                origin=request.header_line("origin"),
                error=exc.code,
                reason=str(exc),
            )
            kind = DecisionKind.PREFLIGHT if is_preflight else DecisionKind.SIMPLE
            return CorsDecision(kind, rejection=exc)

    def _evaluate(self, settings: PolicySettings, request: CorsRequest, is_preflight: bool) -> CorsDecision:
        resolved = self._origins.resolve_origin(request, settings)
        if not resolved:
            settings.bad_origin_handler(request, list(resolved.tried))
            # A handler that returns instead of raising lets the request through untouched.
            self._log.debug("cors_bad_origin_ignored", tried=resolved.tried)
            return CorsDecision(DecisionKind.NOT_CORS)

        origin = resolved.matched
        self._log.debug("cors_processing", origin=origin)
        headers: dict[str, str] = {ALLOW_ORIGIN: origin}

        if self._resolver.resolve_bool(settings, "allow_credentials", request):
            headers[ALLOW_CREDENTIALS] = "true"

        if is_preflight:
            self._log.debug("cors_preflight", origin=origin)
            headers = self._preflight.negotiate(settings, request, headers)
            return CorsDecision(DecisionKind.PREFLIGHT, origin, headers)

        expose_headers = self._resolver.resolve(settings, "expose_headers", request)
        if expose_headers:
            headers[EXPOSE_HEADERS] = expose_headers
        return CorsDecision(DecisionKind.SIMPLE, origin, headers)

    # -- response shaping ---------------------------------------------------

    def apply(self, decision: CorsDecision, response: R) -> R:
        """Write an accepted decision onto *response*.

        For a preflight, *response* should be a fresh empty response; it is
        turned into ``204 No Content``.
        """
        decision.raise_for_rejection()
        if decision.kind is DecisionKind.PREFLIGHT:
            self._preflight.finalize(response, dict(decision.headers), decision.origin)
        elif decision.kind is DecisionKind.SIMPLE:
            for name, value in decision.headers.items():
                response.set_header(name, value)
        return response

    def handle(
        self,
        request: CorsRequest,
        call_next: Callable[[CorsRequest], R],
        response_factory: Callable[[], R],
    ) -> R:
        """Evaluate *request* and either answer it or forward it to *call_next*.

        Raises:
            CorsException: the request was rejected.
        """
        decision = self.evaluate(request)
        decision.raise_for_rejection()

        if decision.kind is DecisionKind.NOT_CORS:
            return call_next(request)
        if decision.kind is DecisionKind.PREFLIGHT:
            return self.apply(decision, response_factory())

        response = call_next(request)
        return self.apply(decision, response)
