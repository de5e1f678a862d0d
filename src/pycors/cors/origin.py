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
"""Origin matching and resolution.

The resolved origin is one of:

* ``""`` — no Origin header, or nothing matched
* ``"*"`` — accepted by a wildcard policy
* the matched host, qualified as ``scheme://host[:port]`` when the Origin
  header carried a scheme or a port
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import structlog

from pycors.cors.errors import InvalidSettingType
from pycors.cors.ports import CorsRequest
from pycors.cors.settings import PolicySettings

logger = structlog.get_logger("pycors.cors")

DEFAULT_SCHEME = "https"
DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443, "ws": 80, "wss": 443}


def match_origin(pattern: str, host: str, log: Any = None) -> str:
    """Match *host* against a configured origin *pattern*.

    Returns the pattern itself for ``""`` and ``"*"``, the (lowercased) host
    on a match, or ``""`` when the pattern does not match.  A ``*`` inside
    a pattern matches any run of characters.
    """
    log = log if log is not None else logger
    if pattern in ("", "*"):
        return pattern

    pattern = pattern.lower()
    host = host.lower()
    if "*" not in pattern:
        if pattern == host:
            log.debug("cors_origin_exact_match", pattern=pattern, origin=host)
            return host
    else:
        regex = ".*".join(re.escape(part) for part in pattern.split("*"))
        if re.fullmatch(regex, host):
            log.debug("cors_origin_wildcard_match", pattern=pattern, origin=host)
            return host

    log.debug("cors_origin_no_match", pattern=pattern, origin=host)
    return ""


@dataclass(frozen=True)
class ParsedOrigin:
    host: str
    scheme: str | None = None
    port: int | None = None


def parse_origin(origin: str) -> ParsedOrigin:
    """Split an Origin header value into scheme, host and port.

    Values that cannot be parsed as a URL are treated as a bare host.
    """
    origin = origin.lower()
    has_scheme = "://" in origin
    try:
        parts = urlsplit(origin if has_scheme else f"//{origin}")
        port = parts.port
    except ValueError:
        return ParsedOrigin(host=origin)
    if not parts.hostname:
        return ParsedOrigin(host=origin)
    host = parts.hostname
    if ":" in host:
        # IPv6 literals keep their brackets, as in the Origin header
        host = f"[{host}]"
    return ParsedOrigin(host=host, scheme=parts.scheme or None, port=port)


def qualify_origin(matched: str, parsed: ParsedOrigin) -> str:
    """Rebuild ``scheme://host[:port]`` around a matched host.

    ``""`` and ``"*"`` are returned unchanged, as is a bare host when the
    Origin header had neither scheme nor port.  Default ports are omitted.
    """
    if matched in ("", "*"):
        return matched
    if parsed.scheme is None and parsed.port is None:
        return matched

    scheme = parsed.scheme or DEFAULT_SCHEME
    if parsed.port is None or parsed.port == DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{matched}"
    return f"{scheme}://{matched}:{parsed.port}"


@dataclass(frozen=True)
class ResolvedOrigin:
    """Outcome of origin resolution for one request."""

    matched: str
    tried: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.matched != ""


class OriginResolver:
    """Evaluates a request's Origin header against the ``origin`` policy."""

    def __init__(self, log: Any = None) -> None:
        self._log = log if log is not None else logger

    def set_logger(self, log: Any) -> None:
        self._log = log

    def resolve_origin(self, request: CorsRequest, settings: PolicySettings) -> ResolvedOrigin:
        """Resolve the request origin.

        Every pattern tried is recorded, including a single-string policy,
        so that a :class:`~pycors.cors.errors.BadOrigin` can list them.

        Raises:
            InvalidSettingType: a callback policy returned something other
                than a string or a list of strings.
        """
        origin = request.header_line("origin")
        if not origin:
            self._log.debug("cors_origin_missing")
            return ResolvedOrigin("")

        self._log.debug("cors_origin_received", origin=origin)
        parsed = parse_origin(origin)

        policy = settings.origin.resolve(request)
        tried: list[str] = []

        if isinstance(policy, (list, tuple)):
            for pattern in policy:
                if not isinstance(pattern, str):
                    raise InvalidSettingType(
                        "origin entries must be strings", sent=type(pattern).__name__, allowed=["string"]
                    )
                tried.append(pattern)
                matched = match_origin(pattern, parsed.host, self._log)
                if matched:
                    self._log.debug("cors_origin_matched", origin=matched, pattern=pattern)
                    return ResolvedOrigin(qualify_origin(matched, parsed), tried)
            return ResolvedOrigin("", tried)

        if isinstance(policy, str):
            tried.append(policy)
            matched = match_origin(policy, parsed.host, self._log)
            if matched:
                self._log.debug("cors_origin_matched", origin=matched, pattern=policy)
            return ResolvedOrigin(qualify_origin(matched, parsed), tried)

        if policy is None or policy is False:
            return ResolvedOrigin("", tried)

        raise InvalidSettingType(
            "origin resolved to an unsupported type",
            sent=type(policy).__name__,
            allowed=["string", "array"],
        )
