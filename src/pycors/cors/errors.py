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
"""CORS error taxonomy.

Client rejections (:class:`CorsRejection`) are caused by what the browser
sent and are answered with 403.  Configuration errors
(:class:`CorsConfigurationError`) mean the policy itself is broken and are
answered with 500.  Both carry what was *sent* and what was *allowed* so the
HTTP layer can produce useful diagnostics.
"""

from __future__ import annotations

from collections.abc import Iterable

from pycors.kernel.exceptions import ConfigurationException, PyCorsException, SecurityException


class CorsException(PyCorsException):
    """Base class for every CORS error.

    Args:
        message: Human-readable error description.
        sent: The value the client sent that caused the error.
        allowed: The values that would have been accepted.
    """

    default_code = "CORS_ERROR"

    def __init__(
        self,
        message: str,
        sent: str = "",
        allowed: Iterable[str] | None = None,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code or self.default_code, context=context)
        self.sent = sent
        self.allowed: list[str] = list(allowed) if allowed is not None else []
        self.context.setdefault("sent", self.sent)
        self.context.setdefault("allowed", list(self.allowed))


class CorsRejection(CorsException, SecurityException):
    """The request was refused because of what the client sent."""


class CorsConfigurationError(CorsException, ConfigurationException):
    """The configured policy cannot be applied."""


# -- configuration time ------------------------------------------------------


class SettingsInvalid(CorsConfigurationError):
    """A settings mapping failed validation; the previous settings stay active."""

    default_code = "CORS_SETTINGS_INVALID"

    def __init__(
        self,
        message: str,
        key: str,
        actual_type: str = "",
        allowed_types: Iterable[str] = (),
    ) -> None:
        allowed_types = list(allowed_types)
        super().__init__(
            message,
            sent=actual_type,
            allowed=allowed_types,
            context={"key": key, "actual_type": actual_type, "allowed_types": allowed_types},
        )
        self.key = key
        self.actual_type = actual_type
        self.allowed_types = allowed_types


# -- request time: client rejections ----------------------------------------


class BadOrigin(CorsRejection):
    """The request carried an Origin header that matched none of the configured patterns.

    A request with *no* Origin header is not a CORS request and never raises this.
    """

    default_code = "CORS_BAD_ORIGIN"


class NoMethodProvided(CorsRejection):
    """A preflight request did not send Access-Control-Request-Method."""

    default_code = "CORS_NO_METHOD"


class MethodNotAllowed(CorsRejection):
    default_code = "CORS_METHOD_NOT_ALLOWED"


class NoHeadersAllowed(CorsRejection):
    """The client asked to send headers but the policy allows none."""

    default_code = "CORS_NO_HEADERS_ALLOWED"


class HeaderNotAllowed(CorsRejection):
    """At least one requested header is missing from the allow-list.

    ``sent`` is the complete Access-Control-Request-Headers value, not only
    the offending header.
    """

    default_code = "CORS_HEADER_NOT_ALLOWED"


# -- request time: configuration defects ------------------------------------


class NoMethodsConfigured(CorsConfigurationError):
    default_code = "CORS_NO_METHODS_CONFIGURED"


class InvalidSettingValue(CorsConfigurationError):
    default_code = "CORS_INVALID_SETTING_VALUE"


class InvalidSettingType(CorsConfigurationError):
    default_code = "CORS_INVALID_SETTING_TYPE"


class ExpectedSingleValue(CorsConfigurationError):
    default_code = "CORS_EXPECTED_SINGLE_VALUE"


class NegativeMaxAge(CorsConfigurationError):
    default_code = "CORS_NEGATIVE_MAX_AGE"
