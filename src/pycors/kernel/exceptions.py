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
"""Unified exception hierarchy for PyCors.

All library exceptions inherit from PyCorsException, enabling unified
error handling across modules.

Categories:
- ConfigurationException: invalid or missing configuration, detected at
  construction time or while resolving request-varying settings
- SecurityException: requests refused by an access policy
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class PyCorsException(Exception):
    """Base exception for all PyCors errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_BAD_ORIGIN").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(PyCorsException):
    """Configuration is invalid, incomplete, or resolved to an unusable value."""


class MissingDependencyException(ConfigurationException):
    """A collaborator or configuration entry required to build a service is absent."""

    @classmethod
    def dependency_for_service(cls, dependency: str, service: str) -> MissingDependencyException:
        return cls(
            f'Missing dependency "{dependency}" for service "{service}"; please make sure it is '
            f"registered in your configuration. Refer to the {service} class and/or its "
            "factory to determine what the service should return.",
            code="MISSING_DEPENDENCY",
            context={"dependency": dependency, "service": service},
        )


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(PyCorsException):
    """A request was refused by an access policy."""
