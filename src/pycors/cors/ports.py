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
"""Ports consumed by the CORS engine.

The engine never imports a web framework.  Adapters wrap their native
request/response objects so that they satisfy these protocols.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CorsRequest(Protocol):
    """Read-only view of an inbound request."""

    @property
    def method(self) -> str: ...

    def header_line(self, name: str) -> str:
        """Return the header value for *name* (case-insensitive), or ``""`` when absent.

        Repeated header lines are joined with ``", "``.
        """
        ...


@runtime_checkable
class CorsResponse(Protocol):
    """Mutable view of an outgoing response."""

    def set_header(self, name: str, value: str) -> None:
        """Set *name*, replacing any existing value."""
        ...

    def add_header(self, name: str, value: str) -> None:
        """Append another *name* line, keeping existing ones."""
        ...

    def remove_header(self, name: str) -> None: ...

    def set_status(self, status_code: int, reason: str = "") -> None: ...
