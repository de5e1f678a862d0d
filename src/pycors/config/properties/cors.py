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
"""CORS configuration properties (``pycors.cors.*``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pycors.core.config import config_properties

_SETTING_FIELDS = ("origin", "expose_headers", "allow_methods", "allow_headers", "max_age", "allow_credentials")


@config_properties(prefix="pycors.cors")
@dataclass
class CorsProperties:
    """CORS policy as read from configuration files.

    Fields left at ``None`` are not configured; the engine defaults apply.
    """

    enabled: bool = True
    origin: str | list[str] | None = None
    expose_headers: str | list[str] | None = None
    allow_methods: str | list[str] | None = None
    allow_headers: str | list[str] | None = None
    max_age: int | None = None
    allow_credentials: bool | None = None
    url_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=list)

    def to_settings(self) -> dict[str, Any]:
        """Return the configured policy keys as a settings mapping.

        A comma separated ``origin`` string (as set through an environment
        variable) becomes a list of patterns.
        """
        settings: dict[str, Any] = {}
        for name in _SETTING_FIELDS:
            value = getattr(self, name)
            if value is not None:
                settings[name] = value
        origin = settings.get("origin")
        if isinstance(origin, str) and "," in origin:
            settings["origin"] = [item.strip() for item in origin.split(",")]
        return settings
