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
"""SettingValueResolver — turns a configured setting into the value used for one request."""

from __future__ import annotations

from typing import Any

import structlog

from pycors.cors.errors import ExpectedSingleValue, InvalidSettingType, InvalidSettingValue, NegativeMaxAge
from pycors.cors.ports import CorsRequest
from pycors.cors.settings import PolicySettings

logger = structlog.get_logger("pycors.cors")


def split_list(value: str) -> list[str]:
    """Split a comma separated header-style value and trim each item."""
    return [item.strip() for item in value.split(",")]


class SettingValueResolver:
    """Resolves settings against the current request.

    Callable settings are invoked with the request; the result then goes
    through the same normalization as a literal would.
    """

    def __init__(self, log: Any = None) -> None:
        self._log = log if log is not None else logger

    def set_logger(self, log: Any) -> None:
        self._log = log

    def resolve(self, settings: PolicySettings, key: str, request: CorsRequest, single: bool = False) -> str:
        """Resolve a string/list setting into a header-ready string.

        ``False``/``None`` mean "nothing configured" and resolve to ``""``.
        Lists (and comma separated strings) come back joined with ``", "``.
        With ``single=True`` exactly one item (or an int) is required.

        Raises:
            InvalidSettingValue: the setting resolved to ``True``.
            ExpectedSingleValue: ``single`` was requested but several items were found.
            InvalidSettingType: the value is not a string, list, int or bool.
        """
        item = settings.setting(key).resolve(request)

        if item is False or item is None:
            self._log.debug("cors_setting_empty", setting=key)
            return ""
        if item is True:
            raise InvalidSettingValue(f"Cannot have true as a setting for {key}", sent="true")

        if isinstance(item, str):
            items = split_list(item)
        elif isinstance(item, int):
            if single:
                return str(item)
            items = split_list(str(item))
        elif isinstance(item, (list, tuple)) and all(isinstance(entry, str) for entry in item):
            items = list(item)
        else:
            raise InvalidSettingType(
                f"Setting {key} resolved to an unsupported type",
                sent=type(item).__name__,
                allowed=["string", "array"],
            )

        if single:
            if len(items) != 1:
                raise ExpectedSingleValue(
                    "Only expected a single string, int or bool", sent=", ".join(items), allowed=[key]
                )
            return items[0]

        return ", ".join(items)

    def resolve_bool(self, settings: PolicySettings, key: str, request: CorsRequest) -> bool:
        item = settings.setting(key).resolve(request)
        if not isinstance(item, bool):
            raise InvalidSettingType(f"{key} should be a boolean value", sent=type(item).__name__, allowed=["bool"])
        return item

    def resolve_int(self, settings: PolicySettings, key: str, request: CorsRequest) -> int:
        item = settings.setting(key).resolve(request)
        if isinstance(item, bool) or not isinstance(item, int):
            raise InvalidSettingType(f"{key} should be an int value", sent=type(item).__name__, allowed=["int"])
        if item < 0:
            raise NegativeMaxAge(f"{key} should be 0 or more", sent=str(item))
        return item
