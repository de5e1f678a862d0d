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
"""CORS policy settings: defaults, validation, and the literal-or-callback variant.

Every recognized setting may be given either as a literal or as a callable
taking the current request.  Literals are wrapped in :class:`StaticValue`,
callables in :class:`DynamicValue`; use sites call ``resolve(request)``
without inspecting which one they hold.

Usage::

    settings = PolicySettings.from_mapping({"origin": ["example.com", "*.example.org"]})
    settings = settings.merged({"maxAge": 300})
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, NoReturn, TypeVar

from pycors.cors.errors import BadOrigin, CorsConfigurationError, SettingsInvalid
from pycors.cors.ports import CorsRequest

T = TypeVar("T")

BadOriginHandler = Callable[[CorsRequest, list[str]], Any]

STRING = "string"
ARRAY = "array"
CALLABLE = "callable"
INT = "int"
BOOL = "bool"

SETTINGS_SCHEMA: dict[str, tuple[str, ...]] = {
    "origin": (STRING, ARRAY, CALLABLE),
    "expose_headers": (STRING, ARRAY, CALLABLE),
    "allow_methods": (STRING, ARRAY, CALLABLE),
    "allow_headers": (STRING, ARRAY, CALLABLE),
    "max_age": (INT, CALLABLE),
    "allow_credentials": (BOOL, CALLABLE),
    "bad_origin_handler": (CALLABLE,),
}

SETTING_ALIASES: dict[str, str] = {
    "exposeHeaders": "expose_headers",
    "allowMethods": "allow_methods",
    "allowHeaders": "allow_headers",
    "maxAge": "max_age",
    "allowCredentials": "allow_credentials",
    "badOriginHandler": "bad_origin_handler",
    "badOriginCallable": "bad_origin_handler",
}


def default_bad_origin_handler(request: CorsRequest, allowed: list[str]) -> NoReturn:
    """Refuse the request with :class:`BadOrigin`."""
    raise BadOrigin("Bad Origin", sent=request.header_line("origin"), allowed=allowed)


DEFAULT_SETTINGS: dict[str, Any] = {
    "origin": "*",
    "expose_headers": "",
    "max_age": 0,
    "allow_credentials": False,
    "allow_methods": "GET,HEAD,PUT,POST,DELETE",
    "allow_headers": "",
    "bad_origin_handler": default_bad_origin_handler,
}


# ---------------------------------------------------------------------------
# Literal-or-callback variant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StaticValue(Generic[T]):
    """A setting fixed at configuration time."""

    value: T

    def resolve(self, request: CorsRequest) -> T:
        return self.value


@dataclass(frozen=True)
class DynamicValue(Generic[T]):
    """A setting computed per request by calling ``fn(request)``."""

    fn: Callable[[CorsRequest], T]

    def resolve(self, request: CorsRequest) -> T:
        return self.fn(request)


Setting = StaticValue[Any] | DynamicValue[Any]


def as_setting(raw: Any) -> Setting:
    if callable(raw):
        return DynamicValue(raw)
    if isinstance(raw, list):
        raw = tuple(raw)
    return StaticValue(raw)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def type_name(value: Any) -> str:
    """Name the settings type of *value* (``bool`` is checked before ``int``)."""
    if isinstance(value, bool):
        return BOOL
    if isinstance(value, int):
        return INT
    if isinstance(value, str):
        return STRING
    if isinstance(value, (list, tuple)):
        return ARRAY
    if callable(value):
        return CALLABLE
    return type(value).__name__


def validate_setting(key: str, value: Any, allowed: Iterable[str]) -> None:
    """Validate one setting against its allowed type set.

    Raises:
        SettingsInvalid: naming the key, the actual type and the allowed types.
    """
    allowed = tuple(allowed)
    kind = type_name(value)
    if kind not in allowed:
        raise SettingsInvalid(
            f"Unable to validate settings for {key}: allowed types: {', '.join(allowed)}",
            key=key,
            actual_type=kind,
            allowed_types=allowed,
        )
    if kind == ARRAY:
        if not value:
            raise SettingsInvalid(f"Array for {key} is empty", key=key, actual_type=kind, allowed_types=allowed)
        if not all(isinstance(line, str) for line in value):
            raise SettingsInvalid(
                f"Array for {key} contains a non-string item", key=key, actual_type=kind, allowed_types=allowed
            )
    elif kind == INT and value < 0:
        raise SettingsInvalid(f"Int value for {key} is too low", key=key, actual_type=kind, allowed_types=allowed)


def validate_settings(settings: Mapping[str, Any]) -> None:
    """Validate every recognized key of a complete settings mapping.

    Unknown keys are tolerated.  Callables always pass here; what they
    return is checked when the setting is resolved for a request.
    """
    for key, allowed in SETTINGS_SCHEMA.items():
        if key not in settings:
            raise SettingsInvalid(f"Missing setting for {key}", key=key, allowed_types=allowed)
        validate_setting(key, settings[key], allowed)


def normalize_keys(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Translate camelCase setting names to their snake_case form."""
    return {SETTING_ALIASES.get(key, key): value for key, value in mapping.items()}


# ---------------------------------------------------------------------------
# PolicySettings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PolicySettings:
    """Validated, immutable CORS policy.

    Unknown keys are kept in ``extras`` and passed through untouched.
    Replace settings by building a new instance with :meth:`merged`.
    """

    origin: Setting
    expose_headers: Setting
    allow_methods: Setting
    allow_headers: Setting
    max_age: Setting
    allow_credentials: Setting
    bad_origin_handler: BadOriginHandler = default_bad_origin_handler
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def defaults(cls) -> PolicySettings:
        return cls.from_mapping()

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any] | None = None,
        base: PolicySettings | None = None,
    ) -> PolicySettings:
        """Merge *mapping* onto *base* (or the defaults), validate, and build.

        Raises:
            SettingsInvalid: if any recognized key is missing or has a bad value.
                Nothing is built in that case.
        """
        merged = base.to_dict() if base is not None else dict(DEFAULT_SETTINGS)
        merged.update(normalize_keys(mapping or {}))
        validate_settings(merged)

        recognized = {key: merged.pop(key) for key in SETTINGS_SCHEMA}
        handler = recognized.pop("bad_origin_handler")
        return cls(
            **{key: as_setting(value) for key, value in recognized.items()},
            bad_origin_handler=handler,
            extras=MappingProxyType(merged),
        )

    def merged(self, mapping: Mapping[str, Any]) -> PolicySettings:
        """Return a new, validated instance with *mapping* merged on top of this one."""
        return type(self).from_mapping(mapping, base=self)

    def setting(self, key: str) -> Setting:
        """Look up a resolvable setting by snake_case or camelCase name."""
        key = SETTING_ALIASES.get(key, key)
        if key not in SETTINGS_SCHEMA or key == "bad_origin_handler":
            raise CorsConfigurationError(f"Missing setting for {key}")
        return getattr(self, key)

    def to_dict(self) -> dict[str, Any]:
        """Return the raw settings (callables unresolved), extras included."""
        data: dict[str, Any] = {}
        for key in SETTINGS_SCHEMA:
            if key == "bad_origin_handler":
                data[key] = self.bad_origin_handler
                continue
            current = getattr(self, key)
            if isinstance(current, DynamicValue):
                data[key] = current.fn
            elif isinstance(current.value, tuple):
                data[key] = list(current.value)
            else:
                data[key] = current.value
        data.update(self.extras)
        return data
