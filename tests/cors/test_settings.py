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
"""Tests for settings validation and PolicySettings."""

from __future__ import annotations

import dataclasses

import pytest

from pycors.cors.errors import BadOrigin, CorsConfigurationError, SettingsInvalid
from pycors.cors.settings import (
    DEFAULT_SETTINGS,
    SETTINGS_SCHEMA,
    DynamicValue,
    PolicySettings,
    StaticValue,
    as_setting,
    default_bad_origin_handler,
    normalize_keys,
    type_name,
    validate_setting,
    validate_settings,
)


class _Request:
    method = "GET"

    def __init__(self, origin: str = "") -> None:
        self._origin = origin

    def header_line(self, name: str) -> str:
        return self._origin if name.lower() == "origin" else ""


# ---------------------------------------------------------------------------
# Type names
# ---------------------------------------------------------------------------


class TestTypeName:
    def test_bool_is_not_int(self):
        assert type_name(True) == "bool"
        assert type_name(0) == "int"

    def test_arrays(self):
        assert type_name(["a"]) == "array"
        assert type_name(("a",)) == "array"

    def test_string_and_callable(self):
        assert type_name("abc") == "string"
        assert type_name(lambda request: "x") == "callable"

    def test_unknown(self):
        assert type_name(1.5) == "float"
        assert type_name(None) == "NoneType"


# ---------------------------------------------------------------------------
# validate_setting
# ---------------------------------------------------------------------------

_SAMPLES = [
    ("string", "abc"),
    ("string", "123"),
    ("int", 123),
    ("bool", True),
    ("bool", False),
    ("callable", lambda request: None),
    ("array", ["abc", "def"]),
]


class TestValidateSetting:
    @pytest.mark.parametrize("key", list(SETTINGS_SCHEMA))
    @pytest.mark.parametrize(("kind", "value"), _SAMPLES)
    def test_type_matrix(self, key, kind, value):
        allowed = SETTINGS_SCHEMA[key]
        if kind in allowed:
            validate_setting(key, value, allowed)
        else:
            with pytest.raises(SettingsInvalid) as exc_info:
                validate_setting(key, value, allowed)
            assert str(exc_info.value) == f"Unable to validate settings for {key}: allowed types: {', '.join(allowed)}"
            assert exc_info.value.key == key
            assert exc_info.value.actual_type == kind
            assert exc_info.value.allowed_types == list(allowed)

    def test_empty_array(self):
        with pytest.raises(SettingsInvalid, match="Array for test is empty"):
            validate_setting("test", [], ["array"])

    def test_array_with_nested_array(self):
        with pytest.raises(SettingsInvalid, match="Array for test contains a non-string item"):
            validate_setting("test", ["abc", "123", []], ["array"])

    def test_array_with_int(self):
        with pytest.raises(SettingsInvalid, match="Array for test contains a non-string item"):
            validate_setting("test", ["abc", 123], ["array"])

    def test_negative_int(self):
        with pytest.raises(SettingsInvalid, match="Int value for test is too low"):
            validate_setting("test", -1, ["int"])

    def test_zero_is_valid(self):
        validate_setting("max_age", 0, ["int"])


class TestValidateSettings:
    def test_defaults_are_valid(self):
        validate_settings(DEFAULT_SETTINGS)

    def test_missing_key(self):
        settings = dict(DEFAULT_SETTINGS)
        del settings["allow_methods"]
        with pytest.raises(SettingsInvalid, match="Missing setting for allow_methods"):
            validate_settings(settings)

    def test_unknown_keys_tolerated(self):
        validate_settings({**DEFAULT_SETTINGS, "random": object()})

    def test_callables_always_pass(self):
        validate_settings({**DEFAULT_SETTINGS, "max_age": lambda request: -5})


# ---------------------------------------------------------------------------
# Literal-or-callback variant
# ---------------------------------------------------------------------------


class TestSettingVariant:
    def test_literal_becomes_static(self):
        setting = as_setting("example.com")
        assert isinstance(setting, StaticValue)
        assert setting.resolve(_Request()) == "example.com"

    def test_list_is_frozen_to_tuple(self):
        setting = as_setting(["PUT", "POST"])
        assert setting == StaticValue(("PUT", "POST"))

    def test_callable_becomes_dynamic(self):
        seen = []

        def origin(request):
            seen.append(request)
            return ["example.com"]

        request = _Request()
        setting = as_setting(origin)
        assert isinstance(setting, DynamicValue)
        assert setting.resolve(request) == ["example.com"]
        assert seen == [request]


# ---------------------------------------------------------------------------
# PolicySettings
# ---------------------------------------------------------------------------


class TestPolicySettingsDefaults:
    def test_defaults(self):
        data = PolicySettings.defaults().to_dict()
        assert data["origin"] == "*"
        assert data["expose_headers"] == ""
        assert data["max_age"] == 0
        assert data["allow_credentials"] is False
        assert data["allow_methods"] == "GET,HEAD,PUT,POST,DELETE"
        assert data["allow_headers"] == ""
        assert data["bad_origin_handler"] is default_bad_origin_handler

    def test_frozen(self):
        settings = PolicySettings.defaults()
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.origin = StaticValue("x")  # type: ignore[misc]


class TestPolicySettingsFromMapping:
    def test_camel_case_keys(self):
        settings = PolicySettings.from_mapping({"maxAge": 123, "allowCredentials": True, "exposeHeaders": "XY"})
        data = settings.to_dict()
        assert data["max_age"] == 123
        assert data["allow_credentials"] is True
        assert data["expose_headers"] == "XY"

    def test_legacy_bad_origin_alias(self):
        def handler(request, allowed):
            return None

        settings = PolicySettings.from_mapping({"badOriginCallable": handler})
        assert settings.bad_origin_handler is handler

    def test_extras_pass_through(self):
        settings = PolicySettings.from_mapping({"maxAge": 123, "random": "123"})
        assert dict(settings.extras) == {"random": "123"}
        assert settings.to_dict()["random"] == "123"

    def test_extras_are_read_only(self):
        settings = PolicySettings.from_mapping({"random": "123"})
        with pytest.raises(TypeError):
            settings.extras["random"] = "456"  # type: ignore[index]

    def test_array_round_trips_as_list(self):
        settings = PolicySettings.from_mapping({"origin": ["example.com", "*.dummy.com"]})
        assert settings.to_dict()["origin"] == ["example.com", "*.dummy.com"]

    def test_invalid_mapping_rejected(self):
        with pytest.raises(SettingsInvalid) as exc_info:
            PolicySettings.from_mapping({"origin": 123})
        assert exc_info.value.key == "origin"
        assert exc_info.value.actual_type == "int"

    def test_bool_rejected_for_max_age(self):
        with pytest.raises(SettingsInvalid, match="allowed types: int, callable"):
            PolicySettings.from_mapping({"maxAge": True})


class TestPolicySettingsMerged:
    def test_merge_keeps_previous_values(self):
        first = PolicySettings.from_mapping({"origin": "example.com"})
        second = first.merged({"maxAge": 300})
        assert second.to_dict()["origin"] == "example.com"
        assert second.to_dict()["max_age"] == 300

    def test_original_untouched(self):
        first = PolicySettings.from_mapping({"origin": "example.com"})
        first.merged({"origin": "other.com"})
        assert first.to_dict()["origin"] == "example.com"

    def test_invalid_update_rejected_whole(self):
        first = PolicySettings.from_mapping({"origin": "example.com"})
        with pytest.raises(SettingsInvalid):
            first.merged({"maxAge": 60, "allowHeaders": []})
        assert first.to_dict()["max_age"] == 0

    def test_extras_survive_merge(self):
        first = PolicySettings.from_mapping({"random": "123"})
        assert dict(first.merged({"maxAge": 1}).extras) == {"random": "123"}


class TestPolicySettingsLookup:
    def test_setting_by_either_spelling(self):
        settings = PolicySettings.from_mapping({"allowMethods": ["PUT"]})
        assert settings.setting("allowMethods") is settings.setting("allow_methods")

    def test_unknown_setting(self):
        with pytest.raises(CorsConfigurationError, match="Missing setting for nope"):
            PolicySettings.defaults().setting("nope")


class TestDefaultBadOriginHandler:
    def test_raises_bad_origin(self):
        with pytest.raises(BadOrigin) as exc_info:
            default_bad_origin_handler(_Request("dummy.com"), ["example.com"])
        assert str(exc_info.value) == "Bad Origin"
        assert exc_info.value.sent == "dummy.com"
        assert exc_info.value.allowed == ["example.com"]


class TestNormalizeKeys:
    def test_translates_known_aliases_only(self):
        assert normalize_keys({"allowHeaders": "x", "other": 1}) == {"allow_headers": "x", "other": 1}
