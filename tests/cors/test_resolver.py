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
"""Tests for SettingValueResolver."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pycors.cors.errors import ExpectedSingleValue, InvalidSettingType, InvalidSettingValue, NegativeMaxAge
from pycors.cors.resolver import SettingValueResolver, split_list
from pycors.cors.settings import PolicySettings


class _Request:
    method = "GET"

    def header_line(self, name: str) -> str:
        return ""


def _settings(**values) -> PolicySettings:
    return PolicySettings.from_mapping(values)


@pytest.fixture
def resolver():
    return SettingValueResolver(log=MagicMock())


class TestSplitList:
    def test_trims_items(self):
        assert split_list("a , b,c ") == ["a", "b", "c"]

    def test_single_item(self):
        assert split_list("GET") == ["GET"]


class TestResolve:
    def test_comma_string_is_normalized(self, resolver):
        settings = _settings(expose_headers="XY,ZX")
        assert resolver.resolve(settings, "expose_headers", _Request()) == "XY, ZX"

    def test_list_is_joined(self, resolver):
        settings = _settings(expose_headers=["XY", "ZX"])
        assert resolver.resolve(settings, "expose_headers", _Request()) == "XY, ZX"

    def test_empty_string(self, resolver):
        settings = _settings(expose_headers="")
        assert resolver.resolve(settings, "expose_headers", _Request()) == ""

    def test_callback_receives_request(self, resolver):
        request = _Request()
        seen = []

        def headers(req):
            seen.append(req)
            return ["A", "B"]

        settings = _settings(allow_headers=headers)
        assert resolver.resolve(settings, "allow_headers", request) == "A, B"
        assert seen == [request]

    def test_callback_returning_false(self, resolver):
        settings = _settings(expose_headers=lambda request: False)
        assert resolver.resolve(settings, "expose_headers", _Request()) == ""

    def test_callback_returning_none(self, resolver):
        settings = _settings(expose_headers=lambda request: None)
        assert resolver.resolve(settings, "expose_headers", _Request()) == ""

    def test_callback_returning_true(self, resolver):
        settings = _settings(expose_headers=lambda request: True)
        with pytest.raises(InvalidSettingValue, match="Cannot have true as a setting for expose_headers"):
            resolver.resolve(settings, "expose_headers", _Request())

    def test_callback_returning_dict(self, resolver):
        settings = _settings(expose_headers=lambda request: {"a": "b"})
        with pytest.raises(InvalidSettingType) as exc_info:
            resolver.resolve(settings, "expose_headers", _Request())
        assert exc_info.value.sent == "dict"

    def test_callback_returning_mixed_list(self, resolver):
        settings = _settings(expose_headers=lambda request: ["a", 1])
        with pytest.raises(InvalidSettingType):
            resolver.resolve(settings, "expose_headers", _Request())

    def test_int_without_single(self, resolver):
        settings = _settings(max_age=300)
        assert resolver.resolve(settings, "max_age", _Request()) == "300"

    def test_camel_case_key(self, resolver):
        settings = _settings(exposeHeaders="XY")
        assert resolver.resolve(settings, "exposeHeaders", _Request()) == "XY"

    def test_empty_value_is_logged(self):
        log = MagicMock()
        resolver = SettingValueResolver(log=log)
        resolver.resolve(_settings(expose_headers=lambda request: False), "expose_headers", _Request())
        log.debug.assert_called_once_with("cors_setting_empty", setting="expose_headers")


class TestResolveSingle:
    def test_single_string(self, resolver):
        settings = _settings(origin="example.com")
        assert resolver.resolve(settings, "origin", _Request(), single=True) == "example.com"

    def test_single_int(self, resolver):
        settings = _settings(max_age=12)
        assert resolver.resolve(settings, "max_age", _Request(), single=True) == "12"

    def test_single_from_one_item_list(self, resolver):
        settings = _settings(origin=["example.com"])
        assert resolver.resolve(settings, "origin", _Request(), single=True) == "example.com"

    def test_multiple_items_rejected(self, resolver):
        settings = _settings(origin="a.com,b.com")
        with pytest.raises(ExpectedSingleValue, match="Only expected a single string, int or bool"):
            resolver.resolve(settings, "origin", _Request(), single=True)

    def test_false_is_empty_even_when_single(self, resolver):
        settings = _settings(origin=lambda request: False)
        assert resolver.resolve(settings, "origin", _Request(), single=True) == ""


class TestResolveBool:
    def test_true(self, resolver):
        assert resolver.resolve_bool(_settings(allow_credentials=True), "allow_credentials", _Request()) is True

    def test_callback_returning_false(self, resolver):
        settings = _settings(allow_credentials=lambda request: False)
        assert resolver.resolve_bool(settings, "allow_credentials", _Request()) is False

    def test_callback_returning_string(self, resolver):
        settings = _settings(allow_credentials=lambda request: "yes")
        with pytest.raises(InvalidSettingType, match="allow_credentials should be a boolean value"):
            resolver.resolve_bool(settings, "allow_credentials", _Request())


class TestResolveInt:
    def test_int(self, resolver):
        assert resolver.resolve_int(_settings(max_age=300), "max_age", _Request()) == 300

    def test_callback_returning_bool(self, resolver):
        settings = _settings(max_age=lambda request: True)
        with pytest.raises(InvalidSettingType):
            resolver.resolve_int(settings, "max_age", _Request())

    def test_callback_returning_string(self, resolver):
        settings = _settings(max_age=lambda request: "300")
        with pytest.raises(InvalidSettingType, match="max_age should be an int value"):
            resolver.resolve_int(settings, "max_age", _Request())

    def test_callback_returning_negative(self, resolver):
        settings = _settings(max_age=lambda request: -1)
        with pytest.raises(NegativeMaxAge, match="max_age should be 0 or more"):
            resolver.resolve_int(settings, "max_age", _Request())
