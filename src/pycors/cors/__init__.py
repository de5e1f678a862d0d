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
"""PyCors CORS core — framework-agnostic policy evaluation."""

from pycors.cors.engine import CorsDecision, CorsPolicyEngine, DecisionKind
from pycors.cors.errors import (
    BadOrigin,
    CorsConfigurationError,
    CorsException,
    CorsRejection,
    ExpectedSingleValue,
    HeaderNotAllowed,
    InvalidSettingType,
    InvalidSettingValue,
    MethodNotAllowed,
    NegativeMaxAge,
    NoHeadersAllowed,
    NoMethodProvided,
    NoMethodsConfigured,
    SettingsInvalid,
)
from pycors.cors.origin import OriginResolver, ResolvedOrigin, match_origin, parse_origin
from pycors.cors.ports import CorsRequest, CorsResponse
from pycors.cors.preflight import PreflightNegotiator
from pycors.cors.resolver import SettingValueResolver
from pycors.cors.settings import (
    DEFAULT_SETTINGS,
    DynamicValue,
    PolicySettings,
    StaticValue,
    validate_settings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "BadOrigin",
    "CorsConfigurationError",
    "CorsDecision",
    "CorsException",
    "CorsPolicyEngine",
    "CorsRejection",
    "CorsRequest",
    "CorsResponse",
    "DecisionKind",
    "DynamicValue",
    "ExpectedSingleValue",
    "HeaderNotAllowed",
    "InvalidSettingType",
    "InvalidSettingValue",
    "MethodNotAllowed",
    "NegativeMaxAge",
    "NoHeadersAllowed",
    "NoMethodProvided",
    "NoMethodsConfigured",
    "OriginResolver",
    "PolicySettings",
    "PreflightNegotiator",
    "ResolvedOrigin",
    "SettingValueResolver",
    "SettingsInvalid",
    "StaticValue",
    "match_origin",
    "parse_origin",
    "validate_settings",
]
