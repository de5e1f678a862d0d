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
"""JSON error responses for rejected CORS requests."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from starlette.responses import JSONResponse

from pycors.cors.errors import CorsConfigurationError, CorsRejection
from pycors.kernel.exceptions import PyCorsException

_STATUS_MAP: dict[type, int] = {
    CorsRejection: 403,
    CorsConfigurationError: 500,
}


def status_for(exc: Exception) -> int:
    """Map an exception to its HTTP status code."""
    for exc_type, status in _STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return status
    return 500


def error_body(exc: PyCorsException, path: str) -> dict[str, Any]:
    status = status_for(exc)
    body: dict[str, Any] = {
        "error": {
            "message": str(exc),
            "code": exc.code or type(exc).__name__,
            "timestamp": datetime.now(UTC).isoformat(),
            "status": status,
            "path": path,
        }
    }
    if exc.context:
        body["error"]["context"] = exc.context
    return body


def cors_error_response(exc: PyCorsException, path: str) -> JSONResponse:
    """Build the response for a rejection; it never carries CORS headers."""
    return JSONResponse(error_body(exc, path), status_code=status_for(exc))
