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
"""LoggingPort — how an application hands its logging backend to PyCors.

``create_app(config=..., logging_port=...)`` configures the port from the
``pycors.logging`` section and takes the CORS engine's logger from it, so
every policy decision is reported through the application's backend.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pycors.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """A logging backend PyCors can configure and draw loggers from."""

    def configure(self, config: Config) -> None:
        """Apply ``pycors.logging.level.*`` and ``pycors.logging.format``."""
        ...

    def get_logger(self, name: str) -> Any:
        """Return a logger accepting ``logger.debug("event", key=value)`` calls."""
        ...

    def set_level(self, name: str, level: str) -> None: ...
