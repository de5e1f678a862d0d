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
"""WebFilter protocol, OncePerRequestFilter base class and filter ordering.

Filters use generic ``Any`` types for Request/Response so that
vendor-specific types (e.g. Starlette) stay in the adapter layer.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Coroutine
from fnmatch import fnmatch
from typing import Any, Protocol, TypeVar, runtime_checkable

CallNext = Callable[..., Coroutine[Any, Any, Any]]

T = TypeVar("T", bound=type)

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1


def order(value: int) -> Callable[[T], T]:
    """Set the position of a filter class in the chain (lower runs first)."""

    def decorator(cls: T) -> T:
        cls.__pycors_order__ = value  # type: ignore[attr-defined]
        return cls

    return decorator


def get_order(cls: type) -> int:
    return getattr(cls, "__pycors_order__", 0)


@runtime_checkable
class WebFilter(Protocol):
    """An HTTP request/response filter.

    A filter may inspect the request, answer it itself, or delegate to
    ``call_next`` and then adjust the response.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` to skip this filter for the given request."""
        ...


class OncePerRequestFilter(abc.ABC):
    """Base class for :class:`WebFilter` implementations with URL-pattern matching.

    Attributes:
        url_patterns: Glob patterns the filter applies to; empty means all paths.
        exclude_patterns: Glob patterns skipped even when ``url_patterns`` match.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    def should_not_filter(self, request: Any) -> bool:
        path: str = request.url.path
        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True
        return any(fnmatch(path, p) for p in self.exclude_patterns)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Run the filter.  Call ``await call_next(request)`` to continue the chain."""
        ...
