# Copyright 2025 Roger Cibrian
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

"""First-match provider dispatch for confstore.

ProviderGroup holds an ordered list of providers and hands each call to the
first one whose is_valid() accepts the path.

Dispatch Policy:
    - Order is precedence: when two providers both accept a path, the one
        listed first is always used
    - First match wins and its outcome is final: a failure from the chosen
        provider (I/O, status, decode) is raised as-is and no later provider
        is tried, even one that would also accept the path
    - No provider accepts the path: ClassificationError naming the path

Local and remote classification are meant to be mutually exclusive. A path
that two providers both claim points at a classification bug in
confstore.paths rather than a reason to retry elsewhere.
"""

from __future__ import annotations

import os
from typing import Any

from confstore.exceptions import ClassificationError
from confstore.logging import get_global_logger
from confstore.providers.base import Provider


class ProviderGroup:
    """Ordered composite of providers with first-match dispatch.

    ProviderGroup satisfies the Provider protocol itself, so groups nest.

    Args:
        *providers: Providers in precedence order.
    """

    def __init__(self, *providers: Provider) -> None:
        self._providers: tuple[Provider, ...] = tuple(providers)

    def __repr__(self) -> str:
        return f"ProviderGroup({', '.join(repr(p) for p in self._providers)})"

    @property
    def providers(self) -> tuple[Provider, ...]:
        return self._providers

    def select(self, path: str) -> Provider:
        """Return the first provider that accepts path.

        Raises:
            ClassificationError: If no provider accepts path.
        """
        for provider in self._providers:
            if provider.is_valid(path):
                get_global_logger().debug("PROVIDER", f"{provider!r} accepts {path!r}")
                return provider
        raise ClassificationError(path)

    def is_valid(self, path: str) -> bool:
        return any(provider.is_valid(path) for provider in self._providers)

    def load(self, path: str | os.PathLike[str], target_type: Any = None) -> Any:
        path = os.fspath(path)
        return self.select(path).load(path, target_type)

    def save(self, path: str | os.PathLike[str], value: Any) -> None:
        path = os.fspath(path)
        self.select(path).save(path, value)
