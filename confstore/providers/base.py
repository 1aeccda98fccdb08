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

"""Provider protocol for confstore.

A provider fetches and stores raw bytes for the paths it recognizes, and
uses its bound codec to turn those bytes into values and back.

Design Philosophy:
    - Providers are Protocol classes (structural subtyping, not inheritance)
    - Each provider is immutable after construction and safe to share
        between threads
    - is_valid() is pure: it classifies the path text and never does I/O
    - Groups hold the protocol type, so any object with these three methods
        can take part in dispatch

Example:
    Implementing a custom provider:
        ```python
        from typing import Any

        class MemoryProvider:
            def __init__(self):
                self.store = {}

            def is_valid(self, path: str) -> bool:
                return path.startswith("mem:")

            def load(self, path: str, target_type: Any = None) -> Any:
                return self.store[path]

            def save(self, path: str, value: Any) -> None:
                self.store[path] = value
        ```

"""

from __future__ import annotations

from typing import Any, Protocol


class Provider(Protocol):
    """Protocol for storage backends."""

    def is_valid(self, path: str) -> bool:
        """Return True if this provider handles path.

        Must be a pure function of the path text.
        """
        ...

    def load(self, path: str, target_type: Any = None) -> Any:
        """Fetch path and decode it.

        Args:
            path: Location to read.
            target_type: Type to bind the decoded data to. None returns
                plain decoded data.

        Returns:
            The decoded value.

        Raises:
            ConfStoreError: Any subclass describing the failure.
        """
        ...

    def save(self, path: str, value: Any) -> None:
        """Encode value and store it at path.

        Args:
            path: Location to write.
            value: Plain data or dataclass instances.

        Raises:
            ConfStoreError: Any subclass describing the failure.
        """
        ...
