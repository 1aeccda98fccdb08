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

"""Exception hierarchy for confstore.

This module defines a custom exception hierarchy that allows library users
to distinguish between the ways a load or save can fail. All exceptions
inherit from ConfStoreError, allowing users to catch all confstore errors
with a single except clause if needed.

- ClassificationError: No provider accepts the given path
- CodecError: Encoding, decoding or type binding failed
- StorageError: A local file could not be read, written or its parent
    directory created
- TransportError: An HTTP request could not be sent or its response read
- RequestTimeoutError: The HTTP client gave up waiting (a TransportError)
- StatusError: The HTTP server answered outside the 2xx range
- ConfigError: Invalid confstore settings (unknown codec, bad option values)

Example:
    Catching specific error types:
        ```python
        from confstore import load
        from confstore.exceptions import StatusError, TransportError

        try:
            settings = load("https://config.example.com/app.json")
        except StatusError as e:
            print(f"Server said {e.status_code}: {e.body}")
        except TransportError as e:
            print(f"Could not reach server: {e}")
        ```

    Catching all confstore errors:
        ```python
        from confstore.exceptions import ConfStoreError

        try:
            settings = load("settings.json")
        except ConfStoreError as e:
            print(f"confstore error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "ConfStoreError",
    "ClassificationError",
    "CodecError",
    "StorageError",
    "TransportError",
    "RequestTimeoutError",
    "StatusError",
    "ConfigError",
]


class ConfStoreError(Exception):
    """Base exception for all confstore errors.

    All confstore-specific exceptions inherit from this class, allowing users
    to catch all confstore errors with a single except clause if needed.
    """

    pass


class ClassificationError(ConfStoreError):
    """Raised when no provider in a group accepts a path.

    Attributes:
        path: The path nobody claimed.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"no provider accepts path: {path!r}")
        self.path = path


class CodecError(ConfStoreError):
    """Raised when a value cannot be encoded, decoded, or bound to a type.

    For a CodecGroup this is raised only once every member codec has failed,
    and the message does not say which codec rejected the value.
    """

    pass


class StorageError(ConfStoreError):
    """Raised for local filesystem failures.

    This exception is raised when there are problems with:

    - Reading a file (missing, permission denied, is a directory)
    - Creating the parent directories of a file being saved
    - Creating, truncating or writing the target file

    Attributes:
        path: The filesystem path the operation was acting on.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class TransportError(ConfStoreError):
    """Raised when an HTTP request cannot be completed.

    Covers connection failures, TLS errors, invalid URLs and failures while
    reading the response body.

    Attributes:
        url: The URL that was requested.
        timeout: True when the failure was the client timing out.
    """

    timeout = False

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class RequestTimeoutError(TransportError):
    """Raised when the HTTP client timeout expires before a response arrives."""

    timeout = True


class StatusError(ConfStoreError):
    """Raised when an HTTP response status is outside [200, 300).

    The response body is never handed to the codec in this case.

    Attributes:
        status_code: HTTP status code of the response.
        body: Response body decoded as text (undecodable bytes replaced).
        url: The URL that was requested.
    """

    def __init__(self, status_code: int, body: str, url: str | None = None) -> None:
        super().__init__(f"http {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.url = url


class ConfigError(ConfStoreError):
    """Raised for invalid confstore settings.

    This exception is raised when there are problems with:

    - Unknown codec names passed to get_codec()
    - Option mappings with unknown keys or values of the wrong type
    - Calling load_layered() without any paths

    Example:
        Catching configuration errors:
            ```python
            from confstore.exceptions import ConfigError
            from confstore.settings import options_from_mapping

            try:
                options = options_from_mapping({"codec": "toml"})
            except ConfigError as e:
                print(f"Config error: {e}")
            ```
    """

    pass
