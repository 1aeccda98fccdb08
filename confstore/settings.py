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

"""Client configuration and facade options for confstore.

Everything a caller can tune is an explicit, frozen dataclass passed by
value. Nothing is read from globals or the environment.

ClientConfig:
    HTTP client settings for the remote provider: request timeout, extra
    headers, TLS verification, and an optional caller-owned
    requests.Session used as the transport.

Options:
    What the facade needs to build a provider group: an optional
    ClientConfig (remote provider only) and an optional codec (both
    providers).

Settings files:
    options_from_mapping() builds Options from plain data, so the confstore
    settings of an application can live in a file that confstore loads:

        codec: yaml
        http:
          timeout: 5
          headers:
            Authorization: Bearer abc123
          verify: true

Example:
    ```python
    from confstore import load
    from confstore.settings import ClientConfig, Options

    options = Options(http_client=ClientConfig(timeout=5))
    cfg = load("https://config.example.com/app.json", options=options)
    ```
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import requests

from confstore.codecs import Codec, get_codec
from confstore.exceptions import ConfigError

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "confstore/0.1"


@dataclass(frozen=True)
class ClientConfig:
    """HTTP client settings for the remote provider.

    Attributes:
        timeout: Per-request timeout in seconds (connect and read).
        headers: Extra headers sent with every request. confstore sets no
            Content-Type of its own; add one here if the server needs it.
        verify: TLS verification flag, or a path to a CA bundle.
        session: Caller-owned requests.Session used as the transport. It is
            never closed by confstore. When None, each call opens and closes
            its own session.
    """

    timeout: float = DEFAULT_TIMEOUT
    headers: Mapping[str, str] = field(default_factory=dict)
    verify: bool | str = True
    session: requests.Session | None = None

    def __post_init__(self) -> None:
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ConfigError(f"timeout must be a number, got {self.timeout!r}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout!r}")

    @contextmanager
    def open_session(self) -> Iterator[requests.Session]:
        """Yield the session to use for one request.

        A caller-supplied session is yielded untouched and left open.
        Otherwise a fresh session is created with the confstore User-Agent
        and closed on exit. Configured headers are sent per request.
        """
        if self.session is not None:
            yield self.session
            return
        with requests.Session() as s:
            s.headers.update({"User-Agent": USER_AGENT})
            yield s


@dataclass(frozen=True)
class Options:
    """Facade options, applied once when the default provider group is built.

    Attributes:
        http_client: Overrides the remote provider's client settings.
        codec: Replaces the default compact JSON codec for both providers.
    """

    http_client: ClientConfig | None = None
    codec: Codec | None = None


_OPTION_KEYS = {"codec", "http"}
_HTTP_KEYS = {"timeout", "headers", "verify"}


def _client_from_mapping(raw: Any) -> ClientConfig:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"'http' must be a mapping, got {type(raw).__name__}")
    unknown = set(raw) - _HTTP_KEYS
    if unknown:
        raise ConfigError(f"Unknown http option(s): {', '.join(sorted(unknown))}")

    kwargs: dict[str, Any] = {}
    if "timeout" in raw:
        kwargs["timeout"] = raw["timeout"]
    if "headers" in raw:
        headers = raw["headers"]
        if not isinstance(headers, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
        ):
            raise ConfigError("'http.headers' must map strings to strings")
        kwargs["headers"] = dict(headers)
    if "verify" in raw:
        verify = raw["verify"]
        if not isinstance(verify, (bool, str)):
            raise ConfigError("'http.verify' must be a boolean or a CA bundle path")
        kwargs["verify"] = verify
    return ClientConfig(**kwargs)


def options_from_mapping(raw: Mapping[str, Any]) -> Options:
    """Build Options from plain decoded data.

    Args:
        raw: Mapping with optional keys "codec" (registered codec name) and
            "http" (timeout, headers, verify).

    Returns:
        The equivalent Options.

    Raises:
        ConfigError: On unknown keys, wrong value types or unknown codec names.
    """
    if not isinstance(raw, Mapping):
        raise ConfigError(f"options must be a mapping, got {type(raw).__name__}")
    unknown = set(raw) - _OPTION_KEYS
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}")

    codec: Codec | None = None
    if "codec" in raw:
        if not isinstance(raw["codec"], str):
            raise ConfigError("'codec' must be a codec name")
        codec = get_codec(raw["codec"])

    http_client = _client_from_mapping(raw["http"]) if "http" in raw else None
    return Options(http_client=http_client, codec=codec)
