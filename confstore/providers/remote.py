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

"""HTTP(S) provider for confstore.

Loads with GET and saves with POST through requests. The provider claims
http:// and https:// URLs that carry a host.

Key Features:

- **Bounded waits** - Every request uses the ClientConfig timeout (30 s by
  default). A stalled server surfaces as RequestTimeoutError instead of
  hanging the caller.
- **Status check before decode** - Any status outside [200, 300) raises
  StatusError carrying the code and body text. Error pages are never fed to
  the codec.
- **No retries** - Each call sends exactly one request. Retry policy belongs
  to the caller.
- **No implicit Content-Type** - The POST body is the encoded payload as-is.
  Servers that need a Content-Type get it through ClientConfig.headers.

Example:
    ```python
    from confstore.codecs import JsonCodec
    from confstore.providers import HttpProvider
    from confstore.settings import ClientConfig

    provider = HttpProvider(
        JsonCodec(),
        ClientConfig(timeout=5, headers={"Content-Type": "application/json"}),
    )
    provider.save("https://config.example.com/app.json", {"debug": False})
    ```
"""

from __future__ import annotations

from typing import Any

import requests
from urllib3.exceptions import ReadTimeoutError

from confstore.codecs import Codec
from confstore.exceptions import RequestTimeoutError, StatusError, TransportError
from confstore.logging import get_global_logger
from confstore.paths import is_remote_url
from confstore.settings import ClientConfig


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _is_body_timeout(err: requests.exceptions.ConnectionError) -> bool:
    """Return True if err wraps a read timeout hit while streaming the body.

    requests reports a stall after the headers as ConnectionError, not
    Timeout.
    """
    cause = err.args[0] if err.args else None
    return isinstance(cause, ReadTimeoutError) or isinstance(
        err.__context__, ReadTimeoutError
    )


class HttpProvider:
    """Provider backed by HTTP GET/POST.

    Args:
        codec: Format used for response bodies and request payloads.
        client: Client settings. Defaults to ClientConfig() (30 s timeout).
    """

    def __init__(self, codec: Codec, client: ClientConfig | None = None) -> None:
        self._codec = codec
        self._client = client if client is not None else ClientConfig()

    def __repr__(self) -> str:
        return f"HttpProvider({self._codec!r}, timeout={self._client.timeout!r})"

    @property
    def codec(self) -> Codec:
        return self._codec

    @property
    def client(self) -> ClientConfig:
        return self._client

    def is_valid(self, path: str) -> bool:
        return is_remote_url(path)

    def _send(self, method: str, url: str, data: bytes | None = None) -> tuple[int, bytes, str]:
        """Send one request and return (status_code, body_bytes, body_text)."""
        logger = get_global_logger()
        logger.verbose("HTTP", f"{method} {url}")
        if self._client.verify is False and url.lower().startswith("https:"):
            logger.warning("HTTP", f"TLS certificate verification is disabled for {url}")
        try:
            with self._client.open_session() as session:
                with session.request(
                    method,
                    url,
                    data=data,
                    timeout=self._client.timeout,
                    verify=self._client.verify,
                    headers=dict(self._client.headers),
                ) as resp:
                    content = resp.content
                    text = resp.text
                    status = resp.status_code
        except requests.exceptions.Timeout as err:
            raise RequestTimeoutError(
                f"{method} {url} timed out after {self._client.timeout}s: {err}", url
            ) from err
        except requests.exceptions.ConnectionError as err:
            if _is_body_timeout(err):
                raise RequestTimeoutError(
                    f"{method} {url} timed out after {self._client.timeout}s: {err}",
                    url,
                ) from err
            raise TransportError(f"{method} {url} failed: {err}", url) from err
        except requests.exceptions.RequestException as err:
            raise TransportError(f"{method} {url} failed: {err}", url) from err

        logger.verbose("HTTP", f"Response: {status} ({len(content)} byte(s))")
        return status, content, text

    def load(self, path: str, target_type: Any = None) -> Any:
        """GET path and decode the response body.

        Raises:
            RequestTimeoutError: If the client timeout expires.
            TransportError: If the request cannot be sent or the body read.
            StatusError: If the status is outside [200, 300).
            CodecError: If the body cannot be decoded.
        """
        status, content, text = self._send("GET", path)
        if not _is_success(status):
            raise StatusError(status, text, path)
        return self._codec.unmarshal(content, target_type)

    def save(self, path: str, value: Any) -> None:
        """Encode value and POST it to path.

        Raises:
            CodecError: If value cannot be encoded (nothing is sent).
            RequestTimeoutError: If the client timeout expires.
            TransportError: If the request cannot be sent or the body read.
            StatusError: If the status is outside [200, 300).
        """
        data = self._codec.marshal(value)
        get_global_logger().debug("HTTP", f"POST payload is {len(data)} byte(s)")
        status, _, text = self._send("POST", path, data)
        if not _is_success(status):
            raise StatusError(status, text, path)
