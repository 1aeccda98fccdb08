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

"""Path classification for confstore.

Pure predicates deciding whether a path string names a local file or a
remote HTTP(S) resource. They look at the text only: no filesystem access,
no DNS, no caching. Providers use them to claim paths.

Classification Rules:
    is_remote_url:
        Scheme is http or https (any case) AND a host is present.
        "http://" on its own is not remote.

    is_local_path:
        - "" is not local
        - absolute paths are local
        - a parsed scheme makes it local only if that scheme is "file"
        - anything else (relative paths) is local

Known Limitation:
    Strings without a parseable scheme fall through to "local". That
    includes UNC paths such as ``\\\\server\\share\\app.json``, which actually
    address a network share. The local provider hands them to the operating
    system as-is.

Example:
    ```python
    from confstore.paths import is_local_path, is_remote_url

    is_remote_url("HTTPS://config.example.com/app.json")  # True
    is_local_path("file:///etc/app.json")                 # True
    is_local_path("s3://bucket/app.json")                 # False
    ```
"""

from __future__ import annotations

import os
from urllib.parse import urlsplit
from urllib.request import url2pathname

_REMOTE_SCHEMES = frozenset({"http", "https"})


def is_remote_url(path: str) -> bool:
    """Return True if path is an http(s) URL with a host."""
    try:
        parts = urlsplit(path)
    except ValueError:
        return False
    # Host only, without any user:password@ prefix
    host = parts.netloc.rpartition("@")[2]
    return parts.scheme.lower() in _REMOTE_SCHEMES and host != ""


def is_local_path(path: str) -> bool:
    """Return True if path should be handled by the local filesystem."""
    if path == "":
        return False
    if os.path.isabs(path):
        return True
    try:
        scheme = urlsplit(path).scheme
    except ValueError:
        return True
    if scheme:
        return scheme == "file"
    return True


def resolve_file_uri(path: str) -> str:
    """Turn a file:// URI into a filesystem path.

    Non-URI paths are returned unchanged. Only the URI path is used, percent-
    decoded; the host is ignored, so ``file://server/share/app.json``
    resolves to ``/share/app.json``.

    Args:
        path: A path string, possibly a file:// URI.

    Returns:
        The filesystem path to open.
    """
    if os.path.isabs(path):
        return path
    try:
        parts = urlsplit(path)
    except ValueError:
        return path
    if parts.scheme != "file":
        return path

    return url2pathname(parts.path)
