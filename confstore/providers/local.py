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

"""Local filesystem provider for confstore.

Reads and writes whole files. Paths may be plain (absolute or relative to
the working directory) or file:// URIs.

Save Behavior:
    1. Encode the value first, so a codec failure never touches the disk
    2. Create missing parent directories (recursively)
    3. Create or truncate the target and write the full payload

The output file is closed on every exit path, including a failed write.

Example:
    ```python
    from confstore.codecs import JsonCodec
    from confstore.providers import LocalProvider

    provider = LocalProvider(JsonCodec(indent=2))
    provider.save("out/settings.json", {"debug": True})
    print(provider.load("file:///etc/app/settings.json"))
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from confstore.codecs import Codec
from confstore.exceptions import StorageError
from confstore.logging import get_global_logger
from confstore.paths import is_local_path, resolve_file_uri


class LocalProvider:
    """Provider backed by the local filesystem.

    Args:
        codec: Format used to decode loaded files and encode saved values.
    """

    def __init__(self, codec: Codec) -> None:
        self._codec = codec

    def __repr__(self) -> str:
        return f"LocalProvider({self._codec!r})"

    @property
    def codec(self) -> Codec:
        return self._codec

    def is_valid(self, path: str) -> bool:
        return is_local_path(path)

    def load(self, path: str, target_type: Any = None) -> Any:
        """Read the file at path and decode it.

        Raises:
            StorageError: If the file is missing or unreadable.
            CodecError: If the contents cannot be decoded.
        """
        logger = get_global_logger()
        fs_path = Path(resolve_file_uri(path))

        logger.verbose("LOCAL", f"Reading: {fs_path}")
        try:
            data = fs_path.read_bytes()
        except OSError as err:
            raise StorageError(f"cannot read {fs_path}: {err}", str(fs_path)) from err

        logger.debug("LOCAL", f"Read {len(data)} byte(s) from {fs_path}")
        return self._codec.unmarshal(data, target_type)

    def save(self, path: str, value: Any) -> None:
        """Encode value and write it to path, creating parent directories.

        Raises:
            CodecError: If value cannot be encoded (nothing is written).
            StorageError: If a directory or the file cannot be created or written.
        """
        logger = get_global_logger()
        fs_path = Path(resolve_file_uri(path))

        data = self._codec.marshal(value)

        parent = fs_path.parent
        if not parent.exists():
            logger.verbose("LOCAL", f"Creating directory: {parent}")
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                raise StorageError(
                    f"cannot create directory {parent}: {err}", str(fs_path)
                ) from err

        logger.verbose("LOCAL", f"Writing: {fs_path}")
        try:
            with fs_path.open("wb") as f:
                f.write(data)
        except OSError as err:
            raise StorageError(f"cannot write {fs_path}: {err}", str(fs_path)) from err

        logger.debug("LOCAL", f"Wrote {len(data)} byte(s) to {fs_path}")
