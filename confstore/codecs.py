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

"""Serialization formats for confstore.

A codec converts between a typed in-memory value and bytes in one format.
Codecs are stateless and immutable, so one instance can be shared by any
number of providers and threads.

Available Codecs:
    json : JsonCodec
        Compact output by default; pass indent=2 for pretty printing.
    yaml : YamlCodec
        PyYAML safe_load/safe_dump.

CodecGroup chains codecs in priority order. Marshal and unmarshal return the
first member that succeeds, which lets a single loader accept several formats.
An earlier, more permissive codec can win on data that was meant for a later
one, so put the strictest codec first. JSON is a subset of YAML, which makes
CodecGroup(JsonCodec(), YamlCodec()) the usual ordering.

Codecs self-register by name so settings files and the CLI can select a
format with a string (see register_codec() and get_codec()).

Example:
    Decode either JSON or YAML into a dataclass:
        ```python
        from dataclasses import dataclass
        from confstore.codecs import CodecGroup, JsonCodec, YamlCodec

        @dataclass
        class App:
            name: str

        group = CodecGroup(JsonCodec(), YamlCodec())
        app = group.unmarshal(b"name: demo\\n", App)
        print(app.name)  # demo
        ```

"""

from __future__ import annotations

from collections.abc import Callable
import json
from typing import Any, Protocol

import yaml

from confstore.binding import from_builtin, to_builtin
from confstore.exceptions import CodecError, ConfigError
from confstore.logging import get_global_logger

# -------------------------------
# Codec Protocol
# -------------------------------


class Codec(Protocol):
    """Protocol for serialization formats.

    Implementations raise CodecError for every failure so callers never have
    to know which parser library sits underneath.
    """

    def marshal(self, value: Any) -> bytes:
        """Encode value to bytes.

        Args:
            value: Plain data or dataclass instances.

        Returns:
            The encoded payload.

        Raises:
            CodecError: If value cannot be represented in this format.
        """
        ...

    def unmarshal(self, data: bytes, target_type: Any = None) -> Any:
        """Decode bytes and bind the result to target_type.

        Args:
            data: The encoded payload.
            target_type: Type to build from the decoded data. None returns
                the plain decoded data.

        Returns:
            The decoded value.

        Raises:
            CodecError: If data is malformed or does not fit target_type.
        """
        ...


# -------------------------------
# Concrete codecs
# -------------------------------


class JsonCodec:
    """JSON via the standard library json module.

    Args:
        indent: Indentation for pretty output. None (default) produces the
            compact form, e.g. ``{"name":"bob"}``.
        sort_keys: Sort object keys in the output.
    """

    name = "json"

    def __init__(self, indent: int | None = None, sort_keys: bool = False) -> None:
        self._indent = indent
        self._sort_keys = sort_keys

    def __repr__(self) -> str:
        return f"JsonCodec(indent={self._indent!r}, sort_keys={self._sort_keys!r})"

    def marshal(self, value: Any) -> bytes:
        separators = (",", ":") if self._indent is None else None
        try:
            text = json.dumps(
                to_builtin(value),
                indent=self._indent,
                sort_keys=self._sort_keys,
                separators=separators,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as err:
            raise CodecError(f"json encode failed: {err}") from err
        return text.encode("utf-8")

    def unmarshal(self, data: bytes, target_type: Any = None) -> Any:
        try:
            decoded = json.loads(data.decode("utf-8"))
        except UnicodeDecodeError as err:
            raise CodecError(f"json decode failed: payload is not UTF-8: {err}") from err
        except json.JSONDecodeError as err:
            raise CodecError(f"json decode failed: {err}") from err
        return from_builtin(decoded, target_type)


class YamlCodec:
    """YAML via PyYAML's safe loader and dumper.

    Only standard YAML tags are accepted; documents that need arbitrary
    Python objects are rejected as a CodecError.
    """

    name = "yaml"

    def __repr__(self) -> str:
        return "YamlCodec()"

    def marshal(self, value: Any) -> bytes:
        try:
            text = yaml.safe_dump(
                to_builtin(value),
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        except yaml.YAMLError as err:
            raise CodecError(f"yaml encode failed: {err}") from err
        return text.encode("utf-8")

    def unmarshal(self, data: bytes, target_type: Any = None) -> Any:
        try:
            decoded = yaml.safe_load(data)
        except yaml.YAMLError as err:
            raise CodecError(f"yaml decode failed: {err}") from err
        return from_builtin(decoded, target_type)


# -------------------------------
# Fallback chain
# -------------------------------


class CodecGroup:
    """Ordered fallback chain of codecs.

    Insertion order is priority order. The group fails only when every member
    fails, and the resulting CodecError does not identify which member
    rejected the value: callers pick a set of formats, not a single codec.
    """

    def __init__(self, *codecs: Codec) -> None:
        self._codecs: tuple[Codec, ...] = tuple(codecs)

    def __repr__(self) -> str:
        return f"CodecGroup({', '.join(repr(c) for c in self._codecs)})"

    @property
    def codecs(self) -> tuple[Codec, ...]:
        return self._codecs

    def marshal(self, value: Any) -> bytes:
        logger = get_global_logger()
        for codec in self._codecs:
            try:
                return codec.marshal(value)
            except CodecError as err:
                logger.debug("CODEC", f"{codec!r} could not encode value: {err}")
        raise CodecError("no codec in the group could encode the value")

    def unmarshal(self, data: bytes, target_type: Any = None) -> Any:
        logger = get_global_logger()
        for codec in self._codecs:
            try:
                return codec.unmarshal(data, target_type)
            except CodecError as err:
                logger.debug("CODEC", f"{codec!r} could not decode payload: {err}")
        raise CodecError("no codec in the group could decode the payload")


# -------------------------------
# Codec Registry
# -------------------------------

_CODEC_REGISTRY: dict[str, Callable[[], Codec]] = {}


def register_codec(name: str, factory: Callable[[], Codec]) -> None:
    """Register a codec factory under name.

    Registering the same name twice replaces the previous factory.

    Args:
        name: Lowercase format name used in settings and on the CLI.
        factory: Zero-argument callable returning a codec (a class works).
    """
    _CODEC_REGISTRY[name] = factory


def get_codec(name: str) -> Codec:
    """Build a codec by registered name.

    Args:
        name: Format name, e.g. "json" or "yaml". Case-insensitive.

    Returns:
        A new codec instance.

    Raises:
        ConfigError: If no codec is registered under name.
    """
    key = name.lower()
    if key not in _CODEC_REGISTRY:
        available = ", ".join(sorted(_CODEC_REGISTRY))
        raise ConfigError(f"Unknown codec: {name!r}. Available: {available or '(none)'}")
    return _CODEC_REGISTRY[key]()


def available_codecs() -> list[str]:
    """Return the registered codec names, sorted."""
    return sorted(_CODEC_REGISTRY)


register_codec("json", JsonCodec)
register_codec("yaml", YamlCodec)
