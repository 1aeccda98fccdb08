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

"""High-level entry points for confstore.

This module is the facade most applications use. Each call builds a fresh
default provider group, so there is no shared state between calls and no
process-wide singleton to configure or tear down.

Default Provider Group:
    1. HttpProvider (checked first, so it wins any tie)
    2. LocalProvider

Both are bound to Options.codec, or to a compact JsonCodec when no codec is
given. Options.http_client applies to the HttpProvider only.

Layered Loading:
    load_layered() reads several locations and deep-merges them with
    "last wins" semantics:

    - **Dicts**: Recursively merged (keys from later layers override)
    - **Lists**: Completely replaced (NOT appended/extended)
    - **Scalars**: Overwritten

Example:
    Basic usage:
        ```python
        from dataclasses import dataclass
        from confstore import load, save

        @dataclass
        class Settings:
            name: str
            debug: bool = False

        save("/tmp/x/y/out.json", {"name": "bob"})
        settings = load("/tmp/x/y/out.json", Settings)
        print(settings.name)  # bob
        ```

    Org defaults overridden by a local file:
        ```python
        from confstore import load_layered

        cfg = load_layered([
            "https://config.example.com/org.json",
            "settings.json",
        ])
        ```
"""

from __future__ import annotations

from collections.abc import Iterable
import os
from typing import Any

from confstore.binding import from_builtin
from confstore.codecs import Codec, JsonCodec
from confstore.exceptions import CodecError, ConfigError
from confstore.logging import get_global_logger
from confstore.providers import HttpProvider, LocalProvider, ProviderGroup
from confstore.settings import ClientConfig, Options

PathLike = str | os.PathLike


def new_provider_group(
    codec: Codec, http_client: ClientConfig | None = None
) -> ProviderGroup:
    """Build the standard HTTP-then-local group bound to codec.

    Args:
        codec: Codec for both providers.
        http_client: Client settings for the HTTP provider.

    Returns:
        A new ProviderGroup.
    """
    return ProviderGroup(
        HttpProvider(codec, http_client),
        LocalProvider(codec),
    )


def default_provider(options: Options | None = None) -> ProviderGroup:
    """Build a fresh default provider group.

    Args:
        options: Codec and HTTP client overrides. None uses compact JSON and
            a 30 second HTTP timeout.

    Returns:
        A new ProviderGroup. Nothing is cached between calls.
    """
    options = options or Options()
    codec = options.codec if options.codec is not None else JsonCodec()
    return new_provider_group(codec, options.http_client)


def load(
    path: PathLike, target_type: Any = None, options: Options | None = None
) -> Any:
    """Load and decode the configuration at path.

    Args:
        path: Local path, file:// URI, or http(s) URL.
        target_type: Type to bind the decoded data to (e.g. a dataclass).
            None returns plain decoded data.
        options: Codec and HTTP client overrides.

    Returns:
        The decoded value.

    Raises:
        ClassificationError: If no provider accepts path.
        StorageError: On local read failures.
        TransportError: On HTTP request failures (RequestTimeoutError on timeout).
        StatusError: On non-2xx HTTP responses.
        CodecError: If the payload cannot be decoded or bound.
    """
    return default_provider(options).load(path, target_type)


def save(path: PathLike, value: Any, options: Options | None = None) -> None:
    """Encode value and store it at path.

    Args:
        path: Local path, file:// URI, or http(s) URL.
        value: Plain data or dataclass instances.
        options: Codec and HTTP client overrides.

    Raises:
        ClassificationError: If no provider accepts path.
        CodecError: If value cannot be encoded (nothing is written).
        StorageError: On local write failures.
        TransportError: On HTTP request failures (RequestTimeoutError on timeout).
        StatusError: On non-2xx HTTP responses.
    """
    default_provider(options).save(path, value)


# -------------------------------
# Layered loading
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merges two dicts with "overlay wins" semantics.

    - dict + dict -> deep merge
    - list + list -> overlay REPLACES base (not concatenated)
    - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def load_layered(
    paths: Iterable[PathLike],
    target_type: Any = None,
    options: Options | None = None,
) -> Any:
    """Load several locations and deep-merge them in order.

    Every layer goes through the same provider group, so layers can mix
    local files and URLs. Each layer must decode to a mapping.

    Args:
        paths: Locations in merge order; later layers override earlier ones.
        target_type: Type to bind the merged mapping to.
        options: Codec and HTTP client overrides.

    Returns:
        The merged value bound to target_type.

    Raises:
        ConfigError: If paths is empty.
        CodecError: If a layer is not a mapping or the result cannot be bound.
        ClassificationError, StorageError, TransportError, StatusError:
            From the layer that failed; later layers are not read.
    """
    logger = get_global_logger()
    layers = [os.fspath(p) for p in paths]
    if not layers:
        raise ConfigError("load_layered() needs at least one path")

    group = default_provider(options)
    merged: dict[str, Any] = {}
    for layer in layers:
        logger.verbose("CONFIG", f"Loading layer: {layer}")
        data = group.load(layer)
        if not isinstance(data, dict):
            raise CodecError(
                f"layer {layer!r} must be a mapping, got {type(data).__name__}"
            )
        merged = _deep_merge_dicts(merged, data)

    logger.verbose("CONFIG", f"Deep merged {len(layers)} layer(s)")
    return from_builtin(merged, target_type)
