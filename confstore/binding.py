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

"""Conversion between typed values and plain decoded data.

Codecs only understand plain data (dicts, lists, strings, numbers, booleans
and None). This module bridges that to the types applications actually use,
most commonly dataclasses:

- to_builtin: dataclass instances (recursively) -> dicts
- from_builtin: decoded data -> an instance of the requested type

Binding rules:

- No target type (None, Any or object): data is returned unchanged
- Dataclass: a mapping is required; keys are matched to field names,
    unknown keys are ignored, missing fields without defaults are errors
- list[X], tuple[X, ...], dict[str, X], X | None and Union[...] are bound
    recursively
- str, int, float and bool are type-checked strictly; an int is accepted
    where a float is expected, a bool is never accepted as an int

Example:
    ```python
    from dataclasses import dataclass
    from confstore.binding import from_builtin

    @dataclass
    class Server:
        host: str
        port: int = 8080

    server = from_builtin({"host": "localhost"}, Server)
    print(server.port)  # 8080
    ```
"""

from __future__ import annotations

import dataclasses
import types
from typing import Any, Union, get_args, get_origin, get_type_hints

from confstore.exceptions import CodecError

_PRIMITIVES = (str, int, float, bool)


def to_builtin(value: Any) -> Any:
    """Convert dataclass instances inside value to plain dicts.

    Lists, tuples and dicts are walked so nested dataclasses are converted
    too. Everything else is returned as-is.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_builtin(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {k: to_builtin(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_builtin(v) for v in value]
    return value


def _describe(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


def _bind_dataclass(data: Any, target: type, where: str) -> Any:
    if not isinstance(data, dict):
        raise CodecError(
            f"{where}: expected a mapping for {target.__name__}, "
            f"got {type(data).__name__}"
        )
    try:
        hints = get_type_hints(target)
    except Exception as err:
        raise CodecError(
            f"{where}: cannot resolve annotations of {target.__name__}: {err}"
        ) from err

    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(target):
        if not field.init:
            continue
        if field.name in data:
            kwargs[field.name] = _bind(
                data[field.name], hints.get(field.name, Any), f"{where}.{field.name}"
            )
        elif (
            field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING
        ):
            raise CodecError(f"{where}: missing required field {field.name!r}")
    try:
        return target(**kwargs)
    except (TypeError, ValueError) as err:
        raise CodecError(f"{where}: cannot build {target.__name__}: {err}") from err


def _bind(data: Any, target: Any, where: str) -> Any:
    if target is None or target is Any or target is object:
        return data
    if target is type(None):
        if data is not None:
            raise CodecError(f"{where}: expected null, got {type(data).__name__}")
        return None

    origin = get_origin(target)

    if origin is Union or (
        hasattr(types, "UnionType") and isinstance(target, types.UnionType)
    ):
        errors = []
        for option in get_args(target):
            try:
                return _bind(data, option, where)
            except CodecError as err:
                errors.append(str(err))
        raise CodecError(
            f"{where}: value does not match {target!r} ({'; '.join(errors)})"
        )

    if origin in (list, tuple, dict):
        args = get_args(target)
        if origin is dict:
            if not isinstance(data, dict):
                raise CodecError(
                    f"{where}: expected a mapping, got {type(data).__name__}"
                )
            value_type = args[1] if len(args) == 2 else Any
            return {k: _bind(v, value_type, f"{where}[{k!r}]") for k, v in data.items()}
        if not isinstance(data, (list, tuple)):
            raise CodecError(f"{where}: expected a list, got {type(data).__name__}")
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(
                    _bind(v, args[0], f"{where}[{i}]") for i, v in enumerate(data)
                )
            if args:
                if len(args) != len(data):
                    raise CodecError(
                        f"{where}: expected {len(args)} items, got {len(data)}"
                    )
                return tuple(
                    _bind(v, t, f"{where}[{i}]")
                    for i, (v, t) in enumerate(zip(data, args))
                )
            return tuple(data)
        item_type = args[0] if args else Any
        return [_bind(v, item_type, f"{where}[{i}]") for i, v in enumerate(data)]

    if isinstance(target, type) and dataclasses.is_dataclass(target):
        return _bind_dataclass(data, target, where)

    if target in (list, dict, tuple):
        if not isinstance(data, (list, tuple) if target is not dict else dict):
            raise CodecError(
                f"{where}: expected {target.__name__}, got {type(data).__name__}"
            )
        return target(data)

    if target in _PRIMITIVES:
        if target is float and isinstance(data, int) and not isinstance(data, bool):
            return float(data)
        if target is int and isinstance(data, bool):
            raise CodecError(f"{where}: expected int, got bool")
        if not isinstance(data, target):
            raise CodecError(
                f"{where}: expected {target.__name__}, got {type(data).__name__}"
            )
        return data

    if isinstance(target, type):
        if isinstance(data, target):
            return data
        raise CodecError(
            f"{where}: expected {_describe(target)}, got {type(data).__name__}"
        )

    # Unsupported typing constructs are passed through untouched.
    return data


def from_builtin(data: Any, target_type: Any = None) -> Any:
    """Bind decoded data to target_type.

    Args:
        data: Plain decoded data (output of json.loads / yaml.safe_load).
        target_type: The type to build. None returns data unchanged.

    Returns:
        An instance of target_type built from data.

    Raises:
        CodecError: If data does not fit target_type.
    """
    return _bind(data, target_type, "$")
