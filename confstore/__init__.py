"""
confstore - load and save configuration from files or URLs

A small library that reads configuration from a local file, a file:// URI,
or an http(s) URL, decodes it with a pluggable format, and writes values
back the same way.

confstore provides:
  - One load()/save() pair for local paths and HTTP(S) URLs
  - Pluggable formats (JSON, YAML) with fallback chains (CodecGroup)
  - Binding of decoded data to dataclasses and typed containers
  - Layered loading with deep merge (org defaults -> app -> local overrides)
  - Bounded HTTP timeouts and typed errors for every failure mode

Quick Start
-----------
Load a config into a dataclass:

    from dataclasses import dataclass
    from confstore import load

    @dataclass
    class Settings:
        name: str

    settings = load("https://config.example.com/app.json", Settings)

Show a config from the command line:

    $ confstore show settings.yaml --format yaml

Package Structure
-----------------
core : module
    load/save facade, default provider group, layered loading.
codecs : module
    Codec protocol, JSON/YAML codecs, CodecGroup, codec registry.
paths : module
    Pure local/remote path classification.
providers : package
    LocalProvider, HttpProvider and ProviderGroup.
settings : module
    ClientConfig and Options.
binding : module
    Conversion between decoded data and typed values.
cli : module
    Command-line interface with argparse.

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Load and save configuration from local files or HTTP(S) URLs"

# Re-export commonly used functions for convenience
from confstore.codecs import CodecGroup, JsonCodec, YamlCodec, get_codec
from confstore.core import default_provider, load, load_layered, new_provider_group, save
from confstore.exceptions import (
    ClassificationError,
    CodecError,
    ConfigError,
    ConfStoreError,
    RequestTimeoutError,
    StatusError,
    StorageError,
    TransportError,
)
from confstore.providers import HttpProvider, LocalProvider, ProviderGroup
from confstore.settings import ClientConfig, Options

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "load",
    "save",
    "load_layered",
    "default_provider",
    "new_provider_group",
    "ClientConfig",
    "Options",
    "CodecGroup",
    "JsonCodec",
    "YamlCodec",
    "get_codec",
    "HttpProvider",
    "LocalProvider",
    "ProviderGroup",
    "ConfStoreError",
    "ClassificationError",
    "CodecError",
    "StorageError",
    "TransportError",
    "RequestTimeoutError",
    "StatusError",
    "ConfigError",
]
