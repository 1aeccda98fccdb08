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

"""Storage providers for confstore.

Available Providers:
    LocalProvider
        Local filesystem paths and file:// URIs.
    HttpProvider
        http:// and https:// URLs (GET to load, POST to save).
    ProviderGroup
        Ordered first-match dispatch over any providers.

Example:
    ```python
    from confstore.codecs import JsonCodec
    from confstore.providers import HttpProvider, LocalProvider, ProviderGroup

    codec = JsonCodec()
    group = ProviderGroup(HttpProvider(codec), LocalProvider(codec))
    cfg = group.load("settings.json")
    ```
"""

from .base import Provider
from .group import ProviderGroup
from .local import LocalProvider
from .remote import HttpProvider

__all__ = ["Provider", "ProviderGroup", "LocalProvider", "HttpProvider"]
