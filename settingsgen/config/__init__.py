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

"""Generator configuration loading for settingsgen.

This module provides tools for loading and merging YAML-based generator
configuration with a layered approach:

  - Built-in defaults
  - Project configuration (settingsgen.yaml, found upward from the document)
  - An explicit configuration file (--config)

The loader performs deep merging where dicts are merged recursively and
lists/scalars are replaced (last wins).

Public API:

- load_generator_config: Load and merge the generator configuration

"""

from .loader import load_generator_config

__all__ = ["load_generator_config"]
