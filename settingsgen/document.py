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

"""Document-level types for settingsgen.

A SettingsDocument is what one build produces: the merged settings tree
plus the metadata read from the root element. It is handed to the
emission layer as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from settingsgen.tree import ContentGroup

__all__ = [
    "BackendParam",
    "Backend",
    "Include",
    "ImportDescriptor",
    "SettingsDocument",
]


@dataclass(frozen=True)
class BackendParam:
    """One constructor parameter of the settings backend."""

    type: str
    value: str
    as_str: bool = False


@dataclass
class Backend:
    """Settings accessor class and its ordered constructor parameters."""

    class_name: str
    params: list[BackendParam] = field(default_factory=list)


@dataclass(frozen=True)
class Include:
    """A third-party include to emit (not a document import)."""

    path: str
    local: bool = False


@dataclass(frozen=True)
class ImportDescriptor:
    """A cross-document import directive.

    Attributes:
        path: Source path as written; relative paths are resolved against
            the including document's directory.
        required: If False, an unreadable source is skipped with a warning.
        root_node: Optional '/'-separated container path selecting a
            subtree of the imported document.
    """

    path: str
    required: bool = True
    root_node: str | None = None


@dataclass
class SettingsDocument:
    """A fully read settings document.

    Attributes:
        name: Settings class name; filled from the output name if absent.
        prefix: Optional class-name prefix (e.g. an export macro).
        backend: Optional settings backend descriptor.
        type_mappings: Alias to concrete type name, in declaration order.
        includes: Third-party includes, in declaration order.
        root: The merged settings tree.
        source: Path the document was read from, if any.
    """

    name: str | None = None
    prefix: str | None = None
    backend: Backend | None = None
    type_mappings: dict[str, str] = field(default_factory=dict)
    includes: list[Include] = field(default_factory=list)
    root: ContentGroup = field(default_factory=ContentGroup)
    source: Path | None = None

    def resolve_type(self, alias: str) -> str:
        """Return the concrete type for alias, or alias if it is not mapped."""
        return self.type_mappings.get(alias, alias)
