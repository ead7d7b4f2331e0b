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

"""Public API return types for settingsgen.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Domain types (like
    SettingsDocument or the tree nodes) remain co-located with their
    related logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a settings document.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages (skipped optional imports).
        node_count: Number of container nodes in the merged tree.
        entry_count: Number of entries in the merged tree.
        document_path: String path to the validated document.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    node_count: int
    entry_count: int
    document_path: str


@dataclass(frozen=True)
class ResolveResult:
    """Result from resolving a document into its YAML tree dump.

    Attributes:
        name: Settings name after defaults were applied.
        text: The YAML dump of the resolved document.
        output_path: Where the dump was written, or None for stdout.
        node_count: Number of container nodes in the merged tree.
        entry_count: Number of entries in the merged tree.
    """

    name: str | None
    text: str
    output_path: Path | None
    node_count: int
    entry_count: int
