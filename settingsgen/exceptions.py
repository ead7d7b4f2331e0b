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

"""Exception hierarchy for settingsgen.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- DocumentIOError: A settings document could not be opened or read
- MalformedDocumentError: Structurally invalid input (unexpected element,
    missing attribute, bad XML, import cycle)
- DuplicateEntryError: Two entries were defined at the same key path
- OutputWriteError: The resolved tree could not be written
- SubPathNotFoundError: An import's rootNode selector did not resolve
- ConfigError: Generator configuration problems (settingsgen.yaml)

All exceptions inherit from SettingsGenError, allowing users to catch all
settingsgen errors with a single except clause if needed.

Example:
    Catching specific error types:
        ```python
        from pathlib import Path
        from settingsgen.core import build_settings
        from settingsgen.exceptions import DuplicateEntryError, DocumentIOError

        try:
            document = build_settings(Path("settings.xml"))
        except DuplicateEntryError as e:
            print(f"Conflict at {e.key_path}")
        except DocumentIOError as e:
            print(f"Cannot read {e.path}")
        ```

Note:
    SubPathNotFoundError never escapes a build. The import resolver catches
    it and treats the import as an empty contribution.
"""

from __future__ import annotations

__all__ = [
    "SettingsGenError",
    "DocumentIOError",
    "MalformedDocumentError",
    "ImportCycleError",
    "DuplicateEntryError",
    "OutputWriteError",
    "SubPathNotFoundError",
    "ConfigError",
]


class SettingsGenError(Exception):
    """Base exception for all settingsgen errors.

    All settingsgen-specific exceptions inherit from this class, allowing
    users to catch all of them with a single except clause if needed.
    """

    pass


class DocumentIOError(SettingsGenError):
    """Raised when a settings document cannot be opened or read.

    Fatal for the top-level document and for required imports. An import
    marked required="false" degrades this to a logged skip.

    Attributes:
        path: The path that could not be read.
        location: "file:line:column" of the <Import> that referenced the
            path, or None for the top-level document.
    """

    def __init__(
        self, path: object, message: str | None = None, location: str | None = None
    ) -> None:
        self.path = path
        self.location = location
        message = message or f"cannot open document: {path}"
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class OutputWriteError(SettingsGenError):
    """Raised when a resolved tree cannot be written to its output file.

    Attributes:
        path: The output path.
    """

    def __init__(self, path: object, message: str) -> None:
        self.path = path
        super().__init__(f"cannot write output: {path}: {message}")


class MalformedDocumentError(SettingsGenError):
    """Raised for structurally invalid input.

    This exception is raised when there are problems with:

    - XML syntax (not well formed)
    - Unexpected elements for the current grammar level
    - Missing required attributes or unparseable attribute values
    - Unknown document root element

    Attributes:
        location: Human readable "file:line:column" of the offending
            element, or None when no location is known.
    """

    def __init__(self, message: str, location: str | None = None) -> None:
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class ImportCycleError(MalformedDocumentError):
    """Raised when a document imports itself directly or indirectly.

    Attributes:
        chain: The import chain, ending with the path that closed the cycle.
    """

    def __init__(self, chain: list[str], location: str | None = None) -> None:
        self.chain = chain
        super().__init__("import cycle detected: " + " -> ".join(chain), location)


class DuplicateEntryError(SettingsGenError):
    """Raised when an entry is defined twice at the same key path.

    Attributes:
        key_path: The full key path of the conflicting entry.
    """

    def __init__(self, key_path: str, location: str | None = None) -> None:
        self.key_path = key_path
        self.location = location
        message = f"found duplicated entry with key: {key_path}"
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class SubPathNotFoundError(SettingsGenError):
    """Raised when an import's rootNode selector does not resolve.

    Attributes:
        root_node: The full selector as written in the document.
        segment: The first segment that did not resolve to a node.
    """

    def __init__(self, root_node: str, segment: str) -> None:
        self.root_node = root_node
        self.segment = segment
        super().__init__(f"rootNode '{root_node}' not found (missing '{segment}')")


class ConfigError(SettingsGenError):
    """Raised for generator configuration errors.

    This exception is raised when there are problems with:

    - YAML parse errors in settingsgen.yaml
    - A configuration file whose top level is not a mapping
    - An explicit --config path that does not exist
    """

    pass
