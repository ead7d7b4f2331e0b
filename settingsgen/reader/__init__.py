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

"""Settings document readers.

Two XML grammars are recognized, selected by the root element name:

- <Settings>: the generic tree grammar (Node / Entry / Import)
- <SettingsConfig>: the settings dialog grammar (Category / Section /
  Group / Entry), normalized into the same tree

Both produce a SettingsDocument whose tree was built by the same merge
engine (settingsgen.tree).

Example:
    Read a document without building defaults around it:
        ```python
        from pathlib import Path
        from settingsgen.reader import read_source

        document = read_source(Path("settings.xml"))
        print(len(document.root))
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import IO

from settingsgen.document import SettingsDocument
from settingsgen.exceptions import MalformedDocumentError
from settingsgen.imports import ImportContext
from settingsgen.reader.config import CONFIG_ROOT, read_settings_config
from settingsgen.reader.settings import SETTINGS_ROOT, read_settings
from settingsgen.reader.xml_source import XmlElement, open_document, parse_document

__all__ = ["read_source", "CONFIG_ROOT", "SETTINGS_ROOT"]


def _read_root(
    element: XmlElement, path: Path | None, context: ImportContext
) -> SettingsDocument:
    if element.name == SETTINGS_ROOT:
        return read_settings(element, path, context)
    if element.name == CONFIG_ROOT:
        return read_settings_config(element, path, context)
    raise MalformedDocumentError(
        f"unknown document root <{element.name}>, "
        f"expected <{SETTINGS_ROOT}> or <{CONFIG_ROOT}>",
        element.location,
    )


def read_source(
    source: Path | IO[bytes],
    context: ImportContext | None = None,
    *,
    location: str | None = None,
) -> SettingsDocument:
    """Read a settings document from a path or a binary stream.

    Imports are resolved recursively through the same pipeline.

    Args:
        source: Document path, or an open binary stream.
        context: Import state of the running build; a fresh one is created
            when omitted.
        location: Location of the directive that caused this read, used
            when reporting an import cycle.

    Returns:
        The document with its merged tree.

    Raises:
        DocumentIOError: The document cannot be opened.
        MalformedDocumentError: The document is invalid or closes an
            import cycle.
        DuplicateEntryError: Two entries collide at the same key path.
    """
    if context is None:
        context = ImportContext()

    if isinstance(source, Path):
        with context.entering(source, location):
            element = open_document(source)
            context.documents_read += 1
            context.logger.verbose("READ", f"Read <{element.name}> from {source}")
            return _read_root(element, source, context)

    element = parse_document(source)
    context.documents_read += 1
    return _read_root(element, None, context)
