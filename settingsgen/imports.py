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

"""Cross-document imports.

An <Import> directive pulls another settings document into the current one.
The imported document goes through the full reading pipeline (either
grammar, its own imports included) and its tree, or a selected subtree of
it, is spliced into the including group as an anonymous ContentGroup.

Path Resolution:
    Relative import paths are resolved against the directory of the
    including document. Documents read from a stream have no location, so
    their imports are used as given (relative to the working directory).

Failure Handling:
    - DocumentIOError on a required import propagates and aborts the build
    - DocumentIOError on an optional import is logged as a warning and the
      import contributes an empty group
    - A rootNode selector that does not resolve contributes an empty group,
      regardless of the required flag
    - Malformed documents, duplicate entries and import cycles always
      propagate

Cycle Detection:
    ImportContext tracks the canonical paths of the documents currently
    being read. Reading a path that is already on that chain raises
    ImportCycleError. The same document may still be imported more than
    once from different branches.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from settingsgen.document import ImportDescriptor
from settingsgen.exceptions import (
    DocumentIOError,
    ImportCycleError,
    SubPathNotFoundError,
)
from settingsgen.logging import Logger, get_global_logger
from settingsgen.tree import ContentGroup, find_container, split_key_path

__all__ = [
    "ImportContext",
    "resolve_import",
    "resolve_import_path",
    "select_sub_path",
]


@dataclass
class ImportContext:
    """State shared by all reads of one top-level build.

    Attributes:
        logger: Logger for import progress and skipped imports.
        chain: Canonical paths of the documents currently being read,
            outermost first.
        documents_read: Number of documents opened so far.
        skipped_imports: Optional imports that could not be read.
    """

    logger: Logger = field(default_factory=get_global_logger)
    chain: list[Path] = field(default_factory=list)
    documents_read: int = 0
    skipped_imports: list[str] = field(default_factory=list)

    @contextmanager
    def entering(self, path: Path, location: str | None = None) -> Iterator[Path]:
        """Push path onto the read chain for the duration of the block.

        Raises:
            ImportCycleError: If path is already being read.
        """
        canonical = path.resolve()
        if canonical in self.chain:
            raise ImportCycleError(
                [str(p) for p in self.chain] + [str(canonical)], location
            )
        self.chain.append(canonical)
        try:
            yield canonical
        finally:
            self.chain.pop()


def resolve_import_path(including: Path | None, raw_path: str) -> Path:
    """Resolve an import path against the including document's directory."""
    path = Path(raw_path)
    if not path.is_absolute() and including is not None:
        path = including.parent / path
    return path


def select_sub_path(root: ContentGroup, root_node: str) -> ContentGroup:
    """Descend into root along a '/'-separated container path.

    Only containers are followed; an entry at any segment counts as a miss.

    Raises:
        SubPathNotFoundError: If a segment does not resolve to a container.
    """
    group = root
    for segment in split_key_path(root_node):
        node = find_container(group, segment)
        if node is None:
            raise SubPathNotFoundError(root_node, segment)
        group = node.content
    return group


def resolve_import(
    including: Path | None,
    descriptor: ImportDescriptor,
    context: ImportContext,
    *,
    location: str | None = None,
) -> ContentGroup:
    """Read an imported document and return the group to splice in.

    Args:
        including: Path of the including document, or None for streams.
        descriptor: The import directive.
        context: Build-wide import state.
        location: Source location of the directive, for error messages.

    Returns:
        The imported tree's root group, the selected subtree's group, or an
        empty group for a skipped import.

    Raises:
        DocumentIOError: A required import could not be read. The message
            is prefixed with the location of the <Import> directive.
        MalformedDocumentError: The imported document is invalid, or the
            import closes a cycle.
        DuplicateEntryError: The imported document has conflicting entries.
    """
    from settingsgen.reader import read_source

    logger = context.logger
    path = resolve_import_path(including, descriptor.path)
    logger.verbose("IMPORT", f"Importing {path}")

    try:
        document = read_source(path, context, location=location)
    except DocumentIOError as err:
        if descriptor.required:
            if location is None:
                raise
            raise DocumentIOError(err.path, str(err), location) from err
        logger.warning("IMPORT", f"Skipping optional import: {err}")
        context.skipped_imports.append(str(path))
        return ContentGroup()

    if not descriptor.root_node:
        return document.root

    try:
        group = select_sub_path(document.root, descriptor.root_node)
    except SubPathNotFoundError as err:
        logger.verbose("IMPORT", f"{path}: {err}, nothing imported")
        return ContentGroup()

    logger.debug(
        "IMPORT", f"Selected {descriptor.root_node} ({len(group)} node(s)) from {path}"
    )
    return group
