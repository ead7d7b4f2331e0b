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

"""Reader for the native <Settings> tree grammar.

Grammar:
    <Settings name="..." prefix="...">
        <Include local="true|false">path/to/header.h</Include>
        <Backend class="Some::Accessor">
            <Param type="QString" asStr="true">value</Param>
        </Backend>
        <TypeMapping key="alias" type="Concrete::Type"/>
        <Node key="a">
            <Entry key="b" type="int" default="42" tr="false"/>
            <Import required="false" rootNode="x/y">other.xml</Import>
        </Node>
    </Settings>

Node and Entry elements are fed through the merge engine, so a Node whose
key already exists merges into it and an Entry written over an existing
Node promotes it. Entries may contain Node, Entry and Import children of
their own, plus a single <Default> element used when the default attribute
is absent.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from settingsgen.document import (
    Backend,
    BackendParam,
    ImportDescriptor,
    Include,
    SettingsDocument,
)
from settingsgen.exceptions import MalformedDocumentError
from settingsgen.imports import ImportContext, resolve_import
from settingsgen.reader.xml_source import XmlElement, parse_bool, require_attr
from settingsgen.tree import (
    ContentGroup,
    EntryDescriptor,
    ensure_container_path,
    merge_entry,
    split_key_path,
)

__all__ = [
    "SETTINGS_ROOT",
    "read_settings",
    "read_import_descriptor",
    "read_default",
]

SETTINGS_ROOT = "Settings"


def read_import_descriptor(element: XmlElement) -> ImportDescriptor:
    """Read an <Import> element (shared by both grammars).

    The source path comes from the 'path' attribute or, failing that, the
    element text.
    """
    path = element.attrs.get("path") or element.text
    if not path:
        raise MalformedDocumentError("<Import> has no source path", element.location)
    return ImportDescriptor(
        path=path,
        required=bool(parse_bool(element, "required", True)),
        root_node=element.attrs.get("rootNode") or None,
    )


def read_settings(
    element: XmlElement, path: Path | None, context: ImportContext
) -> SettingsDocument:
    """Read a <Settings> root element into a SettingsDocument.

    Args:
        element: The <Settings> root element.
        path: Where the document was read from, if known.
        context: Build-wide import state.

    Returns:
        The document with its merged tree.
    """
    document = SettingsDocument(
        name=element.attrs.get("name") or None,
        prefix=element.attrs.get("prefix") or None,
        source=path,
    )

    for child in element.children:
        if child.name == "Include":
            document.includes.append(_read_include(child))
        elif child.name == "Backend":
            if document.backend is not None:
                raise MalformedDocumentError(
                    "only one <Backend> element is allowed", child.location
                )
            document.backend = _read_backend(child)
        elif child.name == "TypeMapping":
            key = require_attr(child, "key")
            if key in document.type_mappings:
                raise MalformedDocumentError(
                    f"duplicated type mapping for '{key}'", child.location
                )
            document.type_mappings[key] = require_attr(child, "type")
        else:
            _read_content(child, document.root, (), path, context, "<Settings>")

    return document


def _read_include(element: XmlElement) -> Include:
    if not element.text:
        raise MalformedDocumentError("<Include> has no path", element.location)
    return Include(path=element.text, local=bool(parse_bool(element, "local", False)))


def _read_backend(element: XmlElement) -> Backend:
    backend = Backend(class_name=require_attr(element, "class"))
    for child in element.children:
        if child.name != "Param":
            raise child.unexpected("<Backend>")
        backend.params.append(
            BackendParam(
                type=require_attr(child, "type"),
                value=child.text,
                as_str=bool(parse_bool(child, "asStr", False)),
            )
        )
    return backend


def read_default(element: XmlElement) -> str | None:
    """Return an entry default (shared by both grammars).

    The default attribute wins over a <Default> child. At most one
    <Default> child is allowed.
    """
    if "default" in element.attrs:
        return element.attrs["default"]
    defaults = [child for child in element.children if child.name == "Default"]
    if len(defaults) > 1:
        raise MalformedDocumentError(
            "only one <Default> element is allowed", defaults[1].location
        )
    return defaults[0].text if defaults else None


def _read_content(
    element: XmlElement,
    group: ContentGroup,
    scope: Sequence[str],
    path: Path | None,
    context: ImportContext,
    parent: str,
) -> None:
    """Merge one Node, Entry or Import element into group."""
    if element.name == "Node":
        key = require_attr(element, "key")
        keys = split_key_path(key)
        if not keys:
            raise MalformedDocumentError(f"empty node key: '{key}'", element.location)
        target = ensure_container_path(group, keys)
        context.logger.debug("MERGE", f"Node {'/'.join([*scope, *keys])}")
        for child in element.children:
            _read_content(child, target, [*scope, *keys], path, context, "<Node>")

    elif element.name == "Entry":
        key = require_attr(element, "key")
        entry = merge_entry(
            group,
            key,
            EntryDescriptor(
                type=require_attr(element, "type"),
                default=read_default(element),
                tr=parse_bool(element, "tr", None),
            ),
            scope=scope,
            location=element.location,
        )
        entry_scope = [*scope, *split_key_path(key)]
        context.logger.debug("MERGE", f"Entry {'/'.join(entry_scope)}")
        for child in element.children:
            if child.name == "Default":
                continue
            _read_content(child, entry.content, entry_scope, path, context, "<Entry>")

    elif element.name == "Import":
        descriptor = read_import_descriptor(element)
        group.append(
            resolve_import(path, descriptor, context, location=element.location)
        )

    else:
        raise element.unexpected(parent)
