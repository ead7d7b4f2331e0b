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

"""Reader and normalizer for the <SettingsConfig> grammar.

The config grammar describes settings the way a settings dialog lays them
out, with explicitly typed levels:

    SettingsConfig > Category > Section > Group > Entry

Levels may be skipped (an Entry can sit directly in a Category), but never
inverted: a Section cannot hold a Category, a Group can only hold Entries.

Reading happens in two passes. parse_settings_config() turns the elements
into a closed union of frozen dataclasses, rejecting anything that does not
belong at its level. normalize_config() then walks that structure and feeds
every entry to merge_entry(), so both grammars share one merge engine.

Key Paths:
    Category, Section and Group may carry an optional 'key'. Keyed levels
    prefix the key paths of the entries below them; unkeyed levels (the
    usual case, they only carry display attributes such as 'title') add
    nothing. An Entry's own key may itself contain '/'.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import assert_never

from settingsgen.document import ImportDescriptor, SettingsDocument
from settingsgen.imports import ImportContext, resolve_import
from settingsgen.reader.settings import read_default, read_import_descriptor
from settingsgen.reader.xml_source import XmlElement, parse_bool, require_attr
from settingsgen.tree import ContentGroup, EntryDescriptor, merge_entry, split_key_path

__all__ = [
    "CONFIG_ROOT",
    "ConfigEntry",
    "ConfigGroup",
    "ConfigSection",
    "ConfigCategory",
    "ConfigImport",
    "ConfigElement",
    "SettingsConfig",
    "parse_settings_config",
    "normalize_config",
    "read_settings_config",
]

CONFIG_ROOT = "SettingsConfig"

# Child elements of an Entry that only matter to a settings dialog
_ENTRY_METADATA = {"Default", "Property", "SearchKey"}


# -------------------------------
# Config model
# -------------------------------


@dataclass(frozen=True)
class ConfigEntry:
    key: str
    type: str
    default: str | None = None
    tr: bool | None = None
    location: str | None = None


@dataclass(frozen=True)
class ConfigGroup:
    key: str | None
    content: tuple[ConfigEntry, ...] = ()
    location: str | None = None


@dataclass(frozen=True)
class ConfigSection:
    key: str | None
    content: tuple[ConfigGroup | ConfigEntry, ...] = ()
    location: str | None = None


@dataclass(frozen=True)
class ConfigCategory:
    key: str | None
    content: tuple[ConfigSection | ConfigGroup | ConfigEntry, ...] = ()
    location: str | None = None


@dataclass(frozen=True)
class ConfigImport:
    descriptor: ImportDescriptor
    location: str | None = None


ConfigElement = ConfigCategory | ConfigSection | ConfigGroup | ConfigEntry


@dataclass(frozen=True)
class SettingsConfig:
    content: tuple[ConfigElement | ConfigImport, ...] = ()


# -------------------------------
# Parsing
# -------------------------------


def parse_settings_config(element: XmlElement) -> SettingsConfig:
    """Parse a <SettingsConfig> root element into the config model.

    Raises:
        MalformedDocumentError: An element appears at a level that does not
            allow it, or a required attribute is missing.
    """
    content: list[ConfigElement | ConfigImport] = []
    for child in element.children:
        if child.name == "Import":
            content.append(ConfigImport(read_import_descriptor(child), child.location))
        elif child.name == "Category":
            content.append(_parse_category(child))
        elif child.name == "Section":
            content.append(_parse_section(child))
        elif child.name == "Group":
            content.append(_parse_group(child))
        elif child.name == "Entry":
            content.append(_parse_entry(child))
        else:
            raise child.unexpected(f"<{CONFIG_ROOT}>")
    return SettingsConfig(tuple(content))


def _parse_category(element: XmlElement) -> ConfigCategory:
    content: list[ConfigSection | ConfigGroup | ConfigEntry] = []
    for child in element.children:
        if child.name == "Section":
            content.append(_parse_section(child))
        elif child.name == "Group":
            content.append(_parse_group(child))
        elif child.name == "Entry":
            content.append(_parse_entry(child))
        else:
            raise child.unexpected("<Category>")
    return ConfigCategory(element.attrs.get("key"), tuple(content), element.location)


def _parse_section(element: XmlElement) -> ConfigSection:
    content: list[ConfigGroup | ConfigEntry] = []
    for child in element.children:
        if child.name == "Group":
            content.append(_parse_group(child))
        elif child.name == "Entry":
            content.append(_parse_entry(child))
        else:
            raise child.unexpected("<Section>")
    return ConfigSection(element.attrs.get("key"), tuple(content), element.location)


def _parse_group(element: XmlElement) -> ConfigGroup:
    content: list[ConfigEntry] = []
    for child in element.children:
        if child.name != "Entry":
            raise child.unexpected("<Group>")
        content.append(_parse_entry(child))
    return ConfigGroup(element.attrs.get("key"), tuple(content), element.location)


def _parse_entry(element: XmlElement) -> ConfigEntry:
    for child in element.children:
        if child.name not in _ENTRY_METADATA:
            raise child.unexpected("<Entry>")
    return ConfigEntry(
        key=require_attr(element, "key"),
        type=require_attr(element, "type"),
        default=read_default(element),
        tr=parse_bool(element, "trdefault", None),
        location=element.location,
    )


# -------------------------------
# Normalization
# -------------------------------


def _scoped(prefix: Sequence[str], key: str | None) -> list[str]:
    if not key:
        return list(prefix)
    return [*prefix, *split_key_path(key)]


def _normalize(element: ConfigElement, target: ContentGroup, prefix: list[str]) -> None:
    if isinstance(element, ConfigCategory):
        for child in element.content:
            _normalize(child, target, _scoped(prefix, element.key))
    elif isinstance(element, ConfigSection):
        for child in element.content:
            _normalize(child, target, _scoped(prefix, element.key))
    elif isinstance(element, ConfigGroup):
        for child in element.content:
            _normalize(child, target, _scoped(prefix, element.key))
    elif isinstance(element, ConfigEntry):
        merge_entry(
            target,
            "/".join(_scoped(prefix, element.key)),
            EntryDescriptor(type=element.type, default=element.default, tr=element.tr),
            location=element.location,
        )
    else:
        assert_never(element)


def normalize_config(
    config: SettingsConfig,
    target: ContentGroup,
    including: Path | None,
    context: ImportContext,
) -> None:
    """Merge every entry of a config document into target.

    Root-level imports are resolved and spliced into target as anonymous
    groups, in document order.
    """
    for element in config.content:
        if isinstance(element, ConfigImport):
            target.append(
                resolve_import(
                    including, element.descriptor, context, location=element.location
                )
            )
        else:
            _normalize(element, target, [])


def read_settings_config(
    element: XmlElement, path: Path | None, context: ImportContext
) -> SettingsDocument:
    """Read a <SettingsConfig> root element into a SettingsDocument.

    The config grammar carries no document metadata; only the tree is
    filled in.
    """
    document = SettingsDocument(source=path)
    normalize_config(parse_settings_config(element), document.root, path, context)
    context.logger.debug(
        "READ", f"Normalized {CONFIG_ROOT} into {len(document.root)} top-level node(s)"
    )
    return document
