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

"""Plain-data and YAML views of a resolved settings tree.

Anonymous groups are flattened into their parents here, exactly as an
emission layer sees them: a key spliced in by an import is listed like any
other key of the group.
"""

from __future__ import annotations

import os
from pathlib import Path
import tempfile
from typing import Any, assert_never

import yaml

from settingsgen.document import SettingsDocument
from settingsgen.exceptions import OutputWriteError
from settingsgen.tree import ContainerNode, ContentGroup, EntryNode, iter_keyed_nodes

__all__ = [
    "tree_to_data",
    "document_to_data",
    "dump_yaml",
    "write_atomic",
    "key_paths",
    "count_nodes",
]


def tree_to_data(group: ContentGroup) -> list[dict[str, Any]]:
    """Convert a tree into nested lists/dicts, one dict per keyed node."""
    data: list[dict[str, Any]] = []
    for node in iter_keyed_nodes(group):
        if isinstance(node, ContainerNode):
            item: dict[str, Any] = {"node": node.key}
        elif isinstance(node, EntryNode):
            item = {"entry": node.key, "type": node.type}
            if node.default is not None:
                item["default"] = node.default
            if node.tr is not None:
                item["tr"] = node.tr
        else:
            assert_never(node)
        children = tree_to_data(node.content)
        if children:
            item["children"] = children
        data.append(item)
    return data


def document_to_data(document: SettingsDocument) -> dict[str, Any]:
    """Convert a document, metadata included, into plain data."""
    data: dict[str, Any] = {"name": document.name}
    if document.prefix:
        data["prefix"] = document.prefix
    if document.backend is not None:
        data["backend"] = {
            "class": document.backend.class_name,
            "params": [
                {"type": p.type, "value": p.value, "as_str": p.as_str}
                for p in document.backend.params
            ],
        }
    if document.type_mappings:
        data["type_mappings"] = dict(document.type_mappings)
    if document.includes:
        data["includes"] = [
            {"path": inc.path, "local": inc.local} for inc in document.includes
        ]
    data["settings"] = tree_to_data(document.root)
    return data


def dump_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def write_atomic(path: Path, text: str) -> None:
    """Write text to path via a temporary file in the same directory.

    The target only appears once the write has fully succeeded.

    Raises:
        OutputWriteError: The directory or the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as err:
        raise OutputWriteError(path, err.strerror or str(err)) from err
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except OSError as err:
        Path(tmp_name).unlink(missing_ok=True)
        raise OutputWriteError(path, err.strerror or str(err)) from err
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def key_paths(group: ContentGroup, prefix: str = "") -> list[str]:
    """List every keyed node as a '/'-joined path, in emission order."""
    paths: list[str] = []
    for node in iter_keyed_nodes(group):
        path = f"{prefix}{node.key}"
        paths.append(path)
        paths.extend(key_paths(node.content, f"{path}/"))
    return paths


def count_nodes(group: ContentGroup) -> tuple[int, int]:
    """Return (containers, entries) in the whole tree."""
    containers = entries = 0
    for node in iter_keyed_nodes(group):
        if isinstance(node, ContainerNode):
            containers += 1
        elif isinstance(node, EntryNode):
            entries += 1
        else:
            assert_never(node)
        sub_containers, sub_entries = count_nodes(node.content)
        containers += sub_containers
        entries += sub_entries
    return containers, entries
