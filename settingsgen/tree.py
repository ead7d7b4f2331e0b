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

"""Settings tree model, key lookup and the conflict-resolving merge.

A settings tree is an ordered ContentGroup whose children are one of three
node kinds:

- ContainerNode: a keyed namespace that owns a nested ContentGroup
- EntryNode: a keyed value (type, default, tr) that may also own children
- ContentGroup: an unkeyed, anonymous group used to splice in imports

ContentNode is a closed union over those three. Every consumer checks the
kinds in the same order (container, entry, anonymous group) and ends with
assert_never so that a new node kind shows up in the type checker.

Lookup Rules:
    locate() searches a group's direct children first. Only when nothing
    matches does it descend into anonymous child groups, depth-first and in
    child order. Anonymous groups are therefore transparent: a key spliced
    in by an import resolves exactly like a key written in place.

Merge Rules:
    merge_entry() inserts an entry at a '/'-separated key path.

    - Missing intermediate keys are created as containers
    - An intermediate key that is already an entry is descended into, the
      entry hosting the deeper keys in its own child group
    - A terminal key that does not exist is appended as a new entry
    - A terminal key that is a container is promoted: the container is
      replaced in place by an entry that takes over its children
    - A terminal key that is already an entry raises DuplicateEntryError

Example:
    Promotion keeps previously merged children:
        ```python
        from settingsgen.tree import ContentGroup, EntryDescriptor, merge_entry

        root = ContentGroup()
        merge_entry(root, "a/x", EntryDescriptor(type="bool"))
        entry = merge_entry(root, "a", EntryDescriptor(type="int"))
        print(entry.type, [n.key for n in entry.content.content_nodes])
        # int ['x']
        ```

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import assert_never

from settingsgen.exceptions import DuplicateEntryError, MalformedDocumentError

__all__ = [
    "ContentGroup",
    "ContainerNode",
    "EntryNode",
    "ContentNode",
    "EntryDescriptor",
    "Location",
    "split_key_path",
    "locate",
    "find_container",
    "ensure_container_path",
    "merge_entry",
    "iter_keyed_nodes",
    "is_container",
    "is_entry",
    "is_anonymous_group",
]


# -------------------------------
# Node types
# -------------------------------


@dataclass
class ContentGroup:
    """An ordered sequence of content nodes.

    Nested inside another group's content_nodes, a ContentGroup is an
    anonymous group: it has no key and is searched transparently.
    """

    content_nodes: list[ContentNode] = field(default_factory=list)

    def append(self, node: ContentNode) -> ContentNode:
        """Append a node and return it."""
        self.content_nodes.append(node)
        return node

    def __len__(self) -> int:
        return len(self.content_nodes)


@dataclass
class ContainerNode:
    """A keyed namespace node without value semantics."""

    key: str
    content: ContentGroup = field(default_factory=ContentGroup)


@dataclass
class EntryNode:
    """A keyed settings entry.

    Attributes:
        key: The entry key (a single path segment).
        type: Value type name as written in the document (not validated).
        default: Default value literal, or None.
        tr: Translation flag for the default value, or None when unset.
        content: Child nodes; an entry may double as a namespace.
    """

    key: str
    type: str = ""
    default: str | None = None
    tr: bool | None = None
    content: ContentGroup = field(default_factory=ContentGroup)


ContentNode = ContainerNode | EntryNode | ContentGroup


@dataclass(frozen=True)
class EntryDescriptor:
    """Metadata written onto an entry by merge_entry()."""

    type: str
    default: str | None = None
    tr: bool | None = None


@dataclass(frozen=True)
class Location:
    """Where locate() found a keyed node.

    Attributes:
        group: The group that directly owns the node. This may be an
            anonymous group nested below the group that was searched.
        index: Position of the node inside group.content_nodes.
    """

    group: ContentGroup
    index: int

    @property
    def node(self) -> ContainerNode | EntryNode:
        node = self.group.content_nodes[self.index]
        if isinstance(node, ContentGroup):
            raise TypeError("location points at an anonymous group")
        return node


# -------------------------------
# Kind predicates
# -------------------------------


def is_container(node: ContentNode) -> bool:
    return isinstance(node, ContainerNode)


def is_entry(node: ContentNode) -> bool:
    return isinstance(node, EntryNode)


def is_anonymous_group(node: ContentNode) -> bool:
    return isinstance(node, ContentGroup)


# -------------------------------
# Lookup
# -------------------------------


def split_key_path(key_path: str) -> list[str]:
    """Split a '/'-separated key path, dropping empty segments."""
    return [segment for segment in key_path.split("/") if segment]


def locate(group: ContentGroup, key: str) -> Location | None:
    """Find the container or entry answering to key.

    Direct children are checked first, in order. Anonymous child groups are
    searched depth-first only if no direct child matches.

    Args:
        group: Group to search.
        key: A single key segment (exact string match).

    Returns:
        The Location of the match, or None if the key is not found.
    """
    anonymous: list[ContentGroup] = []
    for index, node in enumerate(group.content_nodes):
        if isinstance(node, ContainerNode):
            if node.key == key:
                return Location(group, index)
        elif isinstance(node, EntryNode):
            if node.key == key:
                return Location(group, index)
        elif isinstance(node, ContentGroup):
            anonymous.append(node)
        else:
            assert_never(node)

    for sub_group in anonymous:
        found = locate(sub_group, key)
        if found is not None:
            return found
    return None


def find_container(group: ContentGroup, key: str) -> ContainerNode | None:
    """Container-only lookup; an entry at key counts as not found."""
    found = locate(group, key)
    if found is None:
        return None
    node = found.node
    if isinstance(node, ContainerNode):
        return node
    return None


def iter_keyed_nodes(group: ContentGroup) -> Iterator[ContainerNode | EntryNode]:
    """Yield keyed children in emission order, flattening anonymous groups."""
    for node in group.content_nodes:
        if isinstance(node, ContainerNode):
            yield node
        elif isinstance(node, EntryNode):
            yield node
        elif isinstance(node, ContentGroup):
            yield from iter_keyed_nodes(node)
        else:
            assert_never(node)


# -------------------------------
# Merge
# -------------------------------


def ensure_container_path(group: ContentGroup, keys: Sequence[str]) -> ContentGroup:
    """Walk keys from group, creating missing containers along the way.

    An existing entry on the way is descended into; its child group hosts
    the deeper keys.

    Returns:
        The content group reached after the last key.
    """
    current = group
    for key in keys:
        found = locate(current, key)
        if found is None:
            node = ContainerNode(key=key)
            current.append(node)
            current = node.content
            continue

        node = found.node
        if isinstance(node, ContainerNode):
            current = node.content
        elif isinstance(node, EntryNode):
            current = node.content
        else:
            assert_never(node)
    return current


def merge_entry(
    root: ContentGroup,
    key_path: str,
    descriptor: EntryDescriptor,
    *,
    scope: Sequence[str] = (),
    location: str | None = None,
) -> EntryNode:
    """Insert an entry at key_path, promoting a container if one is there.

    Args:
        root: Group the key path is relative to.
        key_path: '/'-separated key path; the last segment is the entry key.
        descriptor: Type, default and tr to record on the entry.
        scope: Keys leading from the document root to root; only used to
            report the full key path of a duplicate.
        location: Optional source location used in error messages.

    Returns:
        The entry node now stored at key_path.

    Raises:
        DuplicateEntryError: An entry already exists at key_path.
        MalformedDocumentError: key_path has no segments.
    """
    keys = split_key_path(key_path)
    if not keys:
        raise MalformedDocumentError(f"empty entry key: '{key_path}'", location)
    *container_keys, entry_key = keys

    parent = ensure_container_path(root, container_keys)
    found = locate(parent, entry_key)

    if found is None:
        entry = EntryNode(key=entry_key)
        parent.append(entry)
    else:
        node = found.node
        if isinstance(node, ContainerNode):
            # promote in place, keeping the accumulated children
            entry = EntryNode(key=entry_key, content=node.content)
            found.group.content_nodes[found.index] = entry
        elif isinstance(node, EntryNode):
            raise DuplicateEntryError("/".join([*scope, *keys]), location)
        else:
            assert_never(node)

    entry.type = descriptor.type
    entry.default = descriptor.default
    entry.tr = descriptor.tr
    return entry
