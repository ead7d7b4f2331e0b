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

"""XML source reading with element locations.

Documents are parsed with the standard library SAX parser into a light
XmlElement tree. SAX is used instead of ElementTree because the locator
gives every element its line and column, which every structural error
message needs.

Error Handling:
    - DocumentIOError: The file cannot be opened or read
    - MalformedDocumentError: The XML is not well formed, or an attribute
      is missing or has an invalid value
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import IO
import xml.sax
from xml.sax.handler import ContentHandler

from settingsgen.exceptions import DocumentIOError, MalformedDocumentError

__all__ = [
    "XmlElement",
    "open_document",
    "parse_document",
    "require_attr",
    "parse_bool",
]

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


@dataclass
class XmlElement:
    """One parsed XML element.

    Attributes:
        name: Element name as written (no namespace processing).
        attrs: Attribute values by name.
        children: Child elements in document order.
        text: Concatenated, stripped character data of this element.
        source: Name of the document (usually its path).
        line: 1-based line of the start tag.
        column: 0-based column of the start tag.
    """

    name: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[XmlElement] = field(default_factory=list)
    text: str = ""
    source: str = "<stream>"
    line: int = 0
    column: int = 0

    @property
    def location(self) -> str:
        return f"{self.source}:{self.line}:{self.column}"

    def unexpected(self, context: str) -> MalformedDocumentError:
        """Build the error for an element that is not allowed here."""
        return MalformedDocumentError(
            f"unexpected element <{self.name}> in {context}", self.location
        )


class _TreeHandler(ContentHandler):
    """SAX handler that builds an XmlElement tree."""

    def __init__(self, source: str) -> None:
        super().__init__()
        self._source = source
        self._stack: list[tuple[XmlElement, list[str]]] = []
        self.root: XmlElement | None = None

    def startElement(self, name: str, attrs) -> None:  # noqa: N802
        line = column = 0
        if self._locator is not None:
            line = self._locator.getLineNumber()
            column = self._locator.getColumnNumber()
        element = XmlElement(
            name=name,
            attrs=dict(attrs.items()),
            source=self._source,
            line=line,
            column=column,
        )
        if self._stack:
            self._stack[-1][0].children.append(element)
        else:
            self.root = element
        self._stack.append((element, []))

    def endElement(self, name: str) -> None:  # noqa: N802
        element, text_parts = self._stack.pop()
        element.text = "".join(text_parts).strip()

    def characters(self, content: str) -> None:
        if self._stack:
            self._stack[-1][1].append(content)


def parse_document(stream: IO[bytes], source: str = "<stream>") -> XmlElement:
    """Parse an XML stream into an XmlElement tree.

    Args:
        stream: Binary stream positioned at the start of the document.
        source: Name used in error locations.

    Returns:
        The root element.

    Raises:
        MalformedDocumentError: If the document is not well formed.
    """
    handler = _TreeHandler(source)
    try:
        xml.sax.parse(stream, handler)
    except xml.sax.SAXParseException as err:
        location = f"{source}:{err.getLineNumber()}:{err.getColumnNumber()}"
        raise MalformedDocumentError(
            f"invalid XML: {err.getMessage()}", location
        ) from err
    if handler.root is None:
        raise MalformedDocumentError("document has no root element", source)
    return handler.root


def open_document(path: Path) -> XmlElement:
    """Open and parse an XML document from disk.

    The file is closed on every exit path.

    Raises:
        DocumentIOError: If the file cannot be opened or read.
        MalformedDocumentError: If the document is not well formed.
    """
    try:
        with path.open("rb") as stream:
            return parse_document(stream, str(path))
    except OSError as err:
        raise DocumentIOError(
            path, f"cannot open document: {path}: {err.strerror or err}"
        ) from err


def require_attr(element: XmlElement, name: str) -> str:
    """Return a required attribute or raise MalformedDocumentError."""
    value = element.attrs.get(name)
    if value is None:
        raise MalformedDocumentError(
            f"<{element.name}> is missing required attribute '{name}'",
            element.location,
        )
    return value


def parse_bool(element: XmlElement, name: str, default: bool | None) -> bool | None:
    """Parse a boolean attribute, returning default if it is absent."""
    raw = element.attrs.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise MalformedDocumentError(
        f"<{element.name}> attribute '{name}' is not a boolean: '{raw}'",
        element.location,
    )
