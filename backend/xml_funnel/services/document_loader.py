"""
XML document loader.

Parses raw text with ElementTree and converts the result into a plain
child-ownership tree (each node owns an ordered list of children, no parent
links). Everything downstream works on XmlNode only.

Design principles:
- Malformed markup anywhere is terminal: XmlSyntaxError, no partial tree.
- Namespace URIs are dropped; nodes carry local tag names.
- Comments, processing instructions and attributes are not part of the tree.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from funnel_shared.exceptions import XmlSyntaxError


@dataclass
class XmlNode:
    """One element of a parsed document."""

    tag: str
    text: str = ""
    tail: str = ""
    children: List["XmlNode"] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def child_tags(self) -> List[str]:
        return [child.tag for child in self.children]

    def find_child(self, tag: str) -> Optional["XmlNode"]:
        """First direct child with the given tag."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def iter(self) -> Iterator["XmlNode"]:
        """Pre-order (document order) traversal including self."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def text_content(self) -> str:
        """Concatenated text of this node and all descendants, in document order."""
        parts: List[str] = []
        # (node, emit_tail) entries; tails belong to the parent's content
        stack = [(self, False)]
        while stack:
            node, emit_tail = stack.pop()
            if emit_tail:
                parts.append(node.tail)
                continue
            parts.append(node.text)
            for child in reversed(node.children):
                stack.append((child, True))
                stack.append((child, False))
        return "".join(parts)


def _local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _convert(element: ET.Element) -> XmlNode:
    root = XmlNode(
        tag=_local_name(element.tag),
        text=element.text or "",
    )
    stack = [(element, root)]
    while stack:
        source, target = stack.pop()
        for child in source:
            # Comments/PIs only show up with a custom TreeBuilder, skip them anyway
            if not isinstance(child.tag, str):
                continue
            node = XmlNode(
                tag=_local_name(child.tag),
                text=child.text or "",
                tail=child.tail or "",
            )
            target.children.append(node)
            stack.append((child, node))
    return root


def load_document(xml_text: Union[str, bytes]) -> XmlNode:
    """
    Parse document text (or raw bytes) into an XmlNode tree.

    Raises:
        XmlSyntaxError: empty input, malformed markup or an unknown encoding
    """
    # Bytes go to expat untouched so the encoding declaration is honored
    text = xml_text if isinstance(xml_text, bytes) else xml_text.lstrip("\ufeff")
    if not text.strip():
        raise XmlSyntaxError("document is empty")

    try:
        element = ET.fromstring(text)
    except ET.ParseError as e:
        line, column = getattr(e, "position", (None, None))
        raise XmlSyntaxError(str(e), line=line, column=column) from e
    except (LookupError, ValueError) as e:
        # unknown or unusable encoding declaration
        raise XmlSyntaxError(str(e)) from e

    return _convert(element)
