"""XML tree helpers shared by the extractors and both renderers.

ElementTree keeps character data in ``.text`` and ``.tail`` rather than in
separate nodes; ``iter_child_nodes`` restores the DOM view the renderers work
with, yielding text runs as ``str`` and child elements as ``Element``.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator

from qti_render.errors import QtiParseError
from qti_render.utils.markup import escape_html

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

Node = ET.Element | str


def parse_item_xml(xml_content: str | bytes | ET.Element) -> ET.Element:
    """Parse QTI XML and return its root element.

    Args:
        xml_content: The XML document as text or bytes, or an already
            parsed root element (returned unchanged).

    Returns:
        The document root element.

    Raises:
        QtiParseError: If the document is not well-formed.
    """
    if isinstance(xml_content, ET.Element):
        return xml_content
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        raise QtiParseError(f"QTI item XML parse failed: {e}") from e
    if root is None:
        raise QtiParseError("QTI item XML parse failed: no root element")
    return root


def local_name(element: ET.Element) -> str:
    """Return the tag name of an element without its namespace."""
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return tag.split("}")[-1]


def get_elements_by_local_name(root: ET.Element, name: str) -> list[ET.Element]:
    """Find all descendants of root named `name`, in document order.

    The namespace-aware lookup runs first; a plain lookup is used only when
    it finds nothing, so items with and without a default namespace
    declaration behave alike. The root itself is never included.
    """
    with_namespace = root.findall(f".//{{*}}{name}")
    if with_namespace:
        return with_namespace
    return root.findall(f".//{name}")


def iter_child_nodes(element: ET.Element) -> Iterator[Node]:
    """Yield the child nodes of an element: text runs and elements."""
    if element.text:
        yield element.text
    for child in element:
        if isinstance(child.tag, str):
            yield child
        if child.tail:
            yield child.tail


def is_whitespace_text(node: Node) -> bool:
    """Return True for text nodes made only of whitespace."""
    return isinstance(node, str) and node.strip() == ""


def is_element(node: Node, name: str | None = None) -> bool:
    """Return True when node is an element, optionally with the given local name."""
    if not isinstance(node, ET.Element):
        return False
    return name is None or local_name(node) == name


def text_content(element: ET.Element) -> str:
    """Concatenate all descendant text of an element."""
    return "".join(element.itertext())


def attribute_name(key: str) -> str:
    """Map an ElementTree attribute key to its serialized name."""
    if not key.startswith("{"):
        return key
    namespace, _, name = key[1:].partition("}")
    if namespace == XML_NAMESPACE:
        return f"xml:{name}"
    return name


def serialize_attributes(element: ET.Element) -> str:
    """Serialize an element's attributes in source order.

    Namespace declarations never appear: ElementTree consumes them while
    parsing. Values are HTML-escaped.
    """
    return "".join(
        f' {attribute_name(key)}="{escape_html(value)}"'
        for key, value in element.attrib.items()
        if not (key == "xmlns" or key.startswith("xmlns:"))
    )
