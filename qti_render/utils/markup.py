"""String-level helpers for escaping and editing raw HTML tags.

These functions never look at a tree: they work on text and on raw opening
tags such as ``<code class="language-css">``, which is what the report
post-render passes operate on.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable

_ATTRIBUTE_PATTERN = re.compile(
    r"""([A-Za-z_:][A-Za-z0-9_.:-]*)\s*=\s*(?:"([^"]*)"|'([^']*)')"""
)
_TAG_NAME_PATTERN = re.compile(r"^<([A-Za-z0-9-]+)")


def escape_html(value: str) -> str:
    """Escape text or attribute values for HTML output (quotes included)."""
    return html.escape(value, quote=True)


def decode_xml_entities(value: str) -> str:
    """Decode entity-escaped markup text back to plain characters."""
    return html.unescape(value)


def parse_attributes(tag_open: str) -> dict[str, str]:
    """Parse the quoted attributes of a raw opening tag.

    Unquoted and valueless attributes are ignored. Values are returned as
    written, without entity decoding.

    Args:
        tag_open: An opening tag such as ``<pre class="a b" data-x='1'>``.

    Returns:
        Mapping of attribute name to raw value, in source order.
    """
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE_PATTERN.finditer(tag_open):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attributes[match.group(1)] = value or ""
    return attributes


def add_or_update_attribute(tag_open: str, attribute_name: str, attribute_value: str) -> str:
    """Set an attribute on a raw opening tag.

    An existing double-quoted attribute is replaced in place; otherwise the
    attribute is inserted right after the tag name.

    Args:
        tag_open: The opening tag to edit.
        attribute_name: Attribute to set.
        attribute_value: Raw value. Double quotes are escaped, other entity
            text is kept as is.

    Returns:
        The edited opening tag.
    """
    value = attribute_value.replace('"', "&quot;")
    replacement = f' {attribute_name}="{value}"'
    existing = re.compile(rf'\s{re.escape(attribute_name)}="[^"]*"')
    if existing.search(tag_open):
        return existing.sub(lambda _match: replacement, tag_open, count=1)
    return _TAG_NAME_PATTERN.sub(lambda match: f"<{match.group(1)}{replacement}", tag_open, count=1)


def split_class_tokens(class_names: str | None) -> list[str]:
    """Split a class attribute value into its non-empty tokens."""
    if not class_names:
        return []
    return [token for token in re.split(r"\s+", class_names) if token]


def add_classes(tag_open: str, class_names: Iterable[str]) -> str:
    """Merge class tokens into the class attribute of a raw opening tag.

    Existing tokens keep their order; new tokens are appended once.
    """
    merged = split_class_tokens(parse_attributes(tag_open).get("class"))
    for token in class_names:
        if token and token not in merged:
            merged.append(token)
    return add_or_update_attribute(tag_open, "class", " ".join(merged))


def has_class(tag_open: str, class_name: str) -> bool:
    """Return True when the opening tag's class list contains class_name."""
    return class_name in split_class_tokens(parse_attributes(tag_open).get("class"))
