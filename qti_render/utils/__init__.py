"""Shared utilities for the qti_render package."""

from qti_render.utils.logging_config import get_logger, setup_logging
from qti_render.utils.markup import (
    add_classes,
    add_or_update_attribute,
    decode_xml_entities,
    escape_html,
    parse_attributes,
)
from qti_render.utils.paths import resolve_relative_path
from qti_render.utils.xml_nodes import (
    get_elements_by_local_name,
    local_name,
    parse_item_xml,
    text_content,
)

__all__ = [
    # Logging utilities
    "setup_logging",
    "get_logger",
    # Markup utilities
    "escape_html",
    "decode_xml_entities",
    "parse_attributes",
    "add_or_update_attribute",
    "add_classes",
    # XML utilities
    "parse_item_xml",
    "local_name",
    "get_elements_by_local_name",
    "text_content",
    # Path utilities
    "resolve_relative_path",
]
