"""Report renderer: QTI item body to static report HTML.

Unlike the scoring renderer, the report keeps the item's own markup: a
``qti-`` prefixed element becomes the HTML element of the same name with its
attributes copied verbatim. Interactions become static markup, and the
rendered fragment then goes through the code passes in ``code_blocks``.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping
from typing import Any

from qti_render.code_blocks import apply_report_passes
from qti_render.errors import (
    IdentifierMismatchError,
    IdentifierMissingError,
    QtiParseError,
    QtiStructureError,
)
from qti_render.extraction import compute_item_max_score, extract_choices, extract_rubric_criteria
from qti_render.models import ParsedItemForReport, ReportRenderOptions, resolve_options
from qti_render.rendering import ROOT_STATE, RenderState, render_text
from qti_render.utils.markup import escape_html
from qti_render.utils.xml_nodes import (
    Node,
    get_elements_by_local_name,
    iter_child_nodes,
    local_name,
    parse_item_xml,
    serialize_attributes,
)

logger = logging.getLogger(__name__)

QTI_PREFIX = "qti-"


class ReportRenderer:
    """Renders nodes as static report markup."""

    def __init__(self, options: ReportRenderOptions):
        self.options = options

    def render_node(self, node: Node, state: RenderState = ROOT_STATE) -> str:
        """Render one text or element node."""
        if isinstance(node, str):
            return render_text(node, state)
        name = local_name(node)
        rule = REPORT_RULES.get(name)
        if rule is None:
            return _render_renamed(node, self, state)
        return rule(node, self, state)

    def render_children(self, element: ET.Element, state: RenderState = ROOT_STATE) -> str:
        """Render all child nodes of element and concatenate them."""
        return "".join(self.render_node(child, state) for child in iter_child_nodes(element))


ReportRule = Callable[[ET.Element, ReportRenderer, RenderState], str]


def strip_qti_prefix(name: str) -> str:
    """Map a QTI element name onto its HTML name (``qti-p`` -> ``p``)."""
    return name[len(QTI_PREFIX) :] if name.startswith(QTI_PREFIX) else name


def _render_renamed(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    tag = strip_qti_prefix(local_name(element))
    return f"<{tag}{serialize_attributes(element)}>{renderer.render_children(element, state)}</{tag}>"


def _render_suppressed(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    return ""


def _render_choice_interaction(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    class_name = renderer.options.choice_wrapper_class_name
    class_attr = f' class="{escape_html(class_name)}"' if class_name else ""
    return f"<div{class_attr}>{renderer.render_children(element, state)}</div>"


def _render_cloze(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    return renderer.options.cloze_input_html


def _render_pre(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    inner = renderer.render_children(element, RenderState(in_pre=True, preserve_whitespace=False))
    return f"<pre{serialize_attributes(element)}>{inner}</pre>"


def _render_code(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    inner = renderer.render_children(element, state.with_flags(preserve_whitespace=True))
    return f"<code{serialize_attributes(element)}>{inner}</code>"


def _render_image(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    return f"<img{serialize_attributes(element)} />"


def _render_rule(element: ET.Element, renderer: ReportRenderer, state: RenderState) -> str:
    return "<hr />"


REPORT_RULES: dict[str, ReportRule] = {
    "qti-rubric-block": _render_suppressed,
    "qti-choice-interaction": _render_choice_interaction,
    "qti-text-entry-interaction": _render_cloze,
    "qti-extended-text-interaction": _render_suppressed,
    # Unprefixed names show up when items embed plain HTML
    "qti-pre": _render_pre,
    "pre": _render_pre,
    "qti-code": _render_code,
    "code": _render_code,
    "qti-img": _render_image,
    "img": _render_image,
    "qti-hr": _render_rule,
    "hr": _render_rule,
}


def render_qti_item_for_report(
    xml: str | bytes | ET.Element,
    expected_identifier: str,
    options: ReportRenderOptions | Mapping[str, Any] | None = None,
) -> ParsedItemForReport:
    """Render a QTI item as static report HTML.

    Args:
        xml: The assessment item XML (or its parsed root element).
        expected_identifier: Identifier the caller expects the item to carry,
            typically derived from the file name.
        options: Report options; unset fields use the defaults.

    Returns:
        ParsedItemForReport with the question HTML, rubric criteria, maximum
        score and choices.

    Raises:
        QtiParseError: If the XML cannot be parsed.
        IdentifierMissingError: If the item has no identifier.
        IdentifierMismatchError: If the identifier differs from the expected one.
        QtiStructureError: If the item has no qti-item-body.
    """
    resolved = resolve_options(options, ReportRenderOptions)
    try:
        root = parse_item_xml(xml)
    except QtiParseError as e:
        raise QtiParseError(
            f"Invalid assessment item: XML parse failed for {expected_identifier}"
        ) from e

    identifier = root.get("identifier") or ""
    title = root.get("title", expected_identifier)
    if not identifier:
        raise IdentifierMissingError(
            f"Invalid assessment item: identifier missing in {expected_identifier}"
        )
    if identifier != expected_identifier:
        raise IdentifierMismatchError(expected_identifier, identifier)

    item_bodies = get_elements_by_local_name(root, "qti-item-body")
    if not item_bodies:
        raise QtiStructureError(f"Invalid assessment item: qti-item-body not found for {identifier}")
    item_body = item_bodies[0]

    rubric_criteria = extract_rubric_criteria(item_body)
    renderer = ReportRenderer(resolved)
    raw_body = renderer.render_children(item_body)
    wrapped_html = f'<div class="{escape_html(resolved.item_body_wrapper_class_name)}">{raw_body}</div>'
    question_html = apply_report_passes(wrapped_html, resolved)

    logger.debug(f"Rendered {identifier} for report ({len(rubric_criteria)} rubric criteria)")

    return ParsedItemForReport(
        identifier=identifier,
        title=title,
        question_html=question_html,
        rubric_criteria=rubric_criteria,
        item_max_score=compute_item_max_score(rubric_criteria),
        choices=extract_choices(item_body),
    )
