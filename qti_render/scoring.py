"""Scoring renderer: QTI item body to interactive HTML.

Each QTI element maps to exactly one rule in ``SCORING_RULES``; elements
without a rule are unwrapped and their children rendered in place. Blanks
(text-entry interactions) are numbered from 1 in document order by a counter
that lives on the per-call ``ScoringRenderer``.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from qti_render.errors import QtiStructureError
from qti_render.extraction import extract_choices, extract_rubric_criteria
from qti_render.models import ParsedItemForScoring, ScoringRenderOptions, resolve_options
from qti_render.rendering import ROOT_STATE, RenderState, render_text
from qti_render.utils.markup import escape_html
from qti_render.utils.xml_nodes import (
    Node,
    get_elements_by_local_name,
    is_element,
    is_whitespace_text,
    iter_child_nodes,
    local_name,
    parse_item_xml,
)

logger = logging.getLogger(__name__)

BLANK_ELEMENT = "qti-text-entry-interaction"

_LEADING_WHITESPACE = re.compile(r"^\s+")
_TRAILING_WHITESPACE = re.compile(r"\s+\Z")


class ScoringRenderer:
    """Renders nodes for the scoring UI; one instance per render call."""

    def __init__(self, options: ScoringRenderOptions):
        self.options = options
        self.blank_count = 0

    def next_blank_index(self) -> int:
        """Advance the blank counter and return the new index."""
        self.blank_count += 1
        return self.blank_count

    def render_node(self, node: Node, state: RenderState = ROOT_STATE) -> str:
        """Render one text or element node."""
        if isinstance(node, str):
            return render_text(node, state)
        rule = SCORING_RULES.get(local_name(node))
        if rule is None:
            return self.render_children(node, state)
        return rule(node, self, state)

    def render_children(self, element: ET.Element, state: RenderState = ROOT_STATE) -> str:
        """Render all child nodes of element and concatenate them."""
        return "".join(self.render_node(child, state) for child in iter_child_nodes(element))

    def render_nodes(self, nodes: Sequence[Node], state: RenderState = ROOT_STATE) -> str:
        """Render a sequence of sibling nodes and concatenate them."""
        return "".join(self.render_node(node, state) for node in nodes)


ScoringRule = Callable[[ET.Element, ScoringRenderer, RenderState], str]


# -----------------------------------------------------------------------------
# Rules
# -----------------------------------------------------------------------------


def _wrap(tag: str) -> ScoringRule:
    """Build a rule that maps an element 1:1 onto an attribute-less HTML tag."""

    def rule(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
        return f"<{tag}>{renderer.render_children(element, state)}</{tag}>"

    return rule


def _optional_attribute(element: ET.Element, name: str) -> str:
    """Serialize an attribute only when it is present and non-empty."""
    value = element.get(name)
    return f' {name}="{escape_html(value)}"' if value else ""


def _render_link(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    href = _optional_attribute(element, "href")
    title = _optional_attribute(element, "title")
    return f"<a{href}{title}>{renderer.render_children(element, state)}</a>"


def _render_code(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    inner = renderer.render_children(element, state.with_flags(preserve_whitespace=True))
    return f"<code>{inner}</code>"


def _render_ordered_list(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    start = _optional_attribute(element, "start")
    return f"<ol{start}>{renderer.render_children(element, state)}</ol>"


def _render_image(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    src = escape_html(element.get("src") or "")
    alt = escape_html(element.get("alt") or "")
    title = _optional_attribute(element, "title")
    return f'<img src="{src}" alt="{alt}"{title} />'


def _render_rule(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    return "<hr />"


def _render_blank(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    return renderer.options.blank_renderer(renderer.next_blank_index())


def _render_extended_text(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    return renderer.options.extended_text_renderer()


def _render_suppressed(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    return ""


def _render_choice_interaction(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    # Choices render from a fresh state: they are prose, never preformatted
    items = "".join(
        f'<li data-choice="{escape_html(choice.get("identifier") or "")}">'
        f"{renderer.render_children(choice)}</li>"
        for choice in get_elements_by_local_name(element, "qti-simple-choice")
    )
    return f'<ol class="{renderer.options.choice_list_class_name}">{items}</ol>'


def _trim_inline_whitespace(inner: str, pattern: re.Pattern[str]) -> str:
    """Strip one run of edge whitespace unless it contains a line break."""
    match = pattern.search(inner)
    if match is None:
        return inner
    whitespace = match.group(0)
    if "\n" in whitespace or "\r" in whitespace:
        return inner
    return inner[: match.start()] + inner[match.end() :]


def _render_code_in_pre(
    code: ET.Element,
    renderer: ScoringRenderer,
    trim_start: bool,
    trim_end: bool,
) -> str:
    inner = renderer.render_children(code, RenderState(in_pre=True, preserve_whitespace=True))
    if trim_start:
        inner = _trim_inline_whitespace(inner, _LEADING_WHITESPACE)
    if trim_end:
        inner = _trim_inline_whitespace(inner, _TRAILING_WHITESPACE)
    return f"<code>{inner}</code>"


def _render_pre(element: ET.Element, renderer: ScoringRenderer, state: RenderState) -> str:
    """Render a preformatted block that may hold code fragments and blanks.

    A code fragment directly next to a blank loses the single-line space on
    that side, so the blank sits flush against the code.
    """
    nodes = [node for node in iter_child_nodes(element) if not is_whitespace_text(node)]
    has_blank = any(is_element(node, BLANK_ELEMENT) for node in nodes)

    parts = []
    for position, node in enumerate(nodes):
        if is_element(node, "qti-code"):
            previous_is_blank = position > 0 and is_element(nodes[position - 1], BLANK_ELEMENT)
            next_is_blank = position < len(nodes) - 1 and is_element(nodes[position + 1], BLANK_ELEMENT)
            parts.append(_render_code_in_pre(node, renderer, previous_is_blank, next_is_blank))
        else:
            parts.append(renderer.render_node(node, RenderState(in_pre=True, preserve_whitespace=False)))

    class_attr = f' class="{renderer.options.pre_with_blanks_class_name}"' if has_blank else ""
    return f"<pre{class_attr}>{''.join(parts)}</pre>"


SCORING_RULES: dict[str, ScoringRule] = {
    "qti-p": _wrap("p"),
    "qti-h3": _wrap("h3"),
    "qti-h4": _wrap("h4"),
    "qti-h5": _wrap("h5"),
    "qti-h6": _wrap("h6"),
    "qti-em": _wrap("em"),
    "qti-strong": _wrap("strong"),
    "qti-del": _wrap("del"),
    "qti-a": _render_link,
    "qti-code": _render_code,
    "qti-pre": _render_pre,
    "qti-blockquote": _wrap("blockquote"),
    "qti-ul": _wrap("ul"),
    "qti-ol": _render_ordered_list,
    "qti-li": _wrap("li"),
    "qti-table": _wrap("table"),
    "qti-thead": _wrap("thead"),
    "qti-tbody": _wrap("tbody"),
    "qti-tr": _wrap("tr"),
    "qti-th": _wrap("th"),
    "qti-td": _wrap("td"),
    "qti-hr": _render_rule,
    "qti-img": _render_image,
    BLANK_ELEMENT: _render_blank,
    "qti-extended-text-interaction": _render_extended_text,
    "qti-choice-interaction": _render_choice_interaction,
    "qti-rubric-block": _render_suppressed,
}


# -----------------------------------------------------------------------------
# Entry points
# -----------------------------------------------------------------------------


def find_explanation_feedback(root: ET.Element) -> ET.Element | None:
    """Find the modal feedback holding the candidate explanation.

    The ``EXPLANATION`` feedback bound to the ``FEEDBACK`` outcome wins;
    any other ``EXPLANATION`` feedback is the fallback.
    """
    feedbacks = [
        feedback
        for feedback in get_elements_by_local_name(root, "qti-modal-feedback")
        if feedback.get("identifier") == "EXPLANATION"
    ]
    for feedback in feedbacks:
        if feedback.get("outcome-identifier") == "FEEDBACK":
            return feedback
    return feedbacks[0] if feedbacks else None


def render_candidate_explanation(root: ET.Element, renderer: ScoringRenderer) -> str | None:
    """Render the explanation feedback body with the scoring rules.

    Blanks inside the explanation continue the renderer's numbering.

    Args:
        root: The assessment item root element.
        renderer: The renderer used for the item prompt.

    Returns:
        The explanation HTML, or None when the item has no explanation
        feedback or the feedback has no content body.
    """
    feedback = find_explanation_feedback(root)
    if feedback is None:
        return None
    content_bodies = get_elements_by_local_name(feedback, "qti-content-body")
    if not content_bodies:
        return None
    nodes = [node for node in iter_child_nodes(content_bodies[0]) if not is_whitespace_text(node)]
    return renderer.render_nodes(nodes)


def render_qti_item_for_scoring(
    xml: str | bytes | ET.Element,
    options: ScoringRenderOptions | Mapping[str, Any] | None = None,
) -> ParsedItemForScoring:
    """Render a QTI item for the interactive scoring UI.

    Args:
        xml: The assessment item XML (or its parsed root element).
        options: Scoring options; unset fields use the defaults.

    Returns:
        ParsedItemForScoring with the prompt HTML, rubric criteria, choices
        and candidate explanation.

    Raises:
        QtiParseError: If the XML cannot be parsed.
        QtiStructureError: If the item has no qti-item-body.
    """
    resolved = resolve_options(options, ScoringRenderOptions)
    root = parse_item_xml(xml)
    identifier = root.get("identifier") or ""
    title = root.get("title", identifier)

    item_bodies = get_elements_by_local_name(root, "qti-item-body")
    if not item_bodies:
        raise QtiStructureError("qti-item-body not found")
    item_body = item_bodies[0]

    renderer = ScoringRenderer(resolved)
    prompt_html = renderer.render_children(item_body)
    prompt_blanks = renderer.blank_count
    candidate_explanation_html = render_candidate_explanation(root, renderer)

    logger.debug(
        f"Rendered {identifier or '<no identifier>'} for scoring: "
        f"{prompt_blanks} blank(s) in prompt, {renderer.blank_count - prompt_blanks} in explanation"
    )

    return ParsedItemForScoring(
        identifier=identifier,
        title=title,
        prompt_html=prompt_html,
        rubric_criteria=extract_rubric_criteria(item_body),
        choices=extract_choices(item_body),
        candidate_explanation_html=candidate_explanation_html,
    )
