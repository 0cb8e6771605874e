"""Scoring metadata extraction from QTI item bodies.

This module pulls the scorer rubric and the answer choices out of an item
body. Both extractors are independent of the rendering mode and are shared
by the scoring and report renderers.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from qti_render.models import ChoiceOption, RubricCriterion
from qti_render.utils.xml_nodes import get_elements_by_local_name, text_content

SCORER_VIEW = "scorer"

_CRITERION_PATTERN = re.compile(r"^\[(\d+(?:\.\d+)?)\]\s*(.*)$")


def parse_criterion_text(raw_text: str) -> tuple[float, str]:
    """Split a rubric line into its point value and text.

    Args:
        raw_text: The line text, e.g. ``"[2] Mentions the base case"``.

    Returns:
        Tuple of (points, text). Lines without a leading ``[N]`` marker are
        worth 0 points and keep their whole trimmed text.
    """
    trimmed = raw_text.strip()
    match = _CRITERION_PATTERN.match(trimmed)
    if not match:
        return 0.0, trimmed
    return float(match.group(1)), match.group(2).strip()


def extract_rubric_criteria(item_body: ET.Element) -> list[RubricCriterion]:
    """Extract the point-weighted criteria of the scorer rubric block.

    Only the first rubric block whose ``view`` is exactly ``scorer`` is
    read; each ``qti-p`` inside it becomes one criterion, numbered from 1.

    Args:
        item_body: The qti-item-body element.

    Returns:
        The criteria in document order, or an empty list when the item has
        no scorer rubric.
    """
    rubric_blocks = get_elements_by_local_name(item_body, "qti-rubric-block")
    scorer = next((block for block in rubric_blocks if block.get("view") == SCORER_VIEW), None)
    if scorer is None:
        return []

    criteria: list[RubricCriterion] = []
    for line in get_elements_by_local_name(scorer, "qti-p"):
        points, text = parse_criterion_text(text_content(line))
        criteria.append(RubricCriterion(index=len(criteria) + 1, points=points, text=text))
    return criteria


def extract_choices(item_body: ET.Element) -> list[ChoiceOption]:
    """Extract every simple choice under the item body, in document order."""
    return [
        ChoiceOption(
            identifier=choice.get("identifier") or "",
            text=text_content(choice).strip(),
        )
        for choice in get_elements_by_local_name(item_body, "qti-simple-choice")
    ]


def compute_item_max_score(criteria: list[RubricCriterion]) -> float:
    """Sum the points of all rubric criteria."""
    return sum((criterion.points for criterion in criteria), 0.0)
