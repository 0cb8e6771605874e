"""
Unit Tests for Rubric and Choice Extraction
"""

import xml.etree.ElementTree as ET

import pytest
from conftest import make_item

from qti_render import extract_choices, extract_rubric_criteria
from qti_render.extraction import compute_item_max_score, parse_criterion_text
from qti_render.utils.xml_nodes import get_elements_by_local_name


def item_body(body: str) -> ET.Element:
    root = ET.fromstring(make_item(body))
    return get_elements_by_local_name(root, "qti-item-body")[0]


class TestParseCriterionText:
    """Tests for parse_criterion_text."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("[2] Good", (2.0, "Good")),
            ("  [0.5]   Half point  ", (0.5, "Half point")),
            ("[3]", (3.0, "")),
            ("No bracket", (0.0, "No bracket")),
            ("[x] Not a number", (0.0, "[x] Not a number")),
            ("Mid [2] line", (0.0, "Mid [2] line")),
        ],
    )
    def test_parse_when_line_then_splits_points_and_text(self, raw, expected):
        """Leading [N] markers carry the points."""
        assert parse_criterion_text(raw) == expected


class TestExtractRubricCriteria:
    """Tests for extract_rubric_criteria."""

    def test_extract_when_scorer_block_then_indexes_lines(self):
        """Scorer lines are numbered from 1 in document order."""
        body = item_body(
            '<qti-rubric-block view="candidate"><qti-p>[9] Candidate</qti-p></qti-rubric-block>'
            '<qti-rubric-block view="scorer"><qti-p>[2] Good</qti-p>'
            "<qti-p>  [1] <qti-em>Nice</qti-em> style </qti-p><qti-p>Remark</qti-p></qti-rubric-block>"
        )
        criteria = extract_rubric_criteria(body)
        assert [(c.index, c.points, c.text) for c in criteria] == [
            (1, 2, "Good"),
            (2, 1, "Nice style"),
            (3, 0, "Remark"),
        ]
        assert compute_item_max_score(criteria) == 3

    def test_extract_when_several_scorer_blocks_then_only_first(self):
        """Only the first scorer block counts."""
        body = item_body(
            '<qti-rubric-block view="scorer"><qti-p>[1] A</qti-p></qti-rubric-block>'
            '<qti-rubric-block view="scorer"><qti-p>[1] B</qti-p></qti-rubric-block>'
        )
        assert [c.text for c in extract_rubric_criteria(body)] == ["A"]

    def test_extract_when_view_not_scorer_then_empty(self):
        """Blocks for other views contribute nothing."""
        body = item_body('<qti-rubric-block view="Scorer"><qti-p>[1] A</qti-p></qti-rubric-block>')
        assert extract_rubric_criteria(body) == []
        assert compute_item_max_score([]) == 0


class TestExtractChoices:
    """Tests for extract_choices."""

    def test_extract_when_nested_choices_then_document_order(self):
        """Choices anywhere under the body are returned in order."""
        body = item_body(
            '<qti-choice-interaction><qti-simple-choice identifier="A"> <qti-em>Alpha</qti-em> </qti-simple-choice>'
            "</qti-choice-interaction><qti-div><qti-choice-interaction>"
            "<qti-simple-choice>No id</qti-simple-choice></qti-choice-interaction></qti-div>"
        )
        assert [(c.identifier, c.text) for c in extract_choices(body)] == [("A", "Alpha"), ("", "No id")]

    def test_extract_when_no_choices_then_empty(self):
        """Items without choices return an empty list."""
        assert extract_choices(item_body("<qti-p>x</qti-p>")) == []
