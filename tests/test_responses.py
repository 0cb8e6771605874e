"""
Unit Tests for Applying Responses to Scoring Prompts
"""

from bs4 import BeautifulSoup

from qti_render import apply_responses_to_prompt_html
from qti_render.models import default_blank_renderer
from qti_render.responses import compute_blank_size, normalize_responses


def blanks_of(html: str) -> list:
    return BeautifulSoup(html, "html.parser").select("input.qti-blank-input")


class TestApplyResponses:
    """Tests for apply_responses_to_prompt_html."""

    def test_apply_when_single_response_then_fills_value_and_size(self, blank_prompt_html):
        """A single string fills the first blank and widens it."""
        html = apply_responses_to_prompt_html(blank_prompt_html, "TypeScript")
        (blank,) = blanks_of(html)
        assert blank["value"] == "TypeScript"
        assert blank["size"] == "10"
        assert blank["data-blank"] == "1"
        assert html.startswith("<p>A<input")
        assert html.endswith("B</p>")

    def test_apply_when_short_response_then_minimum_size(self, blank_prompt_html):
        """Short responses keep the default width."""
        (blank,) = blanks_of(apply_responses_to_prompt_html(blank_prompt_html, ["ab"]))
        assert blank["value"] == "ab"
        assert blank["size"] == "6"

    def test_apply_when_fewer_responses_than_blanks_then_rest_untouched(self):
        """Blanks without a matching response stay empty."""
        html = "".join(default_blank_renderer(i) for i in (1, 2, 3))
        blanks = blanks_of(apply_responses_to_prompt_html(html, ["a", "b"]))
        assert [blank.get("value") for blank in blanks] == ["a", "b", None]

    def test_apply_when_more_responses_than_blanks_then_extra_ignored(self, blank_prompt_html):
        """Extra responses are dropped."""
        blanks = blanks_of(apply_responses_to_prompt_html(blank_prompt_html, ["a", "b", "c"]))
        assert [blank["value"] for blank in blanks] == ["a"]

    def test_apply_when_labels_out_of_order_then_matches_by_position(self):
        """Responses follow document order, not the data-blank label."""
        html = default_blank_renderer(2) + default_blank_renderer(1)
        blanks = blanks_of(apply_responses_to_prompt_html(html, ["x", "y"]))
        assert [(blank["data-blank"], blank["value"]) for blank in blanks] == [("2", "x"), ("1", "y")]

    def test_apply_when_none_entry_then_blank_skipped(self):
        """None entries leave their blank empty without shifting later ones."""
        html = "".join(default_blank_renderer(i) for i in (1, 2, 3))
        blanks = blanks_of(apply_responses_to_prompt_html(html, ["a", None, "c"]))
        assert [blank.get("value") for blank in blanks] == ["a", None, "c"]
        assert blanks[1]["size"] == "6"

    def test_apply_when_value_has_markup_then_escaped(self, blank_prompt_html):
        """Response text is stored as an attribute value, never as markup."""
        html = apply_responses_to_prompt_html(blank_prompt_html, '<b>"x"</b>')
        assert "<b>" not in html
        (blank,) = blanks_of(html)
        assert blank["value"] == '<b>"x"</b>'

    # ─────────────────────────────────────────────────────────────────────────
    # No-op cases
    # ─────────────────────────────────────────────────────────────────────────

    def test_apply_when_no_responses_then_identical(self, blank_prompt_html):
        """None and empty lists return the input unchanged."""
        assert apply_responses_to_prompt_html(blank_prompt_html, None) is blank_prompt_html
        assert apply_responses_to_prompt_html(blank_prompt_html, []) is blank_prompt_html

    def test_apply_when_no_blank_marker_then_identical(self):
        """HTML without blanks is returned as is."""
        html = "<p>Nothing<br>to fill</p>"
        assert apply_responses_to_prompt_html(html, ["a"]) is html

    def test_apply_when_marker_only_in_text_then_identical(self):
        """The marker class in plain text does not count as a blank."""
        html = "<p>qti-blank-input<br>x</p>"
        assert apply_responses_to_prompt_html(html, ["a"]) is html


class TestResponseHelpers:
    """Tests for response normalization and sizing."""

    def test_normalize_when_various_inputs_then_list(self):
        """Strings, sequences and None become lists."""
        assert normalize_responses(None) == []
        assert normalize_responses("a") == ["a"]
        assert normalize_responses(("a", "b")) == ["a", "b"]

    def test_blank_size_when_long_then_length(self):
        """The size follows the response length above the minimum."""
        assert compute_blank_size("") == 6
        assert compute_blank_size("abcdefg") == 7
