"""
Unit Tests for the Command-Line Interface
"""

import json

import pytest
from bs4 import BeautifulSoup
from conftest import make_item

from qti_render.cli import main
from qti_render.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test away from any .env file with fresh settings."""
    monkeypatch.chdir(tmp_path)
    for name in ("QTI_RENDER_ASSET_BASE_URL", "QTI_RENDER_HIGHLIGHT_CODE", "QTI_RENDER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def write_item(tmp_path, name: str, body: str, identifier: str = "item-1"):
    path = tmp_path / name
    path.write_text(make_item(body, identifier=identifier), encoding="utf-8")
    return path


class TestScoringCommand:
    """Tests for the scoring subcommand."""

    def test_scoring_when_valid_item_then_prints_record(self, tmp_path, capsys):
        """The parsed record is printed as JSON."""
        path = write_item(
            tmp_path,
            "item-1.qti.xml",
            '<qti-p>a<qti-text-entry-interaction/></qti-p>'
            '<qti-rubric-block view="scorer"><qti-p>[2] Good</qti-p></qti-rubric-block>',
        )

        assert main(["scoring", str(path)]) == 0

        record = json.loads(capsys.readouterr().out)
        assert record["identifier"] == "item-1"
        assert 'data-blank="1"' in record["prompt_html"]
        assert record["rubric_criteria"] == [{"index": 1, "points": 2.0, "text": "Good"}]
        assert record["candidate_explanation_html"] is None

    def test_scoring_when_responses_then_blanks_filled(self, tmp_path, capsys):
        """Repeated --response options fill blanks in order."""
        path = write_item(
            tmp_path,
            "item-1.qti.xml",
            "<qti-p><qti-text-entry-interaction/> and <qti-text-entry-interaction/></qti-p>",
        )

        assert main(["scoring", str(path), "--response", "first", "--response", "second"]) == 0

        prompt_html = json.loads(capsys.readouterr().out)["prompt_html"]
        blanks = BeautifulSoup(prompt_html, "html.parser").select("input.qti-blank-input")
        assert [blank["value"] for blank in blanks] == ["first", "second"]

    def test_scoring_when_file_missing_then_exit_code_one(self, tmp_path, capsys):
        """Unreadable files fail without output."""
        assert main(["scoring", str(tmp_path / "missing.xml")]) == 1
        assert capsys.readouterr().out == ""

    def test_scoring_when_malformed_then_exit_code_one(self, tmp_path, capsys):
        """Parse errors fail without output."""
        path = tmp_path / "broken.xml"
        path.write_text("<qti-assessment-item", encoding="utf-8")
        assert main(["scoring", str(path)]) == 1
        assert capsys.readouterr().out == ""


class TestReportCommand:
    """Tests for the report subcommand."""

    def test_report_when_file_name_matches_then_prints_record(self, tmp_path, capsys):
        """The expected identifier defaults to the file name stem."""
        path = write_item(tmp_path, "item-1.qti.xml", "<qti-p>x</qti-p>")

        assert main(["report", str(path)]) == 0

        record = json.loads(capsys.readouterr().out)
        assert record["question_html"] == '<div class="item-body"><p>x</p></div>'
        assert record["item_max_score"] == 0

    def test_report_when_identifier_mismatch_then_exit_code_one(self, tmp_path, capsys):
        """A file named after another item fails."""
        path = write_item(tmp_path, "item-2.qti.xml", "<qti-p>x</qti-p>")
        assert main(["report", str(path)]) == 1
        assert capsys.readouterr().out == ""

    def test_report_when_expected_id_given_then_overrides_file_name(self, tmp_path, capsys):
        """--expected-id replaces the file-name default."""
        path = write_item(tmp_path, "other.xml", "<qti-p>x</qti-p>")
        assert main(["report", str(path), "--expected-id", "item-1"]) == 0
        assert json.loads(capsys.readouterr().out)["identifier"] == "item-1"

    def test_report_when_highlight_then_code_highlighted(self, tmp_path, capsys):
        """--highlight plugs in the pygments highlighter."""
        path = write_item(
            tmp_path,
            "item-1.qti.xml",
            '<qti-pre><qti-code class="language-python">def f(): pass</qti-code></qti-pre>',
        )

        assert main(["report", str(path), "--highlight"]) == 0

        html = json.loads(capsys.readouterr().out)["question_html"]
        assert 'data-code-lang="python"' in html
        assert "<span" in html


class TestImageRewriting:
    """Tests for asset URL rewriting from the command line."""

    def test_cli_when_asset_base_url_then_images_rewritten(self, tmp_path, capsys):
        """Relative images resolve against --base-path under the URL prefix."""
        path = write_item(tmp_path, "item-1.qti.xml", '<qti-p><qti-img src="images/pic.png" alt="Pic"/></qti-p>')

        exit_code = main(
            [
                "report",
                str(path),
                "--base-path",
                "items/item-1.qti.xml",
                "--asset-base-url",
                "https://cdn.example.com/",
            ]
        )

        assert exit_code == 0
        html = json.loads(capsys.readouterr().out)["question_html"]
        assert 'src="https://cdn.example.com/items/images/pic.png"' in html

    def test_cli_when_asset_base_url_in_environment_then_used(self, tmp_path, capsys, monkeypatch):
        """The asset prefix can come from the environment."""
        monkeypatch.setenv("QTI_RENDER_ASSET_BASE_URL", "/assets")
        path = write_item(tmp_path, "item-1.qti.xml", '<qti-p><qti-img src="pic.png"/></qti-p>')

        assert main(["scoring", str(path), "--base-path", "items/item-1.qti.xml"]) == 0

        html = json.loads(capsys.readouterr().out)["prompt_html"]
        assert 'src="/assets/items/pic.png"' in html
