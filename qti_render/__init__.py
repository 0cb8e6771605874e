"""Render QTI 3.0 assessment items to scoring and report HTML."""

from qti_render.errors import (
    IdentifierMismatchError,
    IdentifierMissingError,
    QtiParseError,
    QtiRenderError,
    QtiStructureError,
)
from qti_render.extraction import extract_choices, extract_rubric_criteria
from qti_render.images import rewrite_html_image_sources
from qti_render.models import (
    ChoiceOption,
    CodeHighlightResult,
    HtmlTransformOptions,
    ParsedItemForReport,
    ParsedItemForScoring,
    ReportRenderOptions,
    RewriteImageSourcesOptions,
    RubricCriterion,
    ScoringRenderOptions,
)
from qti_render.report import render_qti_item_for_report
from qti_render.responses import apply_responses_to_prompt_html
from qti_render.scoring import render_qti_item_for_scoring

__all__ = [
    # Renderers
    "render_qti_item_for_scoring",
    "render_qti_item_for_report",
    # Post-processing passes
    "apply_responses_to_prompt_html",
    "rewrite_html_image_sources",
    # Extraction
    "extract_rubric_criteria",
    "extract_choices",
    # Models
    "RubricCriterion",
    "ChoiceOption",
    "CodeHighlightResult",
    "ParsedItemForScoring",
    "ParsedItemForReport",
    "ScoringRenderOptions",
    "ReportRenderOptions",
    "HtmlTransformOptions",
    "RewriteImageSourcesOptions",
    # Errors
    "QtiRenderError",
    "QtiParseError",
    "QtiStructureError",
    "IdentifierMissingError",
    "IdentifierMismatchError",
]
