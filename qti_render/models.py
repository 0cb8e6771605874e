"""Pydantic models for QTI item rendering.

Contains all data models for:
- Scoring metadata extracted from an item (rubric criteria, choices)
- Parsed item records returned by the scoring and report renderers
- Option records for both renderers and the HTML post-processing passes
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, Field

from qti_render.utils.paths import resolve_relative_path

# =============================================================================
# Default renderers
# =============================================================================

_EXTERNAL_SOURCE_PATTERN = re.compile(r"^(?:[a-z]+:)?//", re.IGNORECASE)


def default_blank_renderer(index: int) -> str:
    """Render a disabled text input standing for blank number `index`."""
    return (
        f'<input class="qti-blank-input" data-blank="{index}" type="text" size="6" '
        f'disabled aria-label="blank {index}" />'
    )


def default_extended_text_renderer() -> str:
    """Render the placeholder shown instead of a long-answer box."""
    return '<span class="qti-extended-placeholder">（記述）</span>'


def default_is_external_source(src: str) -> bool:
    """Return True for URLs that must not be resolved against the item path.

    Scheme-prefixed and protocol-relative URLs, data URIs and root-relative
    paths are external.
    """
    return bool(_EXTERNAL_SOURCE_PATTERN.match(src)) or src.startswith("data:") or src.startswith("/")


# =============================================================================
# Extracted scoring metadata
# =============================================================================

class RubricCriterion(BaseModel):
    """One point-weighted line of the scorer rubric."""

    index: int
    points: float = 0
    text: str = ""

    class Config:
        frozen = True


class ChoiceOption(BaseModel):
    """One simple choice of an item, in document order."""

    identifier: str = ""
    text: str = ""

    class Config:
        frozen = True


class CodeHighlightResult(BaseModel):
    """Result returned by a code highlighter callback."""

    language: Optional[str] = None
    html: str = ""


# =============================================================================
# Parsed item records
# =============================================================================

class ParsedItemForScoring(BaseModel):
    """An item rendered for the interactive scoring UI."""

    identifier: str
    title: str
    prompt_html: str
    rubric_criteria: list[RubricCriterion] = Field(default_factory=list)
    choices: list[ChoiceOption] = Field(default_factory=list)
    candidate_explanation_html: Optional[str] = None

    class Config:
        frozen = True


class ParsedItemForReport(BaseModel):
    """An item rendered as static report markup."""

    identifier: str
    title: str
    question_html: str
    rubric_criteria: list[RubricCriterion] = Field(default_factory=list)
    item_max_score: float = 0
    choices: list[ChoiceOption] = Field(default_factory=list)

    class Config:
        frozen = True


# =============================================================================
# Render options
# =============================================================================

class ScoringRenderOptions(BaseModel):
    """Options for the scoring renderer."""

    blank_renderer: Callable[[int], str] = default_blank_renderer
    extended_text_renderer: Callable[[], str] = default_extended_text_renderer
    choice_list_class_name: str = "qti-choice-list"
    pre_with_blanks_class_name: str = "qti-pre-with-blanks"

    class Config:
        extra = "forbid"
        frozen = True


class ReportRenderOptions(BaseModel):
    """Options for the report renderer and its post-render passes."""

    cloze_input_html: str = "<input class=cloze-input type=text readonly aria-label=blank>"
    choice_wrapper_class_name: str = "choice-interaction"
    code_block_class_name: str = "code-block hljs"
    code_block_code_class_name: str = "code-block-code"
    inline_code_class_name: str = "code-inline"
    data_code_lang_attribute: str = "data-code-lang"
    item_body_wrapper_class_name: str = "item-body"
    # (code, explicit_language) -> CodeHighlightResult or a mapping with the same keys
    code_highlighter: Optional[Callable[[str, Optional[str]], Any]] = None

    class Config:
        extra = "forbid"
        frozen = True


class HtmlTransformOptions(BaseModel):
    """Options shared by the passes that parse rendered HTML."""

    # BeautifulSoup tree builder ("html.parser", "lxml", "html5lib", ...)
    features: str = "html.parser"

    class Config:
        extra = "forbid"
        frozen = True


class RewriteImageSourcesOptions(HtmlTransformOptions):
    """Options for rewriting relative image sources."""

    resolve_url: Callable[[str, str], str]
    is_external_source: Callable[[str], bool] = default_is_external_source
    path_resolver: Callable[[str, str], Optional[str]] = resolve_relative_path


OptionsT = TypeVar("OptionsT", bound=BaseModel)


def resolve_options(
    options: OptionsT | Mapping[str, Any] | None,
    options_class: type[OptionsT],
) -> OptionsT:
    """Return an options record, filling unset fields with defaults.

    Args:
        options: A record, a mapping of field names, or None.
        options_class: The expected record type.

    Returns:
        An instance of options_class.

    Raises:
        pydantic.ValidationError: If the mapping names unknown fields or
            carries values of the wrong type.
    """
    if options is None:
        return options_class()
    if isinstance(options, options_class):
        return options
    return options_class.model_validate(dict(options))
