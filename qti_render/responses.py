"""Fill the blanks of a rendered scoring prompt with candidate responses."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

from qti_render.models import HtmlTransformOptions, resolve_options
from qti_render.utils.html_fragments import parse_fragment, serialize_fragment

logger = logging.getLogger(__name__)

BLANK_INPUT_CLASS = "qti-blank-input"
MIN_BLANK_SIZE = 6

ResponseValue = Union[str, Sequence[str], None]


def normalize_responses(response: ResponseValue) -> list[str]:
    """Turn a single response, a sequence of responses or None into a list."""
    if response is None:
        return []
    if isinstance(response, str):
        return [response]
    return list(response)


def compute_blank_size(value: str) -> int:
    """Width of a filled blank: the response length, never below the default."""
    return max(MIN_BLANK_SIZE, len(value))


def apply_responses_to_prompt_html(
    prompt_html: str,
    response: ResponseValue,
    options: HtmlTransformOptions | Mapping[str, Any] | None = None,
) -> str:
    """Fill the blank inputs of scoring prompt HTML with responses.

    Responses are matched to blanks by position in the document, not by
    their ``data-blank`` label. Extra responses and unmatched blanks are
    ignored. The input is returned unchanged, without being parsed, when it
    has no blanks or no responses are given.

    Args:
        prompt_html: HTML produced by the scoring renderer.
        response: One response, an ordered sequence of responses, or None.
            None entries in a sequence leave their blank empty.
        options: HTML parsing options.

    Returns:
        The prompt HTML with ``value`` and ``size`` set on filled blanks.
    """
    if BLANK_INPUT_CLASS not in prompt_html:
        return prompt_html

    responses = normalize_responses(response)
    if not responses:
        return prompt_html

    resolved = resolve_options(options, HtmlTransformOptions)
    soup = parse_fragment(prompt_html, resolved.features)
    blanks = soup.select(f"input.{BLANK_INPUT_CLASS}")
    if not blanks:
        return prompt_html

    filled = 0
    for blank, value in zip(blanks, responses):
        if value is None:
            continue
        blank["value"] = value
        blank["size"] = str(compute_blank_size(value))
        filled += 1

    logger.debug(f"Filled {filled} of {len(blanks)} blank(s) from {len(responses)} response(s)")
    return serialize_fragment(soup)
