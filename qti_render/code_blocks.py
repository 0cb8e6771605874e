"""Post-render passes that normalize and decorate code in report HTML.

The passes run on the serialized fragment rather than on the XML tree
because highlighter output is opaque markup that never existed in the
item document. Each pass leaves markup it cannot match unchanged, and
running a pass on its own output adds nothing new.

Order matters:
1. ``normalize_pre_blocks`` merges the code fragments of a pre into one.
2. ``enhance_code_blocks`` highlights and tags ``<pre><code>`` pairs.
3. ``enhance_inline_code`` tags every other ``<code>``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from qti_render.models import CodeHighlightResult, ReportRenderOptions
from qti_render.utils.markup import (
    add_classes,
    add_or_update_attribute,
    decode_xml_entities,
    has_class,
    parse_attributes,
    split_class_tokens,
)

logger = logging.getLogger(__name__)

PLAIN_LANGUAGE = "plain"
LANGUAGE_DATA_ATTRIBUTES = ("data-lang", "data-language", "data-code-lang")
LANGUAGE_ALIASES = {
    "xml": "html",
    "plaintext": PLAIN_LANGUAGE,
}

_PRE_BLOCK_PATTERN = re.compile(r"<pre\b[^>]*>[\s\S]*?</pre>")
_PRE_OPEN_PATTERN = re.compile(r"^<pre\b[^>]*>")
_PRE_INNER_PATTERN = re.compile(r"<pre\b[^>]*>([\s\S]*?)</pre>")
_CODE_OPEN_PATTERN = re.compile(r"<code\b[^>]*>")
_CODE_TAG_PATTERN = re.compile(r"</?code\b[^>]*>")
_PRE_CODE_PATTERN = re.compile(r"(<pre\b[^>]*>)(\s*)(<code\b[^>]*>)([\s\S]*?)(</code>)")
_LANGUAGE_CLASS_PATTERN = re.compile(r"^(?:language|lang)-([A-Za-z0-9_-]+)$")


# -----------------------------------------------------------------------------
# Language detection
# -----------------------------------------------------------------------------


def detect_code_language(tag_open: str) -> str | None:
    """Detect the language declared on a raw ``<code>`` opening tag.

    Data attributes (``data-lang``, ``data-language``, ``data-code-lang``)
    take precedence over ``language-X`` / ``lang-X`` class tokens.

    Returns:
        The declared language as written, or None.
    """
    attributes = parse_attributes(tag_open)
    for name in LANGUAGE_DATA_ATTRIBUTES:
        if name in attributes:
            if attributes[name].strip():
                return attributes[name].strip()
            break
    for token in split_class_tokens(attributes.get("class")):
        match = _LANGUAGE_CLASS_PATTERN.match(token)
        if match:
            return match.group(1)
    return None


def normalize_language(language: str) -> str:
    """Lowercase a language name and map known aliases."""
    normalized = language.lower()
    return LANGUAGE_ALIASES.get(normalized, normalized)


# -----------------------------------------------------------------------------
# Passes
# -----------------------------------------------------------------------------


def normalize_pre_blocks(html_fragment: str) -> str:
    """Collapse the code fragments of each ``<pre>`` into a single ``<code>``.

    The merged code element keeps the attributes of the first code tag.
    Blocks without code tags are left untouched.
    """

    def merge(match: re.Match[str]) -> str:
        block = match.group(0)
        inner_match = _PRE_INNER_PATTERN.fullmatch(block)
        pre_open = _PRE_OPEN_PATTERN.match(block)
        if inner_match is None or pre_open is None:
            logger.debug(f"Leaving unmatched pre block unchanged: {block[:80]!r}")
            return block
        inner = inner_match.group(1)
        first_code_open = _CODE_OPEN_PATTERN.search(inner)
        if first_code_open is None:
            return block
        content = _CODE_TAG_PATTERN.sub("", inner)
        return f"{pre_open.group(0)}{first_code_open.group(0)}{content}</code></pre>"

    return _PRE_BLOCK_PATTERN.sub(merge, html_fragment)


def _coerce_highlight_result(result: CodeHighlightResult | Mapping[str, str]) -> CodeHighlightResult:
    if isinstance(result, CodeHighlightResult):
        return result
    return CodeHighlightResult.model_validate(dict(result))


def enhance_code_blocks(html_fragment: str, options: ReportRenderOptions) -> str:
    """Highlight and tag every ``<pre><code>`` pair.

    Both tags receive the configured classes and the language attribute.
    With a highlighter configured, the decoded code text is replaced by the
    highlighter's HTML (unless it returns nothing) and its language wins.
    Without one, the language is the declared one, or ``plain``.
    """
    code_block_classes = split_class_tokens(options.code_block_class_name)
    code_classes = split_class_tokens(options.code_block_code_class_name)

    def enhance(match: re.Match[str]) -> str:
        pre_open, whitespace, code_open, content, code_close = match.groups()
        explicit_language = detect_code_language(code_open)
        language = normalize_language(explicit_language) if explicit_language else PLAIN_LANGUAGE

        if options.code_highlighter is not None:
            highlighted = _coerce_highlight_result(
                options.code_highlighter(decode_xml_entities(content), explicit_language)
            )
            if highlighted.language is not None:
                language = normalize_language(highlighted.language)
            if highlighted.html:
                content = highlighted.html

        enhanced_pre = add_or_update_attribute(
            add_classes(pre_open, code_block_classes),
            options.data_code_lang_attribute,
            language,
        )
        enhanced_code = add_or_update_attribute(
            add_classes(code_open, code_classes),
            options.data_code_lang_attribute,
            language,
        )
        return f"{enhanced_pre}{whitespace}{enhanced_code}{content}{code_close}"

    return _PRE_CODE_PATTERN.sub(enhance, html_fragment)


def enhance_inline_code(html_fragment: str, options: ReportRenderOptions) -> str:
    """Tag every ``<code>`` that is not part of an enhanced code block."""
    inline_classes = split_class_tokens(options.inline_code_class_name)
    block_classes = split_class_tokens(options.code_block_code_class_name)

    def enhance(match: re.Match[str]) -> str:
        code_open = match.group(0)
        if block_classes and all(has_class(code_open, token) for token in block_classes):
            return code_open
        enhanced = add_classes(code_open, inline_classes)
        language = detect_code_language(code_open)
        if not language:
            return enhanced
        return add_or_update_attribute(enhanced, options.data_code_lang_attribute, normalize_language(language))

    return _CODE_OPEN_PATTERN.sub(enhance, html_fragment)


def apply_report_passes(html_fragment: str, options: ReportRenderOptions) -> str:
    """Run the three report passes in order."""
    normalized = normalize_pre_blocks(html_fragment)
    with_code_blocks = enhance_code_blocks(normalized, options)
    return enhance_inline_code(with_code_blocks, options)
