"""Pygments-backed code highlighter for report rendering.

``PygmentsHighlighter`` instances plug into
``ReportRenderOptions.code_highlighter``.
"""

from __future__ import annotations

import logging
from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from qti_render.code_blocks import PLAIN_LANGUAGE
from qti_render.models import CodeHighlightResult

logger = logging.getLogger(__name__)


class PygmentsHighlighter:
    """Highlights code snippets into bare token spans."""

    def __init__(self, style: str = "default", noclasses: bool = False, guess: bool = True):
        """Initialize the highlighter.

        Args:
            style: Pygments style name.
            noclasses: Emit inline styles instead of CSS classes.
            guess: Guess the lexer from the code when no language is declared.
        """
        self.guess = guess
        # nowrap: the spans go inside the existing <code> element
        self.formatter = HtmlFormatter(style=style, noclasses=noclasses, nowrap=True)

    def __call__(self, code: str, explicit_language: Optional[str]) -> CodeHighlightResult:
        lexer = self._select_lexer(code, explicit_language)
        html = highlight(code, lexer, self.formatter)
        # Pygments always terminates its output with a newline
        if not code.endswith("\n") and html.endswith("\n"):
            html = html[:-1]
        return CodeHighlightResult(language=self._language_of(lexer), html=html)

    def _select_lexer(self, code: str, explicit_language: Optional[str]) -> Lexer:
        if explicit_language:
            try:
                return get_lexer_by_name(explicit_language.strip().lower())
            except ClassNotFound:
                logger.debug(f"No lexer for language {explicit_language!r}, using plain text")
                return TextLexer()
        if self.guess and code.strip():
            try:
                return guess_lexer(code)
            except ClassNotFound:
                logger.debug("Could not guess a lexer, using plain text")
        return TextLexer()

    @staticmethod
    def _language_of(lexer: Lexer) -> str:
        if isinstance(lexer, TextLexer) or not lexer.aliases:
            return PLAIN_LANGUAGE
        return lexer.aliases[0]
