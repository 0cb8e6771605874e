"""Traversal state shared by the scoring and report renderers."""

from __future__ import annotations

from dataclasses import dataclass, replace

from qti_render.utils.markup import escape_html


@dataclass(frozen=True)
class RenderState:
    """Whitespace handling in effect for one node of the traversal.

    Attributes:
        in_pre: The node sits inside a preformatted block.
        preserve_whitespace: Whitespace-only text must be kept even inside
            a preformatted block (set by code elements).
    """

    in_pre: bool = False
    preserve_whitespace: bool = False

    def with_flags(self, in_pre: bool | None = None, preserve_whitespace: bool | None = None) -> RenderState:
        """Return a copy with the given flags replaced."""
        return replace(
            self,
            in_pre=self.in_pre if in_pre is None else in_pre,
            preserve_whitespace=(
                self.preserve_whitespace if preserve_whitespace is None else preserve_whitespace
            ),
        )


ROOT_STATE = RenderState()


def render_text(text: str, state: RenderState) -> str:
    """Render a text node: escaped, or dropped when it is layout whitespace in a pre."""
    if state.in_pre and not state.preserve_whitespace and text.strip() == "":
        return ""
    return escape_html(text)
