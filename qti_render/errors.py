"""Exceptions raised while rendering QTI assessment items."""

from __future__ import annotations


class QtiRenderError(Exception):
    """Base class for every error raised by qti_render."""


class QtiParseError(QtiRenderError, ValueError):
    """The item XML could not be parsed."""


class QtiStructureError(QtiRenderError, ValueError):
    """A required element (such as qti-item-body) is missing."""


class IdentifierMissingError(QtiRenderError, ValueError):
    """The assessment item carries no identifier attribute."""


class IdentifierMismatchError(QtiRenderError, ValueError):
    """The item identifier differs from the one the caller expected.

    Kept distinct from IdentifierMissingError so callers can tell a malformed
    item apart from a file that belongs to another item.
    """

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Assessment item identifier mismatch: expected {expected} but found {found}"
        )
