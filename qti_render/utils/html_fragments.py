"""Parse and re-serialize rendered HTML fragments with BeautifulSoup."""

from __future__ import annotations

from bs4 import BeautifulSoup


def parse_fragment(html_fragment: str, features: str = "html.parser") -> BeautifulSoup:
    """Parse an HTML fragment with the given BeautifulSoup tree builder."""
    return BeautifulSoup(html_fragment, features)


def serialize_fragment(soup: BeautifulSoup) -> str:
    """Serialize a parsed fragment back to markup.

    Builders that wrap fragments in a full document (lxml, html5lib) get
    the contents of their body back, so the result is always a fragment.
    """
    body = soup.body
    if body is not None:
        return body.decode_contents()
    return soup.decode()
