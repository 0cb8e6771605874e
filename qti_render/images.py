"""Rewrite relative image sources in rendered HTML."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from qti_render.models import RewriteImageSourcesOptions, resolve_options
from qti_render.utils.html_fragments import parse_fragment, serialize_fragment

logger = logging.getLogger(__name__)


def rewrite_html_image_sources(
    html: str,
    base_file_path: str,
    options: RewriteImageSourcesOptions | Mapping[str, Any],
) -> str:
    """Resolve relative ``<img src>`` values against the item's own path.

    External sources (absolute, protocol-relative, root-relative and data
    URIs by default) are left alone, as are sources the path resolver
    cannot resolve.

    Args:
        html: Rendered HTML fragment.
        base_file_path: Path of the item document the HTML came from.
        options: Rewrite options; ``resolve_url`` is required and receives
            the resolved path and the original source.

    Returns:
        The HTML with rewritten image sources.
    """
    resolved = resolve_options(options, RewriteImageSourcesOptions)
    soup = parse_fragment(html, resolved.features)

    rewritten = 0
    for img in soup.find_all("img", src=True):
        raw_src = img.get("src")
        if not raw_src or resolved.is_external_source(raw_src):
            continue
        resolved_path = resolved.path_resolver(base_file_path, raw_src)
        if not resolved_path:
            logger.debug(f"Could not resolve image source {raw_src!r} from {base_file_path}")
            continue
        img["src"] = resolved.resolve_url(resolved_path, raw_src)
        rewritten += 1

    logger.debug(f"Rewrote {rewritten} image source(s) for {base_file_path}")
    return serialize_fragment(soup)
