"""CLI entry point for rendering QTI items.

Usage:
    # Scoring view, filling the item's blanks with responses
    qti-render scoring items/item-1.qti.xml --response "foo" --response "bar"

    # Report view with pygments highlighting
    qti-render report items/item-1.qti.xml --highlight

    # Rewrite relative image sources to an asset server
    qti-render report items/item-1.qti.xml --asset-base-url https://cdn.example.com/
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from qti_render.config import Settings, get_settings
from qti_render.errors import QtiRenderError
from qti_render.highlight import PygmentsHighlighter
from qti_render.images import rewrite_html_image_sources
from qti_render.models import ReportRenderOptions, RewriteImageSourcesOptions
from qti_render.report import render_qti_item_for_report
from qti_render.responses import apply_responses_to_prompt_html
from qti_render.scoring import render_qti_item_for_scoring
from qti_render.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging(verbose=args.verbose, level=settings.log_level)

    item_path = Path(args.item)
    try:
        xml = item_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read {item_path}: {e}")
        return 1

    try:
        if args.mode == "scoring":
            record = _render_scoring(xml, args, settings)
        else:
            record = _render_report(xml, item_path, args, settings)
    except QtiRenderError as e:
        logger.error(f"Failed to render {item_path}: {e}")
        return 1

    base_path = args.base_path or item_path.as_posix()
    asset_base_url = args.asset_base_url if args.asset_base_url is not None else settings.asset_base_url
    if asset_base_url:
        record = _rewrite_images(record, base_path, asset_base_url, settings)

    json.dump(record, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="qti-render",
        description="Render a QTI 3.0 assessment item to scoring or report HTML.",
    )
    subparsers = parser.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("item", help="Path to the QTI item XML file")
    common.add_argument(
        "--base-path",
        help="Package-relative path of the item used to resolve images (default: item path)",
    )
    common.add_argument(
        "--asset-base-url",
        default=None,
        help="Rewrite relative image sources to this URL prefix",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    scoring = subparsers.add_parser("scoring", parents=[common], help="Render for the scoring UI")
    scoring.add_argument(
        "--response",
        action="append",
        default=[],
        help="Response for the next blank (repeat for several blanks)",
    )

    report = subparsers.add_parser("report", parents=[common], help="Render for static reports")
    report.add_argument(
        "--expected-id",
        help="Identifier the item must carry (default: file name up to the first dot)",
    )
    report.add_argument("--highlight", action="store_true", help="Highlight code blocks with pygments")

    return parser.parse_args(argv)


def _render_scoring(xml: str, args: argparse.Namespace, settings: Settings) -> dict:
    parsed = render_qti_item_for_scoring(xml)
    record = parsed.model_dump()
    if args.response:
        record["prompt_html"] = apply_responses_to_prompt_html(
            parsed.prompt_html,
            args.response,
            {"features": settings.html_parser_features},
        )
    return record


def _render_report(xml: str, item_path: Path, args: argparse.Namespace, settings: Settings) -> dict:
    expected_identifier = args.expected_id or item_path.name.split(".", 1)[0]
    highlighter = None
    if args.highlight or settings.highlight_code:
        highlighter = PygmentsHighlighter(
            style=settings.highlight_style,
            noclasses=settings.highlight_inline_styles,
        )
    options = ReportRenderOptions(code_highlighter=highlighter)
    return render_qti_item_for_report(xml, expected_identifier, options).model_dump()


def _rewrite_images(record: dict, base_path: str, asset_base_url: str, settings: Settings) -> dict:
    prefix = asset_base_url.rstrip("/")
    options = RewriteImageSourcesOptions(
        resolve_url=lambda resolved_path, _original_src: f"{prefix}/{resolved_path}",
        features=settings.html_parser_features,
    )
    for key in ("prompt_html", "question_html", "candidate_explanation_html"):
        if record.get(key):
            record[key] = rewrite_html_image_sources(record[key], base_path, options)
    return record


if __name__ == "__main__":
    sys.exit(main())
