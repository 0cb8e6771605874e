"""Relative path resolution for assets referenced by item documents.

Paths are package-relative POSIX paths (the way items reference images
inside a content package), never filesystem paths.
"""

from __future__ import annotations

import posixpath


def resolve_relative_path(base_file_path: str, relative_src: str) -> str | None:
    """Resolve a relative asset reference against the file that contains it.

    Args:
        base_file_path: Path of the referencing document, e.g.
            ``items/item-1.qti.xml``.
        relative_src: The reference as written, e.g. ``images/pic.png``.

    Returns:
        The normalized path (``items/images/pic.png``), or None when the
        reference is empty or climbs above the package root.

    Examples:
        >>> resolve_relative_path("items/q1.xml", "../img/a.png")
        'img/a.png'
        >>> resolve_relative_path("q1.xml", "../a.png") is None
        True
    """
    src = relative_src.strip().replace("\\", "/")
    # Query strings and fragments are not part of the asset path
    src = src.split("#", 1)[0].split("?", 1)[0]
    if not src:
        return None

    base_dir = posixpath.dirname(base_file_path.replace("\\", "/"))
    resolved = posixpath.normpath(posixpath.join(base_dir, src))
    if resolved == ".." or resolved.startswith("../") or resolved == ".":
        return None
    return resolved
