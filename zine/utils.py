"""Utility functions for Zine.

This module contains small helpers shared by the content model, the
build pipeline and the CLI.

Key functions:
    slugify_segment: Convert a file or directory name to a URL path segment.
    slugify_path: Convert a relative file path to a URL path.
    is_path_segment: Check that a name is a single path segment.
    titleize: Convert filenames to human-readable titles.
    ensure_clean_dir: Ensure a directory exists and is empty.
    copy_static: Mirror a static asset directory into the output tree.
"""

from __future__ import annotations

import hashlib
import re
import shutil
from pathlib import Path, PurePath


MARKDOWN_SUFFIX = ".md"

# Characters kept verbatim in a URL segment; `~` is reserved for hash tags.
_UNSAFE_RE = re.compile(r"[^\w.-]+")


def slugify_segment(name: str, suffix: str = "") -> str:
    """Convert a file or directory name to a URL path segment.

    Names made only of word characters (any script), dots and hyphens
    are kept as written, minus ``suffix``. Any other name, including one
    that lacks ``suffix``, is cleaned and tagged with ``~`` plus a short
    hash of the full original name. Kept names never contain ``~``, so
    two distinct names never share a segment.

    Args:
        name: File or directory name.
        suffix: Extension dropped from names that end with it.

    Returns:
        URL-safe path segment.

    Examples:
        >>> slugify_segment("bar.md", ".md")
        'bar'

        >>> slugify_segment("日本.md", ".md")
        '日本'

        >>> slugify_segment("Bar Baz.md", ".md")  # doctest: +ELLIPSIS
        'Bar-Baz~...'
    """
    base = name
    kept = True
    if suffix:
        if name.endswith(suffix):
            base = name[: -len(suffix)]
        else:
            kept = False
    cleaned = _UNSAFE_RE.sub("-", base).strip("-")
    if kept and cleaned == base and cleaned.strip("."):
        return cleaned
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
    return f"{cleaned}~{digest}"


def slugify_path(path: PurePath) -> str:
    """Convert a relative Markdown file path to a slash-separated URL path.

    Directory segments go through ``slugify_segment`` as they are; the
    file segment also drops its ``.md`` suffix, so ``foo/bar.md``
    becomes ``foo/bar``. Distinct paths give distinct URL paths.

    Args:
        path: Path relative to some content root.

    Returns:
        URL path without leading or trailing slashes.
    """
    parts = list(PurePath(path).parts)
    if not parts:
        return slugify_segment("")
    segments = [slugify_segment(part) for part in parts[:-1]]
    segments.append(slugify_segment(parts[-1], MARKDOWN_SUFFIX))
    return "/".join(segments)


def is_path_segment(value: str) -> bool:
    """Check that ``value`` names exactly one entry inside a directory.

    Args:
        value: Candidate directory or file name.

    Returns:
        False for empty strings, ``.``/``..`` and anything with a separator.
    """
    return bool(value) and value not in (".", "..") and "/" not in value and "\\" not in value


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'

        >>> titleize("getting-started.md")
        'Getting Started'
    """
    base = Path(filename).stem
    if "-" in base:
        parts = base.split("-")
        if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
            base = "-".join(parts[3:])
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def copy_static(source: Path, dest: Path) -> int:
    """Copy a static asset directory into the output tree.

    Args:
        source: Directory holding theme assets (css, images, fonts).
        dest: Target directory inside the output tree.

    Returns:
        Number of files copied; 0 when ``source`` does not exist.
    """
    if not source.is_dir():
        return 0
    shutil.copytree(source, dest, dirs_exist_ok=True)
    return sum(1 for path in source.rglob("*") if path.is_file())
