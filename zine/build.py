"""Zine building functionality.

This module wires the content tree to its collaborators and drives a
full build: load the root metadata, parse the tree, render it and copy
static theme assets.

Key functions:
- build_zine: Main function to build the entire zine.
- load_config: Loads the unparsed content tree from the root zine.toml.
- create_env: Creates the default Markdown/Jinja2 collaborators.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from jinja2 import TemplateSyntaxError

from .collections import Context
from .content import MetadataError, Zine
from .entity import DEFAULT_CONVENTIONS, BuildEnv, Conventions
from .renderers import MarkdownRenderer
from .templates import TemplateEngine
from .utils import copy_static, ensure_clean_dir

DEFAULT_OUTPUT_DIR = "build"


class BuildError(Exception):
    """Error during a zine build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class BuildResult:
    """Result of a zine build operation.

    Attributes:
        zine: The parsed content tree.
        output_dir: Directory where the zine was built.
    """

    zine: Zine
    output_dir: Path


def load_config(source: Path, conventions: Conventions = DEFAULT_CONVENTIONS) -> Zine:
    """Load the root metadata file into an unparsed zine.

    Args:
        source: Content root of the zine.
        conventions: File and template names.

    Returns:
        Zine with site, theme and season declarations filled in.

    Raises:
        FileNotFoundError: If the root metadata file is missing.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        MetadataError: If the file does not describe a zine.
    """
    config_path = source / conventions.metadata_file
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return Zine.from_dict(data, config_path)


def create_env(source: Path, conventions: Conventions = DEFAULT_CONVENTIONS) -> BuildEnv:
    """Create the default build collaborators for a content root.

    Args:
        source: Content root; its ``templates/`` directory overrides the
            built-in layouts.
        conventions: File and template names.

    Returns:
        BuildEnv using mistune and Jinja2.
    """
    return BuildEnv(
        markdown=MarkdownRenderer(),
        renderer=TemplateEngine([source / "templates"]),
        conventions=conventions,
    )


def build_zine(
    source: Path,
    dest: Path | None = None,
    clean_output: bool = True,
    conventions: Conventions = DEFAULT_CONVENTIONS,
) -> BuildResult:
    """Build the entire zine.

    Parsing finishes before anything is written, so a content error never
    leaves a half-built output directory behind.

    Args:
        source: Content root of the zine.
        dest: Output directory; defaults to ``<source>/build``.
        clean_output: Whether to wipe the output directory before building.
        conventions: File and template names.

    Returns:
        BuildResult containing the parsed tree and the output directory.

    Raises:
        BuildError: If loading, parsing or rendering fails.
    """
    source = Path(source)
    output_dir = Path(dest) if dest is not None else source / DEFAULT_OUTPUT_DIR
    env = create_env(source, conventions)

    try:
        zine = load_config(source, conventions)
        zine.parse(env, source)
    except Exception as exc:
        raise BuildError(_error_path(exc, source), _format_error_message(exc), exc) from exc

    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    try:
        zine.render(env, Context(), output_dir)
    except TemplateSyntaxError as exc:
        raise BuildError(
            Path(exc.filename) if exc.filename else source,
            f"Template syntax error on line {exc.lineno}: {exc.message}",
            exc,
        ) from exc
    except Exception as exc:
        raise BuildError(_error_path(exc, source), _format_error_message(exc), exc) from exc

    copy_static(source / "static", output_dir / "static")
    return BuildResult(zine=zine, output_dir=output_dir)


def _error_path(exc: Exception, source: Path) -> Path:
    """Return the file an exception points at, falling back to ``source``."""
    if isinstance(exc, OSError) and exc.filename:
        return Path(exc.filename)
    if isinstance(exc, MetadataError) and exc.source_path:
        return exc.source_path
    return source


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if isinstance(exc, FileNotFoundError):
        return "File not found"
    if isinstance(exc, tomllib.TOMLDecodeError):
        return f"Invalid TOML: {error_msg}"
    if isinstance(exc, MetadataError):
        return exc.message
    if error_type == "TemplateNotFound":
        return f"Template not found: {error_msg}"
    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"

    return f"{error_type}: {error_msg}"
