"""The two-phase entity contract shared by every node of a zine.

Every content node (the zine itself, its theme, seasons, articles and
free-form pages) is an ``Entity``. ``parse`` pulls the node's data in
from the content directory; ``render`` pushes it out through the render
sink. Both default to no-ops so a node only overrides the phase it
takes part in.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .collections import Context
    from .protocols import ContentRenderer, TemplateRenderer


@dataclass(frozen=True)
class Conventions:
    """Fixed file names and template identifiers used while building.

    Attributes:
        metadata_file: Metadata filename at the content root and in each season.
        pages_dir: Directory under the content root holding free-form pages.
        page_output_dir: Output subdirectory receiving rendered pages.
        index_file: File written for the home, season and page outputs.
        index_template: Template for the home page.
        season_template: Template for a season page.
        article_template: Template for an article.
        page_template: Template for a free-form page.
    """

    metadata_file: str = "zine.toml"
    pages_dir: str = "pages"
    page_output_dir: str = "page"
    index_file: str = "index.html"
    index_template: str = "index.jinja"
    season_template: str = "season.jinja"
    article_template: str = "article.jinja"
    page_template: str = "page.jinja"


DEFAULT_CONVENTIONS = Conventions()


@dataclass
class BuildEnv:
    """Collaborators handed down the tree during parse and render.

    Attributes:
        markdown: Converter turning Markdown into HTML.
        renderer: Render sink writing templates to disk.
        conventions: File and template names.
    """

    markdown: ContentRenderer
    renderer: TemplateRenderer
    conventions: Conventions = DEFAULT_CONVENTIONS


class Entity:
    """A content node taking part in the parse/render traversal."""

    def parse(self, env: BuildEnv, source: Path) -> None:
        """Populate this node from files under ``source``.

        Args:
            env: Build collaborators.
            source: Directory the node resolves its own files against.
        """

    def render(self, env: BuildEnv, context: Context, dest: Path) -> None:
        """Write this node's output below ``dest``.

        Args:
            env: Build collaborators.
            context: Bindings accumulated by the node's ancestors.
            dest: Output directory assigned by the parent.
        """
