"""Protocol definitions for Zine.

The content tree never talks to mistune or Jinja2 directly. It receives
collaborators satisfying these protocols through a ``BuildEnv`` so that
tests can drive the tree with recording fakes.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for converting Markdown source to HTML."""

    @abstractmethod
    def render(self, content: str) -> str:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source text.

        Returns:
            Rendered HTML.
        """
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Protocol for the render sink.

    Implementations turn a template name and a context mapping into a
    file written inside a destination directory. The content tree only
    supplies names and data; it never inspects templates.
    """

    @abstractmethod
    def render(
        self,
        template_name: str,
        context: Mapping[str, Any],
        dest: Path,
        filename: str = "index.html",
    ) -> Path:
        """Render a named template into ``dest``.

        Args:
            template_name: Template identifier (e.g. ``season.jinja``).
            context: Values made visible to the template.
            dest: Destination directory, created when missing.
            filename: Name of the file written inside ``dest``.

        Returns:
            Path of the written file.
        """
        ...
