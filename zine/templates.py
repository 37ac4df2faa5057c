"""Template rendering engine for Zine.

This module is the render sink of the build: it uses Jinja2 to render a
named template with a context mapping and writes the result into a
destination directory.

Key class:
- TemplateEngine: Implementation of the TemplateRenderer protocol.

Templates are looked up in the project's own ``templates/`` directory
first, then in the layouts shipped with the package, so a zine can
override any of ``index.jinja``, ``season.jinja``, ``article.jinja`` or
``page.jinja`` one file at a time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

__all__ = ["LAYOUTS_DIR", "TemplateEngine"]

LAYOUTS_DIR = Path(__file__).parent / "layouts"


def _css_variables(theme: Any) -> Markup:
    """Render theme colors as CSS custom property declarations.

    Args:
        theme: Theme object exposing color attributes.

    Returns:
        Markup-safe declarations for a ``:root`` block.
    """
    names = ("primary_color", "main_color", "link_color", "secondary_color")
    lines = []
    for name in names:
        value = getattr(theme, name, None)
        if value:
            prop = name.replace("_", "-")
            lines.append(f"--{prop}: {Markup.escape(value)};")
    return Markup("\n".join(lines))


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        template_dirs: Directories searched for templates, in order.
        env: Jinja2 environment.
    """

    def __init__(self, template_dirs: Iterable[Path] = ()):
        """Initialize the template engine.

        Args:
            template_dirs: Project template directories searched before the
                built-in layouts. Missing directories are ignored by Jinja2.
        """
        self.template_dirs = [Path(d) for d in template_dirs] + [LAYOUTS_DIR]
        self.env = Environment(
            loader=FileSystemLoader([str(d) for d in self.template_dirs]),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            keep_trailing_newline=True,
            enable_async=False,
        )
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global functions in the Jinja environment."""
        self.env.globals["css_variables"] = _css_variables

    def render(
        self,
        template_name: str,
        context: Mapping[str, Any],
        dest: Path,
        filename: str = "index.html",
    ) -> Path:
        """Render a named template and write it into ``dest``.

        Args:
            template_name: Template identifier.
            context: Variables to make available in the template.
            dest: Destination directory, created when missing.
            filename: Name of the file written inside ``dest``.

        Returns:
            Path of the written file.
        """
        template = self.env.get_template(template_name)
        rendered = template.render(**context)
        dest.mkdir(parents=True, exist_ok=True)
        target = dest / filename
        with open(target, "w", encoding="utf-8") as f:
            f.write(rendered)
        return target
