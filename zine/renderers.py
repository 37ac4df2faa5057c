"""Markdown rendering for Zine.

Articles and pages are converted with mistune. Tables, footnotes,
strikethrough and task lists are always enabled, raw HTML is passed
through untouched, and fenced code with a known language is highlighted
with Pygments.

Key classes:
- MarkdownRenderer: Implementation of the ContentRenderer protocol.
"""

from __future__ import annotations

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_PLUGINS = ["table", "footnotes", "strikethrough", "task_lists"]


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer that keeps inline HTML and highlights fenced code."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code, or a plain ``<pre>`` block
            when the language is missing or unknown to Pygments.
        """
        lang = info.split(None, 1)[0] if info and info.strip() else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        return super().block_code(code, info)


class MarkdownRenderer:
    """Renders Markdown content to HTML."""

    def __init__(self, plugins: list[str] | None = None):
        self.plugins = list(plugins if plugins is not None else MARKDOWN_PLUGINS)

    def render(self, content: str) -> str:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source content.

        Returns:
            Rendered HTML.
        """
        markdown = mistune.create_markdown(
            renderer=_HighlightRenderer(), plugins=self.plugins
        )
        return markdown(content)
