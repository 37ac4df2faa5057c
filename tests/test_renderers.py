from zine.protocols import ContentRenderer
from zine.renderers import MARKDOWN_PLUGINS, MarkdownRenderer


def test_markdown_renderer_satisfies_protocol():
    assert isinstance(MarkdownRenderer(), ContentRenderer)
    assert MarkdownRenderer().plugins == MARKDOWN_PLUGINS


def test_heading_has_no_generated_id():
    assert MarkdownRenderer().render("# Hi") == "<h1>Hi</h1>\n"


def test_extensions_are_enabled():
    renderer = MarkdownRenderer()
    table = renderer.render("| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<table>" in table
    assert "<td>1</td>" in table

    assert "<del>gone</del>" in renderer.render("~~gone~~")

    tasks = renderer.render("- [x] done\n- [ ] todo\n")
    assert 'type="checkbox"' in tasks
    assert "checked" in tasks

    notes = renderer.render("Text[^1]\n\n[^1]: The note.\n")
    assert 'class="footnotes"' in notes
    assert "The note." in notes


def test_raw_html_passes_through():
    html = MarkdownRenderer().render('<div class="hero"><span>kept</span></div>\n')
    assert '<div class="hero"><span>kept</span></div>' in html


def test_fenced_code_is_highlighted():
    html = MarkdownRenderer().render("```python\nprint('hi')\n```\n")
    assert 'class="highlight"' in html


def test_unknown_language_falls_back_to_plain_block():
    html = MarkdownRenderer().render("```nosuchlang\na < b\n```\n")
    assert 'class="language-nosuchlang"' in html
    assert "a &lt; b" in html


def test_plugins_can_be_restricted():
    html = MarkdownRenderer(plugins=[]).render("~~kept~~")
    assert "<del>" not in html
