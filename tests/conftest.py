from pathlib import Path

import pytest

from zine.entity import BuildEnv
from zine.renderers import MarkdownRenderer


class RecordingRenderer:
    """Render sink that records calls instead of writing templates."""

    def __init__(self):
        self.calls = []

    def render(self, template_name, context, dest, filename="index.html"):
        self.calls.append((template_name, dict(context), Path(dest), filename))
        return Path(dest) / filename

    def templates(self):
        return [call[0] for call in self.calls]


ROOT_TOML = """
[site]
name = "Weekly"
title = "Weekly Zine"

[theme]
primary_color = "#123456"
footer_template = "footer.html"

[[season]]
slug = "s2"
number = 2
title = "Second"
path = "content/second"

[[season]]
slug = "s1"
number = 1
title = "First"
path = "content/first"
"""


def write_season(root: Path, path: str, articles: dict[str, str], extra: str = "") -> Path:
    season_dir = root / path
    season_dir.mkdir(parents=True, exist_ok=True)
    entries = [f'[[article]]\nfile = "{name}"\n' for name in articles]
    (season_dir / "zine.toml").write_text(extra + "\n".join(entries), encoding="utf-8")
    for name, body in articles.items():
        (season_dir / name).write_text(body, encoding="utf-8")
    return season_dir


def create_zine(tmp_path: Path) -> Path:
    root = tmp_path / "zine"
    root.mkdir()
    (root / "zine.toml").write_text(ROOT_TOML, encoding="utf-8")
    (root / "footer.html").write_text("<p>footer</p>\n", encoding="utf-8")
    write_season(root, "content/first", {"a.md": "# Hi", "b.md": "Second *article*"})
    write_season(root, "content/second", {"intro.md": "# Intro"})
    (root / "pages" / "foo").mkdir(parents=True)
    (root / "pages" / "about.md").write_text("# About", encoding="utf-8")
    (root / "pages" / "foo" / "bar.md").write_text("# Bar", encoding="utf-8")
    return root


@pytest.fixture
def recorder():
    return RecordingRenderer()


@pytest.fixture
def env(recorder):
    return BuildEnv(markdown=MarkdownRenderer(), renderer=recorder)


@pytest.fixture
def zine_root(tmp_path):
    return create_zine(tmp_path)
