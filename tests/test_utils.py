from pathlib import PurePath

from zine.utils import (
    copy_static,
    ensure_clean_dir,
    is_path_segment,
    slugify_path,
    slugify_segment,
    titleize,
)


def test_slugify_segment_keeps_safe_names():
    assert slugify_segment("bar.md", ".md") == "bar"
    assert slugify_segment("2024-03-01-big-news.md", ".md") == "2024-03-01-big-news"
    assert slugify_segment("日本.md", ".md") == "日本"
    assert slugify_segment("Hello.md", ".md") != slugify_segment("hello.md", ".md")


def test_slugify_segment_tags_unsafe_names():
    spaced = slugify_segment("Bar Baz.md", ".md")
    assert spaced.startswith("Bar-Baz~")
    assert spaced != slugify_segment("Bar-Baz.md", ".md")
    for name in ("", ".", "..", "---"):
        assert "~" in slugify_segment(name)


def test_slugify_path():
    assert slugify_path(PurePath("foo/bar.md")) == "foo/bar"
    assert slugify_path(PurePath("about.md")) == "about"
    assert slugify_path(PurePath("Guides/Getting Started.md")).startswith("Guides/Getting-Started~")


def test_slugify_path_is_injective():
    names = ["About.md", "about.md", "about.txt", "about", "日本.md", "中文.md", "a b.md", "a-b.md"]
    slugs = [slugify_path(PurePath(name)) for name in names]
    assert len(set(slugs)) == len(names)
    assert slugify_path(PurePath("index.md")) != slugify_path(PurePath("---.md"))
    assert slugify_path(PurePath("..")).startswith("..~")


def test_is_path_segment():
    assert is_path_segment("s1")
    assert is_path_segment("season-2.x")
    for bad in ("", ".", "..", "../x", "a/b", "a\\b"):
        assert not is_path_segment(bad)


def test_titleize():
    assert titleize("2024-01-15-hello-world.md") == "Hello World"
    assert titleize("getting_started.md") == "Getting Started"
    assert titleize("---.md") == "Untitled"


def test_ensure_clean_dir(tmp_path):
    target = tmp_path / "out"
    (target / "nested").mkdir(parents=True)
    (target / "nested" / "old.html").write_text("x", encoding="utf-8")
    ensure_clean_dir(target)
    assert target.is_dir()
    assert list(target.iterdir()) == []


def test_copy_static(tmp_path):
    source = tmp_path / "static"
    (source / "css").mkdir(parents=True)
    (source / "css" / "main.css").write_text("body{}", encoding="utf-8")
    dest = tmp_path / "out" / "static"
    assert copy_static(source, dest) == 1
    assert (dest / "css" / "main.css").read_text(encoding="utf-8") == "body{}"
    assert copy_static(tmp_path / "missing", dest) == 0
