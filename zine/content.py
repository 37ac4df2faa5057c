"""Content model for Zine.

A zine is a tree of entities. The root ``Zine`` owns a ``Theme``, the
``Site`` metadata, an ordered list of ``Season`` objects and the
free-form ``Page`` objects found under ``pages/``. Each season owns the
``Article`` objects declared in its own metadata file.

Key classes:
- Zine: Root of the tree; orchestrates parsing and renders the home page.
- Theme: Colors plus an optional footer template read during parse.
- Season: Reads its article list from metadata and renders a season page.
- Article: Converts its Markdown file and renders itself into the season.
- Page: Free-form Markdown page discovered under ``pages/``.

Parsing runs bottom-up (articles hold their HTML before a season is
considered parsed); rendering runs top-down, each level extending the
context it received before passing it on.
"""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path, PurePath
from typing import Any

from .collections import Context, EntityList
from .entity import BuildEnv, Entity
from .utils import (
    MARKDOWN_SUFFIX,
    is_path_segment,
    slugify_path,
    slugify_segment,
    titleize,
)


class MetadataError(ValueError):
    """Structurally invalid metadata in a ``zine.toml`` file.

    Attributes:
        source_path: Metadata file the error was found in, when known.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path | None, message: str):
        self.source_path = source_path
        self.message = message
        prefix = f"{source_path}: " if source_path else ""
        super().__init__(f"{prefix}{message}")


def _require(data: Mapping[str, Any], key: str, what: str, source: Path | None) -> Any:
    if key not in data:
        raise MetadataError(source, f"{what} is missing required key '{key}'")
    return data[key]


def _expect(value: Any, kind: type | tuple[type, ...], what: str, source: Path | None) -> Any:
    # bool is an int subclass; a season number of `true` is a typo, not 1
    if isinstance(value, bool) and kind is not bool:
        raise MetadataError(source, f"{what} has invalid value {value!r}")
    if not isinstance(value, kind):
        raise MetadataError(source, f"{what} has invalid value {value!r}")
    return value


def _expect_segment(value: str, what: str, source: Path | None) -> str:
    if not is_path_segment(value):
        raise MetadataError(source, f"{what} must be a single path segment, got {value!r}")
    return value


def _table(data: Mapping[str, Any], key: str, source: Path | None) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise MetadataError(source, f"[{key}] must be a table")
    return value


def _array_of_tables(
    data: Mapping[str, Any], key: str, source: Path | None
) -> list[dict[str, Any]]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise MetadataError(source, f"[[{key}]] must be an array of tables")
    return value


@dataclass
class Site:
    """Site-wide metadata handed to templates untouched.

    Attributes:
        url: Public base URL of the zine.
        name: Short name, used in the header.
        title: Title used in ``<title>`` of the home page.
        description: Short description of the zine.
        edit_url: Optional base URL for "edit this page" links.
        extra: Any other keys declared under ``[site]``.
    """

    url: str = ""
    name: str = ""
    title: str = ""
    description: str = ""
    edit_url: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> Site:
        known = {"url", "name", "title", "description", "edit_url"}
        values = {k: _expect(data[k], str, f"site.{k}", source) for k in known if k in data}
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(**values, extra=extra)


@dataclass(frozen=True)
class FooterTemplate:
    """Footer markup: a path relative to the content root until resolved.

    Attributes:
        path: Location of the footer file, relative to the content root.
        text: Raw contents of the file once resolved, else ``None``.
    """

    path: str
    text: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.text is not None

    def resolve(self, source: Path) -> FooterTemplate:
        if self.is_resolved:
            return self
        # Read bytes so line endings survive exactly as written.
        text = (source / self.path).read_bytes().decode("utf-8")
        return FooterTemplate(self.path, text)


@dataclass
class Theme(Entity):
    """Visual settings of the zine.

    Theme only takes part in parsing; the root folds it into the
    template context instead of rendering it on its own.
    """

    primary_color: str = "#2563eb"
    main_color: str = "#ffffff"
    link_color: str = "#2563eb"
    secondary_color: str = "#eeeeee"
    background_image: str | None = None
    footer_template: FooterTemplate | None = None

    @property
    def footer(self) -> str | None:
        """Resolved footer markup, or ``None`` before parse or when unset."""
        if self.footer_template is None:
            return None
        return self.footer_template.text

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> Theme:
        colors = ("primary_color", "main_color", "link_color", "secondary_color")
        values: dict[str, Any] = {
            k: _expect(data[k], str, f"theme.{k}", source) for k in colors if k in data
        }
        if "background_image" in data:
            values["background_image"] = _expect(
                data["background_image"], str, "theme.background_image", source
            )
        if "footer_template" in data:
            path = _expect(data["footer_template"], str, "theme.footer_template", source)
            values["footer_template"] = FooterTemplate(path)
        return cls(**values)

    def parse(self, env: BuildEnv, source: Path) -> None:
        if self.footer_template is not None:
            self.footer_template = self.footer_template.resolve(source)


@dataclass
class Article(Entity):
    """A Markdown article declared in a season's metadata file.

    Attributes:
        file: Markdown file, relative to the season directory.
        title: Article title; defaults to a title derived from ``file``.
        author: Optional author name.
        cover: Optional cover image URL.
        pub_date: Optional publication date.
        publish: Unpublished articles are parsed but not rendered.
        slug: Output filename stem; defaults to the file name without
            its `.md` suffix, made URL-safe.
        extra: Any other keys declared for the article.
        html: Rendered HTML, empty until parse.
    """

    file: str
    title: str = ""
    author: str | None = None
    cover: str | None = None
    pub_date: date | None = None
    publish: bool = True
    slug: str = ""
    extra: dict[str, Any] = field(default_factory=dict)
    html: str = ""

    def __post_init__(self):
        if not self.slug:
            self.slug = slugify_segment(PurePath(self.file).name, MARKDOWN_SUFFIX)
        if not self.title:
            self.title = titleize(PurePath(self.file).name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> Article:
        file = _expect(_require(data, "file", "article", source), str, "article.file", source)
        values: dict[str, Any] = {"file": file}
        for key in ("title", "author", "cover", "slug"):
            if key in data:
                values[key] = _expect(data[key], str, f"article.{key}", source)
        if "publish" in data:
            values["publish"] = _expect(data["publish"], bool, "article.publish", source)
        if "pub_date" in data:
            values["pub_date"] = _parse_date(data["pub_date"], source)
        known = {"file", "title", "author", "cover", "slug", "publish", "pub_date", "html"}
        values["extra"] = {k: v for k, v in data.items() if k not in known}
        if "slug" in values:
            _expect_segment(values["slug"], "article.slug", source)
        return cls(**values)

    @property
    def output_name(self) -> str:
        return f"{self.slug}.html"

    def parse(self, env: BuildEnv, source: Path) -> None:
        markdown = (source / self.file).read_text(encoding="utf-8")
        self.html = env.markdown.render(markdown)

    def render(self, env: BuildEnv, context: Context, dest: Path) -> None:
        if not self.publish:
            return
        context = context.insert("article", self)
        env.renderer.render(env.conventions.article_template, context, dest, self.output_name)


def _parse_date(value: Any, source: Path | None) -> date:
    # TOML datetimes are dates too; keep only the calendar day.
    if isinstance(value, date):
        return value if type(value) is date else value.date()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise MetadataError(
                source, f"article.pub_date has invalid value {value!r}"
            ) from None
    raise MetadataError(source, f"article.pub_date has invalid value {value!r}")


def _check_article_outputs(articles: Iterable[Article], index_file: str, source: Path) -> None:
    """Reject articles that would write over the season page or each other."""
    seen: dict[str, str] = {}
    for article in articles:
        if article.output_name == index_file:
            raise MetadataError(
                source, f"article {article.file!r} would overwrite the season page {index_file}"
            )
        if article.slug in seen:
            raise MetadataError(
                source,
                f"article slug {article.slug!r} of {article.file!r} is already used by "
                f"{seen[article.slug]!r}",
            )
        seen[article.slug] = article.file


@dataclass
class Season(Entity):
    """A numbered issue of the zine grouping a set of articles.

    Attributes:
        slug: Output directory name of the season.
        number: Sort key; seasons are ordered ascending after parse.
        path: Source directory, relative to the content root.
        title: Display title.
        articles: Articles declared in the season's metadata file.
    """

    slug: str
    number: int
    path: str
    title: str = ""
    articles: EntityList[Article] = field(default_factory=EntityList)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> Season:
        slug = _expect(_require(data, "slug", "season", source), str, "season.slug", source)
        _expect_segment(slug, "season.slug", source)
        number = _expect(
            _require(data, "number", "season", source), int, "season.number", source
        )
        path = _expect(_require(data, "path", "season", source), str, "season.path", source)
        title = _expect(data.get("title", ""), str, "season.title", source)
        return cls(slug=slug, number=number, path=path, title=title)

    @property
    def published_articles(self) -> list[Article]:
        return [article for article in self.articles if article.publish]

    def parse(self, env: BuildEnv, source: Path) -> None:
        directory = source / self.path
        metadata_path = directory / env.conventions.metadata_file
        with open(metadata_path, "rb") as f:
            payload = tomllib.load(f)
        articles = EntityList(
            Article.from_dict(entry, metadata_path)
            for entry in _array_of_tables(payload, "article", metadata_path)
        )
        _check_article_outputs(articles, env.conventions.index_file, metadata_path)
        self.articles = articles
        self.articles.parse(env, directory)

    def render(self, env: BuildEnv, context: Context, dest: Path) -> None:
        context = context.insert("season", self)
        target = dest / self.slug
        env.renderer.render(
            env.conventions.season_template, context, target, env.conventions.index_file
        )
        self.articles.render(env, context, target)


@dataclass
class Page(Entity):
    """A free-form Markdown page found under ``pages/``.

    Pages are created by ``Zine.parse`` while it walks the pages
    directory, so they have no parse step of their own.

    Attributes:
        file_path: Source path relative to the pages directory.
        html: Rendered HTML.
    """

    file_path: PurePath
    html: str = ""

    @property
    def slug(self) -> str:
        return slugify_path(self.file_path)

    def render(self, env: BuildEnv, context: Context, dest: Path) -> None:
        context = context.insert("content", self.html).insert("page", self)
        env.renderer.render(
            env.conventions.page_template,
            context,
            dest / self.slug,
            env.conventions.index_file,
        )


@dataclass
class Zine(Entity):
    """Root of the content tree.

    Attributes:
        site: Site metadata.
        theme: Theme settings.
        seasons: Seasons, sorted by number after parse.
        pages: Free-form pages in walk order.
    """

    site: Site = field(default_factory=Site)
    theme: Theme = field(default_factory=Theme)
    seasons: EntityList[Season] = field(default_factory=EntityList)
    pages: EntityList[Page] = field(default_factory=EntityList)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> Zine:
        """Build an unparsed zine from the root metadata table.

        Args:
            data: Decoded contents of the root ``zine.toml``.
            source: Path of the metadata file, for error messages.

        Returns:
            Zine holding its site, theme and season declarations.

        Raises:
            MetadataError: If a section has the wrong shape or a season
                lacks a required key.
        """
        return cls(
            site=Site.from_dict(_table(data, "site", source), source),
            theme=Theme.from_dict(_table(data, "theme", source), source),
            seasons=EntityList(
                Season.from_dict(entry, source)
                for entry in _array_of_tables(data, "season", source)
            ),
        )

    @property
    def articles(self) -> list[Article]:
        return [article for season in self.seasons for article in season.articles]

    def parse(self, env: BuildEnv, source: Path) -> None:
        self._check_season_slugs(env, source)
        self.theme.parse(env, source)
        self.seasons.parse(env, source)
        self.seasons.sort_by(lambda season: season.number)
        self.pages = self._load_pages(env, source / env.conventions.pages_dir)

    def _check_season_slugs(self, env: BuildEnv, source: Path) -> None:
        """Reject season slugs that would share an output directory."""
        metadata_path = source / env.conventions.metadata_file
        seen: set[str] = set()
        for season in self.seasons:
            _expect_segment(season.slug, "season.slug", metadata_path)
            if season.slug == env.conventions.page_output_dir:
                raise MetadataError(
                    metadata_path,
                    f"season slug {season.slug!r} is reserved for free-form pages",
                )
            if season.slug in seen:
                raise MetadataError(
                    metadata_path, f"season slug {season.slug!r} is used more than once"
                )
            seen.add(season.slug)

    def _load_pages(self, env: BuildEnv, page_dir: Path) -> EntityList[Page]:
        """Convert every file below ``page_dir`` into a Page.

        Args:
            env: Build collaborators.
            page_dir: Root of the free-form pages; may be absent.

        Returns:
            Pages in lexicographic path order.
        """
        pages: EntityList[Page] = EntityList()
        if not page_dir.exists():
            return pages
        for path in sorted(page_dir.rglob("*")):
            if not path.is_file():
                continue
            file_path = path.relative_to(page_dir)
            html = env.markdown.render(path.read_text(encoding="utf-8"))
            pages.append(Page(file_path=file_path, html=html))
        return pages

    def render(self, env: BuildEnv, context: Context, dest: Path) -> None:
        context = context.insert("theme", self.theme).insert("site", self.site)
        self.seasons.render(env, context, dest)
        self.pages.render(env, context, dest / env.conventions.page_output_dir)
        # The home page lists every season, so it is rendered last.
        context = context.insert("seasons", self.seasons)
        env.renderer.render(
            env.conventions.index_template, context, dest, env.conventions.index_file
        )
