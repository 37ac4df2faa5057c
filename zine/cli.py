"""Command-line interface for Zine.

This module defines the CLI commands using Click framework.

Commands:
- new: Scaffold a new zine.
- build: Build the zine into the output directory.
- serve: Run development server with live reload.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import click

from . import __version__

# Path to the files copied by `zine new`
_SKELETON_DIR = Path(__file__).parent / "skeleton"


@click.group()
@click.version_option(version=__version__, prog_name="zine")
def cli():
    """Zine: build a magazine from Markdown and TOML."""


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new zine."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New zine created at {target}")


@cli.command()
@click.argument(
    "source",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (defaults to SOURCE/build)",
)
def build(source: Path, dest: Path | None):
    """Build the zine into the output directory."""
    from .build import BuildError, build_zine

    try:
        result = build_zine(source, dest)
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(
            click.style(f"  File: {_display_path(exc.source_path, source)}", fg="yellow"),
            err=True,
        )
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    zine = result.zine
    click.echo(
        f"Built {len(zine.seasons)} seasons, {len(zine.articles)} articles "
        f"and {len(zine.pages)} pages into {result.output_dir}"
    )


@cli.command()
@click.argument(
    "source",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--port",
    type=int,
    default=3000,
    show_default=True,
    help="Port to run the dev server",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (defaults to PORT + 1)",
)
def serve(source: Path, port: int, ws_port: int | None):
    """Run dev server with live reload."""
    from .server import DevServer

    server = DevServer(source.resolve(), http_port=port, ws_port=ws_port)
    server.start()


def _display_path(path: Path, root: Path) -> Path:
    """Return ``path`` relative to ``root`` when it lies inside it."""
    try:
        return path.resolve().relative_to(root.resolve())
    except ValueError:
        return path


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Create the directory structure and files for a new zine.

    Args:
        root: Root directory for the new zine.
    """
    for src_path in _SKELETON_DIR.rglob("*"):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(_SKELETON_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
