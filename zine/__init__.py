"""Zine: a static magazine generator.

A zine is built from a content directory holding a root ``zine.toml``,
one directory per season (each with its own ``zine.toml`` listing the
season's Markdown articles), free-form Markdown pages under ``pages/``
and optional static theme assets.

Every node of the content tree follows the same two-phase entity
contract: ``parse`` reads the node's sources, ``render`` writes its
output through a Jinja2 render sink. The main entry point is the CLI
module, which provides commands for scaffolding, building and serving
a zine.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
