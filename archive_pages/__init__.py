"""Render documentation archives into static, cross-linked HTML sites.

This package exposes the CLI entry points used by the ``archive-pages``
console script to render archives, run the upstream toolchain for a package,
and preview the generated site over a loopback HTTP server.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from archive_pages import main
>>> main()  # doctest: +SKIP
>>> from archive_pages import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
