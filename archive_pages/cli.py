"""Cyclopts CLI entrypoint for rendering and previewing documentation sites.

The ``archive-pages`` console script defined here renders documentation
archives into a static HTML site, drives the Swift toolchain to build those
archives for a package first, and serves a finished site on the loopback
interface. Typical usage runs ``archive-pages generate`` locally or in CI and
``archive-pages preview`` to inspect the result.

Examples
--------
Render an existing archive:

>>> from archive_pages.cli import app
>>> app.run(["render", "MyKit.doccarchive", "--output-dir", "site"])  # doctest: +SKIP

Preview the generated site:

>>> from archive_pages.cli import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_OUTPUT_DIR, DEFAULT_PORT
from .config import (
    DependencyPolicy,
    PolicyMode,
    SiteConfig,
    SiteConfigError,
    load_site_config,
)
from .errors import GenerationError
from .generator import ArchiveSiteGenerator
from .server import PreviewServer

if typ.TYPE_CHECKING:
    from .models import GenerationResult

logger = logging.getLogger("archive_pages")

app = App(
    name="archive-pages",
    config=cyclopts.config.Env("INPUT_", command=False),  # type: ignore[unknown-argument]
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: Exception) -> typ.NoReturn:
    print(f"error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc


def _load_config(path: Path | None) -> SiteConfig:
    if path is None:
        return SiteConfig()
    return load_site_config(path)


def _dependency_policy(
    current: DependencyPolicy,
    *,
    include: typ.Sequence[str],
    exclude: typ.Sequence[str],
    include_all: bool,
) -> DependencyPolicy:
    """Return the policy selected by command-line flags, else ``current``."""
    if include_all:
        return DependencyPolicy(PolicyMode.ALL)
    if include:
        return DependencyPolicy(PolicyMode.INCLUDE_ONLY, tuple(include))
    if exclude:
        return DependencyPolicy(PolicyMode.EXCLUDE, tuple(exclude))
    return current


def _report(result: GenerationResult) -> None:
    print(f"wrote {_format_path(result.index_path)}")
    if result.search_index_path is not None:
        print(f"wrote {_format_path(result.search_index_path)}")
    print(
        f"{result.generated_pages} pages: "
        f"{result.modules_documented} modules, "
        f"{result.symbols_documented} symbols, "
        f"{result.articles_generated} articles, "
        f"{result.tutorials_generated} tutorials"
    )
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)


@app.command(help="Render documentation archives into a static HTML site.")
def render(
    archives: typ.Annotated[
        list[Path], Parameter(help="Documentation archive directories")
    ],
    /,
    *,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = None,
    disable_search: typ.Annotated[
        bool,
        Parameter(help="Skip the search index", env_var="INPUT_DISABLE_SEARCH"),
    ] = False,
    footer_html: typ.Annotated[
        str | None,
        Parameter(help="Custom footer HTML", env_var="INPUT_FOOTER_HTML"),
    ] = None,
    jobs: typ.Annotated[
        int | None,
        Parameter(help="Worker threads for rendering", env_var="INPUT_JOBS"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log progress messages", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Render one or more archives into a single site.

    Parameters
    ----------
    archives : list[Path]
        Archive directories; several archives share one merged sidebar.
    output_dir : Path or None, optional
        Override the configured output directory.
    config : Path or None, optional
        Path to an ``archive-pages.yaml`` file; defaults apply without one.
    disable_search : bool, optional
        Omit ``search-index.json`` and the search scripts.
    footer_html : str or None, optional
        Override the footer shown on every page.
    jobs : int or None, optional
        Number of render-node worker threads.
    verbose : bool, optional
        Log at INFO level instead of WARNING.
    """
    try:
        site_config = _load_config(config)
        _configure_logging(verbose=verbose or site_config.verbose)
        site_config = dc.replace(
            site_config,
            output_dir=output_dir or site_config.output_dir,
            include_search=site_config.include_search and not disable_search,
            footer_html=footer_html or site_config.footer_html,
            jobs=jobs or site_config.jobs,
            verbose=verbose or site_config.verbose,
        )
        if site_config.jobs < 1:
            msg = "'jobs' must be at least 1."
            raise SiteConfigError(msg)
        result = ArchiveSiteGenerator(site_config, logger=logger).render_archives(
            archives
        )
    except (GenerationError, SiteConfigError, FileNotFoundError) as exc:
        _fail(exc)
    _report(result)


@app.command(help="Build archives for a Swift package, then render them.")
def generate(
    *,
    package_path: typ.Annotated[
        Path,
        Parameter(help="Swift package directory", env_var="INPUT_PACKAGE_PATH"),
    ] = Path(),
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = None,
    target: typ.Annotated[
        list[str] | None,
        Parameter(help="Target to document (repeatable)", env_var="INPUT_TARGET"),
    ] = None,
    include_dependency: typ.Annotated[
        list[str] | None,
        Parameter(
            help="Document only these dependencies (repeatable)",
            env_var="INPUT_INCLUDE_DEPENDENCY",
        ),
    ] = None,
    exclude_dependency: typ.Annotated[
        list[str] | None,
        Parameter(
            help="Leave these dependencies out (repeatable)",
            env_var="INPUT_EXCLUDE_DEPENDENCY",
        ),
    ] = None,
    include_all_dependencies: typ.Annotated[
        bool,
        Parameter(
            help="Document every dependency",
            env_var="INPUT_INCLUDE_ALL_DEPENDENCIES",
        ),
    ] = False,
    symbol_graph_dir: typ.Annotated[
        Path | None,
        Parameter(
            help="Use pre-generated symbol graphs instead of building",
            env_var="INPUT_SYMBOL_GRAPH_DIR",
        ),
    ] = None,
    scratch_path: typ.Annotated[
        Path | None,
        Parameter(help="Swift build directory", env_var="INPUT_SCRATCH_PATH"),
    ] = None,
    disable_search: typ.Annotated[
        bool,
        Parameter(help="Skip the search index", env_var="INPUT_DISABLE_SEARCH"),
    ] = False,
    verbose: typ.Annotated[
        bool, Parameter(help="Log progress messages", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Run ``swift build`` and ``docc convert``, then render the archives.

    Dependency flags take precedence over the configured
    ``dependency_policy``: ``--include-all-dependencies`` first, then
    ``--include-dependency``, then ``--exclude-dependency``.

    Raises
    ------
    SystemExit
        With status 1 when the toolchain or the configuration fails.
    """
    try:
        site_config = _load_config(config)
        _configure_logging(verbose=verbose or site_config.verbose)
        site_config = dc.replace(
            site_config,
            output_dir=output_dir or site_config.output_dir,
            targets=list(target) if target else site_config.targets,
            dependency_policy=_dependency_policy(
                site_config.dependency_policy,
                include=include_dependency or (),
                exclude=exclude_dependency or (),
                include_all=include_all_dependencies,
            ),
            include_search=site_config.include_search and not disable_search,
            verbose=verbose or site_config.verbose,
        )
        generator = ArchiveSiteGenerator(site_config, logger=logger)
        result = generator.generate(
            package_path,
            symbol_graph_dir=symbol_graph_dir,
            scratch_path=scratch_path,
        )
    except (GenerationError, SiteConfigError, FileNotFoundError) as exc:
        _fail(exc)
    _report(result)


@app.command(help="Serve a generated site on 127.0.0.1.")
def preview(
    *,
    directory: typ.Annotated[
        Path,
        Parameter(help="Site directory to serve", env_var="INPUT_DIRECTORY"),
    ] = Path(DEFAULT_OUTPUT_DIR),
    port: typ.Annotated[
        int, Parameter(help="Port to listen on", env_var="INPUT_PORT")
    ] = DEFAULT_PORT,
    verbose: typ.Annotated[
        bool, Parameter(help="Log every request", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Serve ``directory`` until interrupted.

    Raises
    ------
    SystemExit
        With status 1 when the directory is missing or the port is taken.
    """
    _configure_logging(verbose=verbose)
    if not directory.is_dir():
        _fail(FileNotFoundError(f"Directory '{directory}' not found."))
    try:
        server = PreviewServer(directory, port=port, logger=logger)
    except OSError as exc:
        _fail(exc)
    print(f"serving {_format_path(directory)} at {server.url}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("stopping preview server")
    finally:
        server.shutdown()


def main() -> None:
    """Invoke the Cyclopts application behind the ``archive-pages`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
