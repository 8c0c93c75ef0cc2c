"""Drive the Swift toolchain to produce documentation archives.

The generator only reads archives; this module produces them from a Swift
package by emitting symbol graphs with ``swift build`` and converting them
with ``docc``. Each DocC catalog is converted on its own together with its
matching symbol graph, and any graphs left over are converted in one final
pass, because ``docc`` does not associate several catalogs with their
modules reliably in a single run.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import typing as typ
from pathlib import Path

import msgspec

from archive_pages.errors import DoccNotFoundError, SymbolGraphGenerationError

logger = logging.getLogger(__name__)

SYMBOL_GRAPH_SUFFIX = ".symbols.json"
CATALOG_SUFFIX = ".docc"
FALLBACK_DOCC_PATHS = ("/usr/bin/docc", "/usr/local/bin/docc")


class _PackageTarget(msgspec.Struct):
    name: str


class _PackageDescription(msgspec.Struct):
    targets: list[_PackageTarget] = msgspec.field(default_factory=list)


def _run(args: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(  # noqa: S603
        args,
        check=False,
        text=True,
        capture_output=True,
    )


def find_docc() -> str:
    """Return the path of the ``docc`` executable.

    The lookup tries ``xcrun --find docc`` on macOS, then ``PATH``, then
    ``$SWIFT_PATH/docc``, then the usual install locations.

    Raises
    ------
    DoccNotFoundError
        If no candidate exists.
    """
    if sys.platform == "darwin" and (xcrun := shutil.which("xcrun")):
        try:
            found = _run([xcrun, "--find", "docc"])
        except OSError:
            found = None
        if found is not None and found.returncode == 0:
            candidate = found.stdout.strip()
            if candidate and Path(candidate).is_file():
                return candidate

    if on_path := shutil.which("docc"):
        return on_path

    if swift_path := os.environ.get("SWIFT_PATH"):
        candidate = Path(swift_path) / "docc"
        if candidate.is_file():
            return str(candidate)

    for fallback in FALLBACK_DOCC_PATHS:
        if Path(fallback).is_file():
            return fallback

    raise DoccNotFoundError


def emit_symbol_graphs(
    package_dir: Path,
    output_dir: Path,
    *,
    targets: typ.Sequence[str] = (),
    scratch_path: Path | None = None,
) -> Path:
    """Build ``package_dir`` with symbol graph emission into ``output_dir``.

    Raises
    ------
    SymbolGraphGenerationError
        If ``swift`` cannot be started or the build fails.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    args = [
        "swift",
        "build",
        "--package-path",
        str(package_dir),
        "-Xswiftc",
        "-emit-symbol-graph",
        "-Xswiftc",
        "-emit-symbol-graph-dir",
        "-Xswiftc",
        str(output_dir),
    ]
    if scratch_path is not None:
        args += ["--scratch-path", str(scratch_path)]
    for target in targets:
        args += ["--target", target]

    logger.info("emitting symbol graphs for %s", package_dir)
    try:
        result = _run(args)
    except OSError as exc:
        raise SymbolGraphGenerationError(str(exc)) from exc
    if result.returncode != 0:
        diagnostic = (result.stderr or result.stdout or "").strip()
        detail = f"Build failed with exit code {result.returncode}"
        if diagnostic:
            detail = f"{detail}\n{diagnostic}"
        raise SymbolGraphGenerationError(detail)
    logger.debug("%s", result.stdout)
    return output_dir


def package_targets(package_dir: Path) -> frozenset[str]:
    """Return the names of the package's own targets.

    Any failure returns an empty set, which callers treat as "include every
    module".
    """
    try:
        result = _run(
            [
                "swift",
                "package",
                "describe",
                "--package-path",
                str(package_dir),
                "--type",
                "json",
            ]
        )
    except OSError:
        logger.warning("could not run swift package describe; including all modules")
        return frozenset()
    if result.returncode != 0:
        logger.warning("could not determine package targets; including all modules")
        return frozenset()
    try:
        description = msgspec.json.decode(result.stdout, type=_PackageDescription)
    except msgspec.DecodeError:
        logger.warning("unreadable package description; including all modules")
        return frozenset()
    names = frozenset(target.name for target in description.targets)
    logger.info("package targets: %s", ", ".join(sorted(names)))
    return names


def find_catalogs(package_dir: Path) -> list[Path]:
    """Return the DocC catalogs under ``Sources/``, sorted by name.

    Hidden directories are skipped and catalogs are not searched for
    nested catalogs.
    """
    sources = package_dir / "Sources"
    catalogs: list[Path] = []
    if not sources.is_dir():
        return catalogs
    for root, dirs, _files in os.walk(sources):
        dirs[:] = [name for name in dirs if not name.startswith(".")]
        for name in list(dirs):
            if name.endswith(CATALOG_SUFFIX):
                catalogs.append(Path(root) / name)
                dirs.remove(name)
    return sorted(catalogs, key=lambda path: path.name)


def match_symbol_graph(catalog_name: str, directory: Path) -> Path | None:
    """Return the symbol graph in ``directory`` that belongs to a catalog.

    Tries an exact name, then hyphens replaced by underscores, then a
    case-insensitive comparison.
    """
    if not directory.is_dir():
        return None
    graphs = sorted(
        path.name
        for path in directory.iterdir()
        if path.name.endswith(SYMBOL_GRAPH_SUFFIX)
    )
    exact = f"{catalog_name}{SYMBOL_GRAPH_SUFFIX}"
    if exact in graphs:
        return directory / exact
    underscored = f"{catalog_name.replace('-', '_')}{SYMBOL_GRAPH_SUFFIX}"
    if underscored in graphs:
        return directory / underscored
    wanted = catalog_name.lower()
    for name in graphs:
        base = name.removesuffix(SYMBOL_GRAPH_SUFFIX).lower()
        if wanted in (base, base.replace("_", "-")):
            return directory / name
    return None


def convert(
    docc: str,
    symbol_graph_dir: Path,
    output_dir: Path,
    *,
    display_name: str,
    catalog: Path | None = None,
) -> Path:
    """Run ``docc convert`` and return the archive directory.

    A non-zero exit is logged rather than raised; ``docc`` also exits
    non-zero when the documentation merely has warnings.
    """
    args = [docc, "convert"]
    if catalog is not None:
        args.append(str(catalog))
    args += [
        "--additional-symbol-graph-dir",
        str(symbol_graph_dir),
        "--output-path",
        str(output_dir),
        "--emit-digest",
        "--fallback-display-name",
        display_name,
        "--fallback-bundle-identifier",
        display_name,
    ]
    logger.info("converting %s", catalog or symbol_graph_dir)
    result = _run(args)
    if result.returncode != 0:
        logger.warning(
            "docc exited with status %d: %s",
            result.returncode,
            (result.stderr or "").strip(),
        )
    return output_dir


def build_archives(
    package_dir: Path,
    work_dir: Path,
    *,
    symbol_graph_dir: Path | None = None,
    targets: typ.Sequence[str] = (),
    scratch_path: Path | None = None,
) -> list[Path]:
    """Produce one archive per catalog plus one for the remaining graphs.

    Parameters
    ----------
    package_dir : Path
        Root of the Swift package.
    work_dir : Path
        Scratch directory for symbol graphs and archives; the caller owns
        its cleanup.
    symbol_graph_dir : Path, optional
        Pre-generated symbol graphs. When omitted they are emitted with
        ``swift build``.
    targets : Sequence[str]
        Targets to build, and the fallback display name for leftovers.
    scratch_path : Path, optional
        Build directory passed to ``swift build``.
    """
    if symbol_graph_dir is None:
        symbol_graph_dir = emit_symbol_graphs(
            package_dir,
            work_dir / "symbol-graphs",
            targets=targets,
            scratch_path=scratch_path,
        )
    docc = find_docc()
    archives: list[Path] = []
    used: set[str] = set()

    for catalog in find_catalogs(package_dir):
        name = catalog.name.removesuffix(CATALOG_SUFFIX)
        graphs = work_dir / f"sg-{name}"
        graphs.mkdir(parents=True, exist_ok=True)
        if (graph := match_symbol_graph(name, symbol_graph_dir)) is not None:
            shutil.copy2(graph, graphs / graph.name)
            used.add(graph.name)
        archives.append(
            convert(
                docc,
                graphs,
                work_dir / f"archive-{name}.doccarchive",
                display_name=name,
                catalog=catalog,
            )
        )

    remaining: list[Path] = []
    if symbol_graph_dir.is_dir():
        remaining = sorted(
            path
            for path in symbol_graph_dir.iterdir()
            if path.name.endswith(SYMBOL_GRAPH_SUFFIX) and path.name not in used
        )
    if remaining:
        graphs = work_dir / "sg-remaining"
        graphs.mkdir(parents=True, exist_ok=True)
        for path in remaining:
            shutil.copy2(path, graphs / path.name)
        archives.append(
            convert(
                docc,
                graphs,
                work_dir / "archive-remaining.doccarchive",
                display_name=targets[0] if targets else package_dir.resolve().name,
            )
        )
    return archives


__all__ = [
    "build_archives",
    "convert",
    "emit_symbol_graphs",
    "find_catalogs",
    "find_docc",
    "match_symbol_graph",
    "package_targets",
]
