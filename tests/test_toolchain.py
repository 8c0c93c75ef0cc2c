"""Unit tests for the Swift toolchain wrappers with stubbed subprocesses."""

from __future__ import annotations

import json
import subprocess
import typing as typ

import pytest

from archive_pages import toolchain
from archive_pages.errors import DoccNotFoundError, SymbolGraphGenerationError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


def _completed(
    returncode: int = 0, stdout: str = "", stderr: str = ""
) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)


def test_symbol_graph_failure_raises_typed_error(
    tmp_path: Path, mocker: MockerFixture
) -> None:
    """A failing build surfaces its exit code and diagnostic."""
    run = mocker.patch(
        "archive_pages.toolchain.subprocess.run",
        return_value=_completed(1, stderr="error: no such module 'Foo'"),
    )
    with pytest.raises(SymbolGraphGenerationError) as excinfo:
        toolchain.emit_symbol_graphs(
            tmp_path, tmp_path / "graphs", targets=["MyKit"], scratch_path=tmp_path
        )
    assert "Build failed with exit code 1" in excinfo.value.detail
    assert "no such module 'Foo'" in excinfo.value.detail
    args = run.call_args.args[0]
    assert args[:2] == ["swift", "build"]
    assert "-emit-symbol-graph" in args
    assert args[args.index("--target") + 1] == "MyKit"
    assert args[args.index("--scratch-path") + 1] == str(tmp_path)


def test_missing_swift_raises_typed_error(tmp_path: Path, mocker: MockerFixture) -> None:
    """Failing to start swift is a symbol graph error, not an OSError."""
    mocker.patch(
        "archive_pages.toolchain.subprocess.run",
        side_effect=FileNotFoundError("swift"),
    )
    with pytest.raises(SymbolGraphGenerationError):
        toolchain.emit_symbol_graphs(tmp_path, tmp_path / "graphs")


def test_package_targets_parses_description(
    tmp_path: Path, mocker: MockerFixture
) -> None:
    """Target names come from ``swift package describe``."""
    description = {"name": "MyKit", "targets": [{"name": "MyKit"}, {"name": "Core"}]}
    mocker.patch(
        "archive_pages.toolchain.subprocess.run",
        return_value=_completed(stdout=json.dumps(description)),
    )
    assert toolchain.package_targets(tmp_path) == frozenset({"MyKit", "Core"})


@pytest.mark.parametrize(
    "result", [_completed(1), _completed(stdout="not json")]
)
def test_package_targets_failure_means_everything(
    tmp_path: Path, mocker: MockerFixture, result: subprocess.CompletedProcess[str]
) -> None:
    """Any failure yields an empty set of targets."""
    mocker.patch("archive_pages.toolchain.subprocess.run", return_value=result)
    assert toolchain.package_targets(tmp_path) == frozenset()


def test_find_docc_raises_when_absent(mocker: MockerFixture) -> None:
    """No docc anywhere is a typed, fatal error."""
    mocker.patch("archive_pages.toolchain.sys.platform", "linux")
    mocker.patch("archive_pages.toolchain.shutil.which", return_value=None)
    mocker.patch.dict("os.environ", {"SWIFT_PATH": ""})
    mocker.patch("archive_pages.toolchain.FALLBACK_DOCC_PATHS", ())
    with pytest.raises(DoccNotFoundError, match="docc"):
        toolchain.find_docc()


def test_find_docc_uses_swift_path(tmp_path: Path, mocker: MockerFixture) -> None:
    """``$SWIFT_PATH/docc`` is used when docc is not on PATH."""
    docc = tmp_path / "docc"
    docc.write_text("#!/bin/sh\n", encoding="utf-8")
    mocker.patch("archive_pages.toolchain.sys.platform", "linux")
    mocker.patch("archive_pages.toolchain.shutil.which", return_value=None)
    mocker.patch.dict("os.environ", {"SWIFT_PATH": str(tmp_path)})
    assert toolchain.find_docc() == str(docc)


def test_find_catalogs_skips_hidden_and_nested(tmp_path: Path) -> None:
    """Catalogs are found under Sources without descending into them."""
    sources = tmp_path / "Sources"
    (sources / "MyKit" / "MyKit.docc" / "Inner.docc").mkdir(parents=True)
    (sources / "Core" / "Core.docc").mkdir(parents=True)
    (sources / ".build" / "Hidden.docc").mkdir(parents=True)
    names = [path.name for path in toolchain.find_catalogs(tmp_path)]
    assert names == ["Core.docc", "MyKit.docc"]


@pytest.mark.parametrize(
    ("catalog", "graph"),
    [
        ("MyKit", "MyKit.symbols.json"),
        ("my-kit", "my_kit.symbols.json"),
        ("mykit", "MyKit.symbols.json"),
    ],
)
def test_match_symbol_graph(tmp_path: Path, catalog: str, graph: str) -> None:
    """Catalogs match graphs exactly, by underscore, or ignoring case."""
    (tmp_path / graph).write_text("{}", encoding="utf-8")
    (tmp_path / "Other.symbols.json").write_text("{}", encoding="utf-8")
    match = toolchain.match_symbol_graph(catalog, tmp_path)
    assert match is not None
    assert match.name == graph


def test_convert_logs_nonzero_exit(
    tmp_path: Path, mocker: MockerFixture, caplog: pytest.LogCaptureFixture
) -> None:
    """docc warnings do not abort the conversion."""
    run = mocker.patch(
        "archive_pages.toolchain.subprocess.run",
        return_value=_completed(1, stderr="warning: missing docs"),
    )
    output = toolchain.convert(
        "docc", tmp_path, tmp_path / "out.doccarchive", display_name="MyKit"
    )
    assert output == tmp_path / "out.doccarchive"
    assert "missing docs" in caplog.text
    args = run.call_args.args[0]
    assert args[:2] == ["docc", "convert"]
    assert args[args.index("--fallback-display-name") + 1] == "MyKit"
    assert "--emit-digest" in args


def test_build_archives_converts_catalogs_and_leftovers(
    tmp_path: Path, mocker: MockerFixture
) -> None:
    """One archive per catalog, plus one for graphs no catalog claimed."""
    package = tmp_path / "pkg"
    (package / "Sources" / "MyKit" / "MyKit.docc").mkdir(parents=True)
    graphs = tmp_path / "graphs"
    graphs.mkdir()
    (graphs / "MyKit.symbols.json").write_text("{}", encoding="utf-8")
    (graphs / "Extras.symbols.json").write_text("{}", encoding="utf-8")
    mocker.patch("archive_pages.toolchain.find_docc", return_value="docc")
    run = mocker.patch(
        "archive_pages.toolchain.subprocess.run", return_value=_completed()
    )
    work = tmp_path / "work"

    archives = toolchain.build_archives(package, work, symbol_graph_dir=graphs)

    assert [path.name for path in archives] == [
        "archive-MyKit.doccarchive",
        "archive-remaining.doccarchive",
    ]
    assert (work / "sg-MyKit" / "MyKit.symbols.json").is_file()
    assert [p.name for p in (work / "sg-remaining").iterdir()] == [
        "Extras.symbols.json"
    ]
    assert run.call_count == 2
