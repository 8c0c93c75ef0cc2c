"""Unit tests for the YAML configuration loader and dependency policy."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from archive_pages._constants import DEFAULT_OUTPUT_DIR, DEFAULT_PORT
from archive_pages.config import (
    DependencyPolicy,
    PolicyMode,
    SiteConfig,
    SiteConfigError,
    build_site_config,
    load_site_config,
)


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "archive-pages.yaml"
    path.write_text(body.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_apply_for_empty_file(tmp_path: Path) -> None:
    """An empty file yields the documented defaults."""
    config = load_site_config(_write(tmp_path, "# nothing"))
    assert config.output_dir == tmp_path / DEFAULT_OUTPUT_DIR
    assert config.targets == []
    assert config.dependency_policy == DependencyPolicy(PolicyMode.ALL)
    assert config.include_search is True
    assert config.theme.accent_colour == "#0066cc"
    assert config.theme.include_dark_mode is True
    assert config.theme.pygments_style == "default"
    assert config.jobs == 1
    assert config.port == DEFAULT_PORT


def test_full_config_is_parsed(tmp_path: Path) -> None:
    """Every documented key is read into the typed config."""
    config = load_site_config(
        _write(
            tmp_path,
            """
output_dir: public
targets: MyKit
dependency_policy:
  exclude: [Logging, Metrics]
external_documentation_urls:
  SwiftLog: https://example.com/swift-log
include_search: false
theme:
  accent_colour: "#ff6600"
  include_dark_mode: false
  custom_css: ".hero { color: red; }"
  pygments_style: monokai
footer_html: "<p>Footer</p>"
verbose: true
jobs: 4
port: 0
""",
        )
    )
    assert config.output_dir == tmp_path / "public"
    assert config.targets == ["MyKit"]
    assert config.dependency_policy == DependencyPolicy(
        PolicyMode.EXCLUDE, ("Logging", "Metrics")
    )
    assert config.external_documentation_urls == {
        "SwiftLog": "https://example.com/swift-log"
    }
    assert config.include_search is False
    assert config.theme.accent_colour == "#ff6600"
    assert config.theme.custom_css == ".hero { color: red; }"
    assert config.theme.pygments_style == "monokai"
    assert config.footer_html == "<p>Footer</p>"
    assert config.verbose is True
    assert config.jobs == 4
    assert config.port == 0


def test_missing_file_raises(tmp_path: Path) -> None:
    """A missing config file is reported as such."""
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ({"dependency_policy": "some"}, "dependency_policy"),
        ({"dependency_policy": {"only": ["A"]}}, "dependency_policy"),
        ({"theme": {"accent_colour": "blue"}}, "hex colour"),
        ({"external_documentation_urls": {"A": "ftp://x"}}, "http"),
        ({"jobs": 0}, "jobs"),
        ({"port": 70000}, "port"),
        ({"port": True}, "port"),
        ({"targets": {"a": 1}}, "targets"),
    ],
)
def test_invalid_values_are_rejected(raw: dict[str, typ.Any], message: str) -> None:
    """Invalid values raise SiteConfigError naming the problem."""
    with pytest.raises(SiteConfigError, match=message):
        build_site_config(raw)


def test_non_mapping_top_level_is_rejected(tmp_path: Path) -> None:
    """A YAML list at the top level is not a configuration."""
    with pytest.raises(SiteConfigError):
        load_site_config(_write(tmp_path, "- a\n- b"))


@pytest.mark.parametrize(
    ("policy", "included"),
    [
        (DependencyPolicy(PolicyMode.ALL), {"MyKit", "Logging", "Metrics"}),
        (DependencyPolicy(PolicyMode.NONE), {"MyKit"}),
        (DependencyPolicy(PolicyMode.EXCLUDE, ("Logging",)), {"MyKit", "Metrics"}),
        (DependencyPolicy(PolicyMode.INCLUDE_ONLY, ("Logging",)), {"MyKit", "Logging"}),
    ],
)
def test_dependency_policy_filters_modules(
    policy: DependencyPolicy, included: set[str]
) -> None:
    """Package targets always pass; dependencies follow the policy."""
    config = SiteConfig(dependency_policy=policy)
    modules = {"MyKit", "Logging", "Metrics"}
    assert {
        module
        for module in modules
        if config.should_include_module(module, frozenset({"MyKit"}))
    } == included


def test_unknown_targets_include_everything() -> None:
    """With no known package targets every module is documented."""
    config = SiteConfig(dependency_policy=DependencyPolicy(PolicyMode.NONE))
    assert config.should_include_module("Logging", frozenset())


def test_absolute_output_dir_is_kept(tmp_path: Path) -> None:
    """Absolute output directories are not re-rooted at the config file."""
    target = tmp_path / "elsewhere"
    config = build_site_config({"output_dir": str(target)}, base_dir=Path("/tmp"))
    assert config.output_dir == target
