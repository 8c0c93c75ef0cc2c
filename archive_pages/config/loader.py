"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_dependency_policy,
    _build_external_urls,
    _build_theme_config,
    _optional_str,
    _positive_int,
    _string_list,
)
from .models import SiteConfig, SiteConfigError

MAX_PORT = 65535


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing how a site is rendered.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``archive-pages.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied for every omitted key.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level YAML structure is not a mapping or a value is
        invalid (for example, an unknown dependency policy).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from archive_pages.config import load_site_config
    >>> config = load_site_config(Path("archive-pages.yaml"))  # doctest: +SKIP
    >>> config.theme.accent_colour  # doctest: +SKIP
    '#0066cc'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    return build_site_config(dict(loaded), base_dir=path.parent)


def build_site_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path | None = None
) -> SiteConfig:
    """Build a SiteConfig from an already-parsed mapping.

    Relative ``output_dir`` values are resolved against ``base_dir`` when it
    is provided, so a config file behaves the same from any working
    directory.
    """
    defaults = SiteConfig()
    output_dir = Path(raw.get("output_dir", defaults.output_dir))
    if base_dir is not None and not output_dir.is_absolute():
        output_dir = base_dir / output_dir

    port = raw.get("port", defaults.port)
    valid_port = isinstance(port, int) and not isinstance(port, bool)
    if not valid_port or not 0 <= port <= MAX_PORT:
        msg = f"'port' must be an integer between 0 and {MAX_PORT}."
        raise SiteConfigError(msg)

    return SiteConfig(
        output_dir=output_dir,
        targets=_string_list(raw.get("targets"), field="targets"),
        dependency_policy=_build_dependency_policy(raw.get("dependency_policy")),
        external_documentation_urls=_build_external_urls(
            raw.get("external_documentation_urls")
        ),
        include_search=bool(raw.get("include_search", defaults.include_search)),
        theme=_build_theme_config(raw.get("theme")),
        verbose=bool(raw.get("verbose", defaults.verbose)),
        footer_html=_optional_str(raw.get("footer_html")),
        jobs=_positive_int(raw.get("jobs", defaults.jobs), field="jobs"),
        port=port,
    )


__all__ = ["build_site_config", "load_site_config"]
