"""Typed dataclasses describing archive site configuration structures."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path

from archive_pages._constants import DEFAULT_OUTPUT_DIR, DEFAULT_PORT


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


class PolicyMode(enum.StrEnum):
    """How modules outside the package's own targets are treated."""

    ALL = "all"
    NONE = "none"
    EXCLUDE = "exclude"
    INCLUDE_ONLY = "include_only"


@dc.dataclass(frozen=True, slots=True)
class DependencyPolicy:
    """Decide whether a dependency module is documented alongside the package.

    Attributes
    ----------
    mode : PolicyMode
        Inclusion strategy for modules that are not package targets.
    modules : tuple[str, ...]
        Module names listed for ``exclude`` and ``include_only`` modes.
    """

    mode: PolicyMode = PolicyMode.ALL
    modules: tuple[str, ...] = ()

    def includes(self, module_name: str) -> bool:
        """Return ``True`` when ``module_name`` passes this policy."""
        match self.mode:
            case PolicyMode.ALL:
                return True
            case PolicyMode.NONE:
                return False
            case PolicyMode.EXCLUDE:
                return module_name not in self.modules
            case PolicyMode.INCLUDE_ONLY:
                return module_name in self.modules


@dc.dataclass(slots=True)
class ThemeConfig:
    """Visual theming applied to the generated stylesheet."""

    accent_colour: str = "#0066cc"
    include_dark_mode: bool = True
    custom_css: str | None = None
    pygments_style: str = "default"


@dc.dataclass(slots=True)
class SiteConfig:
    """Settings shared by every stage of a site render."""

    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    targets: list[str] = dc.field(default_factory=list)
    dependency_policy: DependencyPolicy = dc.field(default_factory=DependencyPolicy)
    external_documentation_urls: dict[str, str] = dc.field(default_factory=dict)
    include_search: bool = True
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    verbose: bool = False
    footer_html: str | None = None
    jobs: int = 1
    port: int = DEFAULT_PORT

    def should_include_module(
        self, module_name: str, package_targets: set[str] | frozenset[str]
    ) -> bool:
        """Return whether pages for ``module_name`` belong in the site.

        Parameters
        ----------
        module_name : str
            Module segment taken from a render node's identifier path.
        package_targets : set[str]
            Names of the package's own targets. An empty set means the
            targets are unknown, so every module is included.

        Returns
        -------
        bool
            ``True`` when the module is a package target or passes the
            dependency policy.
        """
        if not package_targets or module_name in package_targets:
            return True
        return self.dependency_policy.includes(module_name)


__all__ = [
    "DependencyPolicy",
    "PolicyMode",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
]
