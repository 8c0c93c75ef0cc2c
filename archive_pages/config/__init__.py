"""Load and validate site configuration YAML for archive rendering.

This subpackage parses an optional ``archive-pages.yaml`` file, applies
defaults for every omitted key, validates the dependency policy, theme, and
external documentation links, and produces strongly typed dataclasses
(:class:`SiteConfig`, :class:`ThemeConfig`, :class:`DependencyPolicy`) that the
generator and preview server consume. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from archive_pages.config import SiteConfig
>>> SiteConfig().include_search
True
>>> SiteConfig().should_include_module("Foundation", set())
True
"""

from .loader import build_site_config, load_site_config
from .models import (
    DependencyPolicy,
    PolicyMode,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
)

__all__ = [
    "DependencyPolicy",
    "PolicyMode",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "build_site_config",
    "load_site_config",
]
