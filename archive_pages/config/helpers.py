"""Utility helpers shared by the archive configuration loader."""

from __future__ import annotations

import typing as typ

from .models import DependencyPolicy, PolicyMode, SiteConfigError, ThemeConfig

HEX_COLOUR_LENGTHS = (4, 7, 9)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_list(value: object | None, *, field: str) -> list[str]:
    """Normalize a scalar or list value into a list of non-empty strings."""
    match value:
        case None:
            return []
        case str() as text:
            return [text.strip()] if text.strip() else []
        case list() as items:
            return [str(item).strip() for item in items if str(item).strip()]
        case _:
            msg = f"'{field}' must be a string or a list of strings."
            raise SiteConfigError(msg)


def _build_dependency_policy(value: object | None) -> DependencyPolicy:
    """Parse ``dependency_policy`` from either a keyword or a one-key mapping.

    Accepted shapes are ``all``, ``none``, ``{exclude: [...]}`` and
    ``{include_only: [...]}``.
    """
    match value:
        case None:
            return DependencyPolicy()
        case str() as keyword if keyword in (PolicyMode.ALL, PolicyMode.NONE):
            return DependencyPolicy(PolicyMode(keyword))
        case dict() as mapping if len(mapping) == 1:
            key, modules = next(iter(mapping.items()))
            if key in (PolicyMode.EXCLUDE, PolicyMode.INCLUDE_ONLY):
                names = _string_list(modules, field=f"dependency_policy.{key}")
                return DependencyPolicy(PolicyMode(key), tuple(names))
    msg = (
        "dependency_policy must be 'all', 'none', "
        "{exclude: [...]} or {include_only: [...]}."
    )
    raise SiteConfigError(msg)


def _build_theme_config(payload: typ.Mapping[str, typ.Any] | None) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    if not payload:
        return base
    if not isinstance(payload, dict):
        msg = "'theme' must be a mapping."
        raise SiteConfigError(msg)
    accent = str(payload.get("accent_colour", base.accent_colour)).strip()
    if not accent.startswith("#") or len(accent) not in HEX_COLOUR_LENGTHS:
        msg = f"Theme accent colour '{accent}' is not a hex colour."
        raise SiteConfigError(msg)
    return ThemeConfig(
        accent_colour=accent,
        include_dark_mode=bool(
            payload.get("include_dark_mode", base.include_dark_mode)
        ),
        custom_css=_optional_str(payload.get("custom_css")),
        pygments_style=_optional_str(payload.get("pygments_style"))
        or base.pygments_style,
    )


def _build_external_urls(value: object | None) -> dict[str, str]:
    """Return the module-to-URL mapping for external documentation links."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = "'external_documentation_urls' must map module names to URLs."
        raise SiteConfigError(msg)
    urls: dict[str, str] = {}
    for module, url in value.items():
        text = _optional_str(url)
        if not text or not text.startswith(("http://", "https://")):
            msg = f"External documentation URL for '{module}' must be http(s)."
            raise SiteConfigError(msg)
        urls[str(module)] = text
    return urls


def _positive_int(value: object, *, field: str) -> int:
    """Return ``value`` as an int greater than zero."""
    try:
        number = int(typ.cast("typ.SupportsInt", value))
    except (TypeError, ValueError) as exc:
        msg = f"'{field}' must be an integer."
        raise SiteConfigError(msg) from exc
    if number < 1:
        msg = f"'{field}' must be at least 1."
        raise SiteConfigError(msg)
    return number


__all__ = [
    "_build_dependency_policy",
    "_build_external_urls",
    "_build_theme_config",
    "_optional_str",
    "_positive_int",
    "_string_list",
]
