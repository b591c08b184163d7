"""Utility helpers shared by the book configuration loader."""

from __future__ import annotations

import typing as typ

from .models import BookConfigError, MarginConfig, SectionConfig

MARGIN_SIDES = ("top", "bottom", "left", "right")


def _as_mapping(value: object, *, where: str) -> typ.Mapping[str, typ.Any]:
    """Return ``value`` as a mapping, treating ``None`` as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{where}' must be a mapping, got {type(value).__name__}."
        raise BookConfigError(msg)
    return value


def _optional_str(value: object | None, *, where: str) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"'{where}' must be a string, got {type(value).__name__}."
        raise BookConfigError(msg)
    return value.strip() or None


def _measure(value: object, *, where: str) -> str:
    """Return a margin or spacing value as the text handed to the renderer."""
    match value:
        case bool():
            pass
        case int() | float():
            return str(value)
        case str() as text if text.strip():
            return text.strip()
    msg = f"'{where}' must be a number or a non-empty string, got {value!r}."
    raise BookConfigError(msg)


def _build_margin_config(payload: object) -> MarginConfig:
    """Merge a ``margin`` mapping over the default margins."""
    raw = _as_mapping(payload, where="wkhtmltopdf.margin")
    base = MarginConfig()
    values = {
        side: _measure(raw[side], where=f"wkhtmltopdf.margin.{side}")
        if side in raw
        else getattr(base, side)
        for side in MARGIN_SIDES
    }
    return MarginConfig(**values)


def _build_section_config(name: str, payload: object) -> SectionConfig:
    """Build the header or footer section from its raw mapping."""
    raw = _as_mapping(payload, where=f"wkhtmltopdf.{name}")
    base = SectionConfig()
    spacing = raw.get("spacing")
    return SectionConfig(
        content_html=_optional_str(
            raw.get("contentHtml"), where=f"wkhtmltopdf.{name}.contentHtml"
        ),
        spacing=base.spacing
        if spacing is None
        else _measure(spacing, where=f"wkhtmltopdf.{name}.spacing"),
    )


def _build_asset_list(payload: object) -> tuple[str, ...]:
    """Validate the extra asset references, dropping empty entries."""
    if payload is None:
        return ()
    if not isinstance(payload, list):
        msg = "'wkhtmltopdf.assets' must be a list of paths."
        raise BookConfigError(msg)
    assets: list[str] = []
    for index, entry in enumerate(payload):
        reference = _optional_str(entry, where=f"wkhtmltopdf.assets[{index}]")
        if reference:
            assets.append(reference)
    return tuple(assets)


__all__ = [
    "MARGIN_SIDES",
    "_as_mapping",
    "_build_asset_list",
    "_build_margin_config",
    "_build_section_config",
    "_measure",
    "_optional_str",
]
