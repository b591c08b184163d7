"""Load the book settings document into typed dataclasses."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .._constants import DEFAULT_SUMMARY
from .helpers import (
    _as_mapping,
    _build_asset_list,
    _build_margin_config,
    _build_section_config,
    _optional_str,
)
from .models import BookConfig, BookConfigError, RenderSettings


def load_book_config(path: Path) -> BookConfig:
    """Load the settings document describing the book and its PDF options.

    Parameters
    ----------
    path : Path
        Filesystem path to the settings file, usually ``book.json``. JSON is a
        subset of YAML 1.2, so ``book.yaml`` files are accepted as well.

    Returns
    -------
    BookConfig
        Frozen configuration with the book root resolved against the settings
        file's directory and the ``wkhtmltopdf`` section fully defaulted.

    Raises
    ------
    FileNotFoundError
        If the settings file does not exist at ``path``.
    BookConfigError
        If the document or one of its sections has an unexpected shape.
    YAMLError
        If the content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from wkbook.config import load_book_config
    >>> book = load_book_config(Path("book.json"))  # doctest: +SKIP
    >>> book.render.margin.top  # doctest: +SKIP
    '36'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level settings structure must be a mapping."
        raise BookConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    base_dir = Path(os.path.abspath(path.parent))
    root_ref = _optional_str(raw.get("root"), where="root") or "."
    title = _optional_str(raw.get("title"), where="title")
    structure = _as_mapping(raw.get("structure"), where="structure")
    summary = (
        _optional_str(structure.get("summary"), where="structure.summary")
        or DEFAULT_SUMMARY
    )

    return BookConfig(
        base_dir=base_dir,
        root=Path(os.path.normpath(base_dir / root_ref)),
        title=title,
        summary=summary,
        render=_build_render_settings(raw.get("wkhtmltopdf"), book_title=title),
    )


def _build_render_settings(
    payload: object, *, book_title: str | None
) -> RenderSettings:
    """Build the renderer section, falling back to the book title."""
    raw = _as_mapping(payload, where="wkhtmltopdf")
    title = _optional_str(raw.get("title"), where="wkhtmltopdf.title")
    return RenderSettings(
        margin=_build_margin_config(raw.get("margin")),
        title=title or book_title,
        cover=_optional_str(raw.get("cover"), where="wkhtmltopdf.cover"),
        toc_xsl=_optional_str(raw.get("tocXsl"), where="wkhtmltopdf.tocXsl"),
        header=_build_section_config("header", raw.get("header")),
        footer=_build_section_config("footer", raw.get("footer")),
        assets=_build_asset_list(raw.get("assets")),
    )


__all__ = ["load_book_config"]
