"""Typed, frozen dataclasses describing a resolved book build configuration."""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from .._constants import (
    DEFAULT_EBOOK_DIRECTORY,
    DEFAULT_JAVASCRIPT_DELAY,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_RENDER_TIMEOUT,
    DEFAULT_SUMMARY,
    DEFAULT_ZOOM,
    RENDERER_EXECUTABLE,
    SUMMARY_HTML_SUFFIX,
    SUMMARY_XHTML_SUFFIX,
)


class BookConfigError(ValueError):
    """Raised when the book configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class MarginConfig:
    """Page margins handed to the renderer verbatim."""

    top: str = "36"
    bottom: str = "36"
    left: str = "36"
    right: str = "36"


@dc.dataclass(frozen=True, slots=True)
class SectionConfig:
    """Header or footer wiring for content pages."""

    content_html: str | None = None
    spacing: str = "5"


@dc.dataclass(frozen=True, slots=True)
class RenderSettings:
    """The ``wkhtmltopdf`` section of the book configuration.

    Attributes
    ----------
    margin : MarginConfig
        Global page margins.
    title : str or None
        Document title; falls back to the book title when unset.
    cover : str or None
        Asset reference (relative to the book root) for the cover page.
    toc_xsl : str or None
        Asset reference for the XSL style sheet of the generated TOC.
    header, footer : SectionConfig
        Optional content templates and spacing for every content page.
    assets : tuple[str, ...]
        Extra asset references copied into the working directory.
    """

    margin: MarginConfig = MarginConfig()
    title: str | None = None
    cover: str | None = None
    toc_xsl: str | None = None
    header: SectionConfig = SectionConfig()
    footer: SectionConfig = SectionConfig()
    assets: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class BookConfig:
    """A fully resolved book definition sourced from the settings file."""

    base_dir: Path
    root: Path
    title: str | None = None
    summary: str = DEFAULT_SUMMARY
    render: RenderSettings = RenderSettings()

    def asset_source(self, reference: str) -> Path:
        """Return the absolute, normalised source path of an asset reference."""
        return Path(os.path.abspath(self.root / reference))


@dc.dataclass(frozen=True, slots=True)
class CompileOptions:
    """Per-run options, usually supplied on the command line."""

    ebook_directory: Path = Path(DEFAULT_EBOOK_DIRECTORY)
    output_file: Path = Path(DEFAULT_OUTPUT_FILE)
    zoom: float = DEFAULT_ZOOM
    javascript_delay: int = DEFAULT_JAVASCRIPT_DELAY
    build: bool = True
    timeout: float = DEFAULT_RENDER_TIMEOUT
    renderer: str = RENDERER_EXECUTABLE


@dc.dataclass(frozen=True, slots=True)
class BuildContext:
    """Configuration shared by reference across every compiler component."""

    book: BookConfig
    options: CompileOptions = CompileOptions()

    @property
    def working_dir(self) -> Path:
        """Return the staging directory exactly as configured."""
        return self.options.ebook_directory

    @property
    def summary_html(self) -> Path:
        """Return the builder's rendered summary inside the working directory."""
        stem = Path(self.book.summary).stem
        return self.working_dir / f"{stem}{SUMMARY_HTML_SUFFIX}"

    @property
    def summary_xhtml(self) -> Path:
        """Return where the normalised summary markup is written."""
        return self.summary_html.with_suffix(SUMMARY_XHTML_SUFFIX)


__all__ = [
    "BookConfig",
    "BookConfigError",
    "BuildContext",
    "CompileOptions",
    "MarginConfig",
    "RenderSettings",
    "SectionConfig",
]
