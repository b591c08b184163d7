"""Load and validate the book settings used to compile a PDF.

This subpackage parses the book's ``book.json`` (or YAML equivalent), applies
defaults to the ``wkhtmltopdf`` section, resolves the book root against the
settings file, and produces frozen dataclasses (:class:`BookConfig`,
:class:`RenderSettings`, etc.) that the asset resolver, the TOC flattener, and
the invocation builder consume. Per-run options live in
:class:`CompileOptions`; :class:`BuildContext` carries both.

Examples
--------
>>> from pathlib import Path
>>> from wkbook.config import BuildContext, CompileOptions, load_book_config
>>> book = load_book_config(Path("book.json"))  # doctest: +SKIP
>>> context = BuildContext(book, CompileOptions(build=False))  # doctest: +SKIP
>>> context.summary_html  # doctest: +SKIP
PosixPath('_ebook/SUMMARY.html')
"""

from .loader import load_book_config
from .models import (
    BookConfig,
    BookConfigError,
    BuildContext,
    CompileOptions,
    MarginConfig,
    RenderSettings,
    SectionConfig,
)

__all__ = [
    "BookConfig",
    "BookConfigError",
    "BuildContext",
    "CompileOptions",
    "MarginConfig",
    "RenderSettings",
    "SectionConfig",
    "load_book_config",
]
