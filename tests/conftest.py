"""Shared fixtures for wkbook tests.

``write_book`` lays out a minimal GitBook project (settings file plus asset
sources) under ``tmp_path``; ``write_summary`` drops a rendered
``SUMMARY.html`` into an ebook directory the way ``gitbook build --format
ebook`` would.
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest

SUMMARY_HTML = dedent(
    """\
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"><title>Summary</title></head>
    <body>
    <div class="book-toc">
      <h1>Table of Contents</h1>
      <ol>
        <li><span><a href="index.html">Introduction</a></span></li>
        <li>
          <span><a href="part1/README.html">Part
            One</a></span>
          <ol>
            <li><span><a href="part1/chapter1.html">Chapter 1</a></span></li>
            <li>
              <span><a href="part1/./chapter2.html">Chapter 2</a></span>
              <ol>
                <li><span><a href="part1/chapter2/deep.html">Deep</a></span></li>
              </ol>
            </li>
          </ol>
        </li>
        <li><span><a href="appendix.html">Appendix</a></span></li>
      </ol>
    </div>
    </body>
    </html>
    """
)

BookWriter = typ.Callable[..., Path]


@pytest.fixture
def write_book(tmp_path: Path) -> BookWriter:
    """Return a factory writing ``book.json`` and the named asset files."""

    def _write(
        settings: dict[str, typ.Any] | None = None,
        *,
        files: dict[str, str] | None = None,
        name: str = "book.json",
    ) -> Path:
        for relative, content in (files or {}).items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        config_path = tmp_path / name
        config_path.write_text(json.dumps(settings or {}, indent=2), encoding="utf-8")
        return config_path

    return _write


@pytest.fixture
def write_summary() -> typ.Callable[..., Path]:
    """Return a helper writing the sample rendered summary into a directory."""

    def _write(ebook_dir: Path, html: str = SUMMARY_HTML) -> Path:
        ebook_dir.mkdir(parents=True, exist_ok=True)
        path = ebook_dir / "SUMMARY.html"
        path.write_text(html, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def summary_html() -> str:
    """Return the sample rendered summary markup."""
    return SUMMARY_HTML
