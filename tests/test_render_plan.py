"""Unit tests for the wkhtmltopdf argument assembly.

The asset map is planned (not materialized) so these tests never touch the
filesystem; they assert the exact token order the renderer expects.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from wkbook.assets import AssetMap, collect_asset_sources, plan_asset_records
from wkbook.config import (
    BookConfig,
    BuildContext,
    CompileOptions,
    MarginConfig,
    RenderSettings,
    SectionConfig,
)
from wkbook.render_plan import RenderPlanBuilder, build_render_plan
from wkbook.toc import PageDescriptor

ALL_PAGES = ["--zoom", "1.2", "--debug-javascript", "--javascript-delay", "1000"]
PAGES = [
    PageDescriptor("ch1.html", "Chapter 1", 1, 1),
    PageDescriptor("ch2.html", "Chapter 2", 1, 2),
]


def _context(
    tmp_path: Path, render: RenderSettings, **options: object
) -> tuple[BuildContext, AssetMap]:
    book = BookConfig(base_dir=tmp_path, root=tmp_path, render=render)
    options.setdefault("ebook_directory", tmp_path / "_ebook")
    options.setdefault("output_file", tmp_path / "book.pdf")
    context = BuildContext(book, CompileOptions(**options))  # type: ignore[arg-type]
    records = plan_asset_records(collect_asset_sources(book), context.working_dir)
    return context, AssetMap(records)


def test_toc_stylesheet_without_cover(tmp_path: Path) -> None:
    render = RenderSettings(
        margin=MarginConfig("1", "1", "1", "1"), toc_xsl="styles/toc.xsl"
    )
    context, asset_map = _context(tmp_path, render)

    plan = build_render_plan(context, asset_map, PAGES)

    assert plan.executable == "wkhtmltopdf"
    assert list(plan.tokens) == [
        "-T", "1", "-B", "1", "-L", "1", "-R", "1",
        "toc", *ALL_PAGES, "--xsl-style-sheet", "toc.xsl",
        "ch1.html", *ALL_PAGES,
        "ch2.html", *ALL_PAGES,
        "../book.pdf",
    ]  # fmt: skip
    assert "cover" not in plan.tokens
    assert plan.command[0] == "wkhtmltopdf"


def test_cover_title_header_and_footer(tmp_path: Path) -> None:
    render = RenderSettings(
        title="Field Guide",
        cover="img/cover.jpg",
        header=SectionConfig("tpl/header.html", "4"),
        footer=SectionConfig("other/header.html", "6"),
    )
    context, asset_map = _context(
        tmp_path, render, zoom=1.0, javascript_delay=0
    )

    tokens = list(RenderPlanBuilder(context, asset_map).build(PAGES).tokens)

    all_pages = ["--zoom", "1.0", "--debug-javascript", "--javascript-delay", "0"]
    header_url = (tmp_path / "_ebook" / "header.html").as_uri()
    footer_url = (tmp_path / "_ebook" / "header.html_1").as_uri()
    normal_pages = [
        *all_pages,
        "--header-html", header_url, "--header-spacing", "4",
        "--footer-html", footer_url, "--footer-spacing", "6",
    ]  # fmt: skip
    assert tokens == [
        "-T", "36", "-B", "36", "-L", "36", "-R", "36",
        "--title", "Field Guide",
        "cover", "cover.jpg", "--exclude-from-outline", *all_pages,
        "toc", *all_pages,
        "ch1.html", *normal_pages,
        "ch2.html", *normal_pages,
        "../book.pdf",
    ]  # fmt: skip


def test_pages_follow_sequence_index_and_are_normalised(tmp_path: Path) -> None:
    context, asset_map = _context(tmp_path, RenderSettings())
    pages = [
        PageDescriptor("b/./two.html", "Two", 2, 2),
        PageDescriptor("a/../one.html", "One", 1, 1),
    ]
    tokens = build_render_plan(context, asset_map, pages).tokens
    page_tokens = [token for token in tokens if token.endswith(".html")]
    assert page_tokens == ["one.html", "b/two.html"]


def test_relative_working_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    render = RenderSettings(cover="cover.jpg")
    context, asset_map = _context(
        tmp_path,
        render,
        ebook_directory=Path("_ebook"),
        output_file=Path("dist/book.pdf"),
    )
    tokens = build_render_plan(context, asset_map, PAGES).tokens
    assert tokens[tokens.index("cover") + 1] == "cover.jpg"
    assert tokens[-1] == "../dist/book.pdf"


def test_missing_optional_assets_omit_tokens(tmp_path: Path) -> None:
    context, asset_map = _context(tmp_path, RenderSettings())
    tokens = build_render_plan(context, asset_map, []).tokens
    for flag in ("cover", "--title", "--xsl-style-sheet", "--header-html", "--footer-html"):
        assert flag not in tokens
    assert tokens[8:] == ("toc", *ALL_PAGES, "../book.pdf")


def test_unresolved_asset_is_a_key_error(tmp_path: Path) -> None:
    context, _ = _context(tmp_path, RenderSettings(cover="cover.jpg"))
    with pytest.raises(KeyError):
        build_render_plan(context, AssetMap([]), PAGES)
