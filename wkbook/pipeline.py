"""High-level orchestration of a book-to-PDF compile.

:class:`BookPdfCompiler` runs the steps strictly in order: build the book (if
needed), resolve assets, normalise and flatten the summary, assemble the
renderer arguments, and finally run the renderer.

Example
-------
>>> from pathlib import Path
>>> from wkbook.config import BuildContext, CompileOptions, load_book_config
>>> from wkbook.pipeline import BookPdfCompiler
>>> book = load_book_config(Path("book.json"))  # doctest: +SKIP
>>> context = BuildContext(book, CompileOptions(build=False))  # doctest: +SKIP
>>> BookPdfCompiler(context).prepare().command[:3]  # doctest: +SKIP
['wkhtmltopdf', '-T', '36']
"""

from __future__ import annotations

import typing as typ

from .assets import AssetResolver, StyleCompiler
from .driver import build_book, run_renderer
from .render_plan import RenderPlan, RenderPlanBuilder
from .toc import load_pages

if typ.TYPE_CHECKING:
    from .config import BuildContext


class BookPdfCompiler:
    """Drive a single compile for one :class:`BuildContext`."""

    def __init__(
        self,
        context: BuildContext,
        *,
        style_compiler: StyleCompiler | None = None,
    ) -> None:
        self.context = context
        self.resolver = AssetResolver(context, style_compiler=style_compiler)

    def prepare(self) -> RenderPlan:
        """Run every step up to, but excluding, the renderer.

        Returns
        -------
        RenderPlan
            The renderer command for this book.

        Notes
        -----
        Side effects include running the document builder, writing resolved
        assets, and writing the normalised summary into the working directory.
        """
        build_book(self.context)
        asset_map = self.resolver.run()
        pages = load_pages(self.context)
        return RenderPlanBuilder(self.context, asset_map).build(pages)

    def run(self) -> int:
        """Prepare the plan, run the renderer, and return its exit status."""
        plan = self.prepare()
        return run_renderer(
            plan,
            working_dir=self.context.working_dir,
            timeout=self.context.options.timeout,
        )


__all__ = ["BookPdfCompiler"]
