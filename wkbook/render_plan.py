"""Assemble the ordered wkhtmltopdf argument list for a book.

Token order is fixed by the renderer's page model:

1. ``-T/-B/-L/-R`` margins, then ``--title`` when a title is configured.
2. An optional ``cover`` section, excluded from the outline.
3. The ``toc`` section, with ``--xsl-style-sheet`` when one is configured.
4. One block per content page, each followed by the same per-page options
   (zoom, JavaScript settings, header/footer wiring).
5. The output file, relative to the working directory.

Paths handed to the renderer are relative to the working directory, because
the renderer runs there, except header/footer templates, which Qt loads as
``file://`` URLs.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

from .assets import to_file_url

if typ.TYPE_CHECKING:
    from .assets import AssetMap
    from .config import BuildContext, SectionConfig
    from .toc import PageDescriptor

LOGGER = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class RenderPlan:
    """Executable plus the fully ordered argument tokens."""

    executable: str
    tokens: tuple[str, ...]

    @property
    def command(self) -> list[str]:
        """Return the argv passed to :func:`subprocess.run`."""
        return [self.executable, *self.tokens]


class RenderPlanBuilder:
    """Build :class:`RenderPlan` objects from a page list and asset map."""

    def __init__(self, context: BuildContext, asset_map: AssetMap) -> None:
        self.context = context
        self.asset_map = asset_map

    def build(self, pages: cabc.Iterable[PageDescriptor]) -> RenderPlan:
        """Return the plan for ``pages`` in sequence-index order."""
        render = self.context.book.render
        margin = render.margin
        tokens: list[str] = [
            "-T", margin.top,
            "-B", margin.bottom,
            "-L", margin.left,
            "-R", margin.right,
        ]  # fmt: skip
        if render.title:
            tokens += ["--title", render.title]

        all_pages = self._options_for_all_pages()
        if render.cover:
            tokens += [
                "cover",
                self._relative(self._destination(render.cover)),
                "--exclude-from-outline",
                *all_pages,
            ]

        tokens += ["toc", *all_pages]
        if render.toc_xsl:
            tokens += [
                "--xsl-style-sheet",
                self._relative(self._destination(render.toc_xsl)),
            ]

        normal_pages = self._options_for_normal_pages(all_pages)
        for page in sorted(pages, key=lambda page: page.index):
            tokens += [os.path.normpath(page.locator), *normal_pages]

        tokens.append(self._relative(self.context.options.output_file))
        LOGGER.debug("Renderer tokens: %s", tokens)
        return RenderPlan(self.context.options.renderer, tuple(tokens))

    def _options_for_all_pages(self) -> tuple[str, ...]:
        options = self.context.options
        return (
            "--zoom",
            str(options.zoom),
            "--debug-javascript",
            "--javascript-delay",
            str(options.javascript_delay),
        )

    def _options_for_normal_pages(
        self, all_pages: tuple[str, ...]
    ) -> tuple[str, ...]:
        render = self.context.book.render
        sections: dict[str, SectionConfig] = {
            "header": render.header,
            "footer": render.footer,
        }
        options = list(all_pages)
        for name, section in sections.items():
            if not section.content_html:
                continue
            options += [
                f"--{name}-html",
                to_file_url(self._destination(section.content_html)),
                f"--{name}-spacing",
                section.spacing,
            ]
        return tuple(options)

    def _destination(self, reference: str) -> Path:
        return self.asset_map[self.context.book.asset_source(reference)]

    def _relative(self, path: Path) -> str:
        return os.path.relpath(path, self.context.working_dir)


def build_render_plan(
    context: BuildContext,
    asset_map: AssetMap,
    pages: cabc.Iterable[PageDescriptor],
) -> RenderPlan:
    """Convenience wrapper around :meth:`RenderPlanBuilder.build`."""
    return RenderPlanBuilder(context, asset_map).build(pages)


__all__ = ["RenderPlan", "RenderPlanBuilder", "build_render_plan"]
