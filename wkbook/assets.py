"""Resolve book assets into a collision-free layout under the working directory.

Every configured asset (extra assets, cover, header/footer templates, TOC
style sheet) is given exactly one destination named after its base name. A base
name that is already claimed in this run gets the first free ``_1``, ``_2`` ...
suffix; files left over from earlier runs are not consulted. Destinations are
all assigned before anything is written, so the concurrent transforms never
target the same path.

Transforms depend on the source extension:

* ``.less`` is compiled to CSS by the ``lessc`` preprocessor and written with
  a ``.css`` suffix.
* ``.xsl`` has the ``%url_current_dir%`` token replaced with the working
  directory's ``file://`` URL.
* anything else is copied byte for byte.

Examples
--------
>>> from pathlib import Path
>>> from wkbook.assets import plan_asset_records
>>> records = plan_asset_records(
...     [Path("/book/a/x.png"), Path("/book/b/x.png")], Path("/tmp/_ebook")
... )
>>> [record.dest_path.name for record in records]
['x.png', 'x.png_1']
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import os
import re
import shutil
import subprocess
import typing as typ
from pathlib import Path

from ._constants import LESS_EXECUTABLE, URL_PLACEHOLDER

if typ.TYPE_CHECKING:
    from .config import BookConfig, BuildContext

LOGGER = logging.getLogger(__name__)

StyleCompiler = cabc.Callable[[str, Path], str]

_DRIVE_LETTER_URL = re.compile(r"^file:///[A-Z]:/")
_LESS_SUFFIX = re.compile(r"\.less$", re.IGNORECASE)


class AssetTransformError(RuntimeError):
    """Raised when a single asset cannot be compiled, substituted, or copied."""


class AssetKind(enum.Enum):
    """How an asset is materialized in the working directory."""

    STYLE_SHEET = "stylesheet"
    TEMPLATE = "template"
    VERBATIM = "verbatim"

    @classmethod
    def for_path(cls, path: Path) -> AssetKind:
        """Classify ``path`` by its (case-insensitive) extension."""
        match path.suffix.lower():
            case ".less":
                return cls.STYLE_SHEET
            case ".xsl":
                return cls.TEMPLATE
            case _:
                return cls.VERBATIM


@dc.dataclass(frozen=True, slots=True)
class AssetRecord:
    """Source and claimed destination of one asset."""

    source_path: Path
    dest_path: Path
    kind: AssetKind

    @property
    def output_path(self) -> Path:
        """Return the file actually written; style sheets land as ``.css``."""
        if self.kind is AssetKind.STYLE_SHEET:
            return self.dest_path.with_name(
                _LESS_SUFFIX.sub(".css", self.dest_path.name)
            )
        return self.dest_path


class AssetMap(cabc.Mapping[Path, Path]):
    """Read-only ``source -> destination`` mapping produced by the resolver."""

    __slots__ = ("_by_source", "records")

    def __init__(self, records: cabc.Iterable[AssetRecord]) -> None:
        self.records: tuple[AssetRecord, ...] = tuple(records)
        self._by_source = {record.source_path: record for record in self.records}

    def __getitem__(self, source: Path) -> Path:
        return self._by_source[source].dest_path

    def __iter__(self) -> cabc.Iterator[Path]:
        return iter(self._by_source)

    def __len__(self) -> int:
        return len(self._by_source)

    def record_for(self, source: Path) -> AssetRecord:
        """Return the full record for ``source``."""
        return self._by_source[source]


def to_file_url(path: Path) -> str:
    """Return a ``file://`` URL Qt accepts, with a lowercase drive letter."""
    url = Path(os.path.abspath(path)).as_uri()
    return _DRIVE_LETTER_URL.sub(lambda match: match.group(0).lower(), url)


def collect_asset_sources(book: BookConfig) -> list[Path]:
    """Return the absolute source path of every configured asset.

    Order is extra assets, cover, header template, footer template, TOC style
    sheet; duplicates keep their first position.
    """
    render = book.render
    references = [
        *render.assets,
        render.cover,
        render.header.content_html,
        render.footer.content_html,
        render.toc_xsl,
    ]
    sources: dict[Path, None] = {}
    for reference in references:
        if reference:
            sources.setdefault(book.asset_source(reference), None)
    return list(sources)


def plan_asset_records(
    sources: cabc.Iterable[Path], working_dir: Path
) -> list[AssetRecord]:
    """Assign each source a unique destination under ``working_dir``.

    The first source to claim a base name keeps it; later ones get the first
    unclaimed integer suffix. A style sheet claims its ``.css`` output name as
    well, so ``site.less`` and ``site.css`` never write the same file. A source
    literally named ``x.png_1`` that arrives after a suffixed ``x.png`` is
    pushed on to ``x.png_1_1``. The suffix counter has no upper bound.
    """
    base_dir = Path(os.path.abspath(working_dir))
    claimed: set[Path] = set()
    records: list[AssetRecord] = []
    for source in dict.fromkeys(sources):
        kind = AssetKind.for_path(source)
        record = AssetRecord(source, base_dir / source.name, kind)
        suffix = 0
        while {record.dest_path, record.output_path} & claimed:
            suffix += 1
            record = AssetRecord(source, base_dir / f"{source.name}_{suffix}", kind)
        claimed.update((record.dest_path, record.output_path))
        records.append(record)
    return records


def compile_less(
    text: str, source: Path, *, executable: str = LESS_EXECUTABLE
) -> str:
    """Compile LESS ``text`` to CSS with the ``lessc`` preprocessor.

    ``@import`` statements resolve relative to the source file's directory.
    """
    completed = subprocess.run(  # noqa: S603
        [executable, f"--include-path={source.parent}", "-"],
        input=text,
        check=True,
        text=True,
        capture_output=True,
        encoding="utf-8",
    )
    return completed.stdout


def _process_diagnostic(exc: subprocess.CalledProcessError) -> str:
    stderr = exc.stderr
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    detail = (stderr or "").strip()
    return detail or f"exited with status {exc.returncode}"


class AssetResolver:
    """Materialize every configured asset and return the resulting map."""

    def __init__(
        self,
        context: BuildContext,
        *,
        style_compiler: StyleCompiler | None = None,
    ) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        context : BuildContext
            Frozen configuration; supplies the asset list and working directory.
        style_compiler : callable, optional
            ``(text, source_path) -> css``; defaults to :func:`compile_less`.
        """
        self.context = context
        self.style_compiler = style_compiler or compile_less

    def plan(self) -> list[AssetRecord]:
        """Return the destination assignment without touching the filesystem."""
        return plan_asset_records(
            collect_asset_sources(self.context.book), self.context.working_dir
        )

    def run(self) -> AssetMap:
        """Resolve all assets synchronously; see :meth:`resolve`."""
        return asyncio.run(self.resolve())

    async def resolve(self) -> AssetMap:
        """Run every transform concurrently and wait for all of them.

        Raises
        ------
        AssetTransformError
            For the first transform that fails; the remaining tasks are
            cancelled and no map is returned.
        """
        records = self.plan()
        self.context.working_dir.mkdir(parents=True, exist_ok=True)
        try:
            async with asyncio.TaskGroup() as group:
                for record in records:
                    group.create_task(self._materialize(record))
        except ExceptionGroup as exc:
            raise exc.exceptions[0]  # noqa: B904
        return AssetMap(records)

    async def _materialize(self, record: AssetRecord) -> None:
        try:
            match record.kind:
                case AssetKind.STYLE_SHEET:
                    LOGGER.info(
                        "Processing LESS asset: %s => %s",
                        record.source_path,
                        record.output_path,
                    )
                    await asyncio.to_thread(self._compile_style, record)
                case AssetKind.TEMPLATE:
                    LOGGER.info(
                        "Processing XSL asset: %s => %s",
                        record.source_path,
                        record.dest_path,
                    )
                    await asyncio.to_thread(self._substitute_template, record)
                case AssetKind.VERBATIM:
                    LOGGER.info(
                        "Copying asset: %s => %s", record.source_path, record.dest_path
                    )
                    await asyncio.to_thread(
                        shutil.copyfile, record.source_path, record.dest_path
                    )
        except subprocess.CalledProcessError as exc:
            msg = (
                f"Unable to compile style sheet '{record.source_path}' "
                f"into '{record.output_path}': {_process_diagnostic(exc)}"
            )
            raise AssetTransformError(msg) from exc
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            msg = (
                f"Unable to process asset '{record.source_path}' "
                f"into '{record.output_path}': {exc}"
            )
            raise AssetTransformError(msg) from exc

    def _compile_style(self, record: AssetRecord) -> None:
        text = record.source_path.read_text(encoding="utf-8")
        css = self.style_compiler(text, record.source_path)
        record.output_path.write_text(css, encoding="utf-8")

    def _substitute_template(self, record: AssetRecord) -> None:
        text = record.source_path.read_text(encoding="utf-8")
        url = to_file_url(self.context.working_dir).replace("%20", " ")
        record.dest_path.write_text(
            text.replace(URL_PLACEHOLDER, url, 1), encoding="utf-8"
        )


def resolve_assets(
    context: BuildContext, *, style_compiler: StyleCompiler | None = None
) -> AssetMap:
    """Convenience wrapper returning :meth:`AssetResolver.run`."""
    return AssetResolver(context, style_compiler=style_compiler).run()


__all__ = [
    "AssetKind",
    "AssetMap",
    "AssetRecord",
    "AssetResolver",
    "AssetTransformError",
    "StyleCompiler",
    "collect_asset_sources",
    "compile_less",
    "plan_asset_records",
    "resolve_assets",
    "to_file_url",
]
