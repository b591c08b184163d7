"""Cyclopts CLI entrypoint for compiling a GitBook into a PDF with wkhtmltopdf.

The ``wkbook`` console script defined here loads ``book.json``, optionally
rebuilds the book with GitBook, stages assets and the summary in the ebook
directory, and runs wkhtmltopdf with the assembled arguments. It has a single
invocation mode and no subcommands; every option can also be supplied through
an ``WKBOOK_*`` environment variable.

Examples
--------
Compile the book in the current directory without rebuilding it:

>>> from wkbook.cli import app
>>> app(["--no-build", "--output-file", "book.pdf"])  # doctest: +SKIP

Print the renderer command instead of running it:

>>> app(["--dry-run"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import shlex
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter, validators

from ._constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_EBOOK_DIRECTORY,
    DEFAULT_JAVASCRIPT_DELAY,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_RENDER_TIMEOUT,
    DEFAULT_ZOOM,
)
from .assets import AssetTransformError
from .config import BookConfigError, BuildContext, CompileOptions, load_book_config
from .driver import ExternalProcessError
from .pipeline import BookPdfCompiler
from .toc import TocStructureError

LOGGER = logging.getLogger(__name__)

app = App(name="wkbook", config=cyclopts.config.Env("WKBOOK_", command=False))  # type: ignore[unknown-argument]

CompileErrors = (
    AssetTransformError,
    BookConfigError,
    ExternalProcessError,
    FileNotFoundError,
    TocStructureError,
)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        force=True,
    )


@app.default
def compile_book(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the book settings file")
    ] = Path(DEFAULT_CONFIG_FILE),
    ebook_directory: typ.Annotated[
        Path,
        Parameter(
            name=["--ebook-directory", "-D"],
            help="Temporary directory holding the generated ebook",
        ),
    ] = Path(DEFAULT_EBOOK_DIRECTORY),
    output_file: typ.Annotated[
        Path, Parameter(name=["--output-file", "-o"], help="Output PDF file")
    ] = Path(DEFAULT_OUTPUT_FILE),
    zoom: typ.Annotated[
        float,
        Parameter(
            name=["--zoom", "-z"],
            help="Zoom level; the default offsets Qt smart shrink",
        ),
    ] = DEFAULT_ZOOM,
    javascript_delay: typ.Annotated[
        int,
        Parameter(
            name=["--javascript-delay", "-j"],
            help="Milliseconds allowed for page JavaScript to finish",
            validator=validators.Number(gte=0),
        ),
    ] = DEFAULT_JAVASCRIPT_DELAY,
    build: typ.Annotated[
        bool,
        Parameter(
            negative=["--no-build", "-n"],
            help="Rebuild the ebook directory with GitBook",
        ),
    ] = True,
    timeout: typ.Annotated[
        float,
        Parameter(
            help="Seconds before a hung renderer is killed",
            validator=validators.Number(gt=0),
        ),
    ] = DEFAULT_RENDER_TIMEOUT,
    dry_run: typ.Annotated[
        bool, Parameter(help="Print the renderer command instead of running it")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log the renderer tokens")] = False,
) -> None:
    """Compile the configured book into a single PDF.

    Parameters
    ----------
    config : Path, optional
        Settings file (``book.json`` by default); its directory is where GitBook
        runs and what ``root`` is resolved against.
    ebook_directory : Path, optional
        Working directory for the built book, resolved assets, and summary.
    output_file : Path, optional
        Destination PDF, relative to the current directory.
    zoom : float, optional
        Zoom factor applied to every section.
    javascript_delay : int, optional
        Non-negative JavaScript delay in milliseconds.
    build : bool, optional
        When ``False`` (``--no-build``) an existing ebook directory is reused.
    timeout : float, optional
        Hard limit for the renderer run, in seconds.
    dry_run : bool, optional
        Stage everything and print the renderer command without running it.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    SystemExit
        With the renderer's exit status when it is non-zero.
    """
    _configure_logging(verbose=verbose)
    book = load_book_config(config)
    options = CompileOptions(
        ebook_directory=ebook_directory,
        output_file=output_file,
        zoom=zoom,
        javascript_delay=javascript_delay,
        build=build,
        timeout=timeout,
    )
    compiler = BookPdfCompiler(BuildContext(book, options))
    if dry_run:
        print(shlex.join(compiler.prepare().command))
        return
    status = compiler.run()
    if status != 0:
        LOGGER.error("wkhtmltopdf exited with status %s", status)
        raise SystemExit(status if status > 0 else 1)
    print(f"wrote {output_file}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``wkbook`` command.

    Compile failures are logged as a one-line diagnostic and turned into exit
    status 1.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    try:
        app()
    except CompileErrors as exc:
        LOGGER.error("wkbook: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
