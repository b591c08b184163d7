"""Thin wrappers around the external document builder and PDF renderer.

:func:`build_book` runs ``gitbook build`` to materialize the book into the
working directory; :func:`run_renderer` runs wkhtmltopdf with a hard timeout.
Neither retries.
"""

from __future__ import annotations

import logging
import os
import subprocess
import typing as typ

from ._constants import BUILDER_EXECUTABLE, DEFAULT_RENDER_TIMEOUT

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import BuildContext
    from .render_plan import RenderPlan

LOGGER = logging.getLogger(__name__)


class ExternalProcessError(RuntimeError):
    """Raised when the builder or renderer cannot run or fails."""


class RendererTimeoutError(ExternalProcessError):
    """Raised when the renderer is killed for exceeding its time budget."""


def needs_build(context: BuildContext) -> bool:
    """Return whether the document builder has to run.

    A build is skipped only when rebuilding is suppressed and the working
    directory already exists.
    """
    return context.options.build or not context.working_dir.is_dir()


def build_book(context: BuildContext, *, executable: str = BUILDER_EXECUTABLE) -> bool:
    """Materialize the book into the working directory when needed.

    Returns
    -------
    bool
        ``True`` when the builder ran, ``False`` when it was skipped.

    Raises
    ------
    ExternalProcessError
        If the builder is missing or exits with a non-zero status.
    """
    if not needs_build(context):
        return False
    args = [
        executable,
        "build",
        ".",
        os.path.abspath(context.working_dir),
        "--format",
        "ebook",
    ]
    LOGGER.info("Running GitBook: %s", " ".join(args))
    try:
        subprocess.run(  # noqa: S603
            args,
            check=True,
            cwd=context.book.base_dir,
        )
    except FileNotFoundError as exc:
        msg = f"Document builder '{executable}' was not found on PATH."
        raise ExternalProcessError(msg) from exc
    except subprocess.CalledProcessError as exc:
        msg = f"Document builder exited with status {exc.returncode}."
        raise ExternalProcessError(msg) from exc
    return True


def run_renderer(
    plan: RenderPlan,
    *,
    working_dir: Path,
    timeout: float = DEFAULT_RENDER_TIMEOUT,
) -> int:
    """Run the renderer from ``working_dir`` and return its exit status.

    Standard streams are inherited. A negative status means the renderer was
    terminated by that signal.

    Raises
    ------
    RendererTimeoutError
        If the renderer runs longer than ``timeout`` seconds; it is killed.
    ExternalProcessError
        If the renderer executable cannot be found.
    """
    LOGGER.info("Launching %s:", plan.executable)
    try:
        completed = subprocess.run(  # noqa: S603
            plan.command,
            cwd=working_dir,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        msg = f"Renderer '{plan.executable}' was not found on PATH."
        raise ExternalProcessError(msg) from exc
    except subprocess.TimeoutExpired as exc:
        msg = f"Renderer did not finish within {timeout:g} seconds and was killed."
        raise RendererTimeoutError(msg) from exc
    return completed.returncode


__all__ = [
    "ExternalProcessError",
    "RendererTimeoutError",
    "build_book",
    "needs_build",
    "run_renderer",
]
