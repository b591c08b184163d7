"""Tests for the builder and renderer process wrappers.

Renderer tests run a real child Python interpreter in place of wkhtmltopdf so
exit statuses, working directories, and the hard timeout are exercised end to
end. Builder tests stub :func:`subprocess.run`.
"""

from __future__ import annotations

import subprocess
import sys
import time
import typing as typ
from pathlib import Path

import pytest

from wkbook.config import BookConfig, BuildContext, CompileOptions
from wkbook.driver import (
    ExternalProcessError,
    RendererTimeoutError,
    build_book,
    needs_build,
    run_renderer,
)
from wkbook.render_plan import RenderPlan


def _python_plan(code: str) -> RenderPlan:
    return RenderPlan(sys.executable, ("-c", code))


def _context(tmp_path: Path, *, build: bool) -> BuildContext:
    book = BookConfig(base_dir=tmp_path, root=tmp_path)
    options = CompileOptions(ebook_directory=tmp_path / "_ebook", build=build)
    return BuildContext(book, options)


def test_renderer_exit_status_is_returned(tmp_path: Path) -> None:
    status = run_renderer(_python_plan("import sys; sys.exit(3)"), working_dir=tmp_path)
    assert status == 3


def test_renderer_runs_in_working_dir(tmp_path: Path) -> None:
    code = "import pathlib; pathlib.Path('marker.txt').write_text('here')"
    assert run_renderer(_python_plan(code), working_dir=tmp_path) == 0
    assert (tmp_path / "marker.txt").read_text() == "here"


def test_hung_renderer_is_killed(tmp_path: Path) -> None:
    started = time.monotonic()
    with pytest.raises(RendererTimeoutError, match="killed"):
        run_renderer(
            _python_plan("import time; time.sleep(60)"),
            working_dir=tmp_path,
            timeout=0.5,
        )
    assert time.monotonic() - started < 30


def test_missing_renderer(tmp_path: Path) -> None:
    plan = RenderPlan("wkbook-no-such-renderer", ("toc", "out.pdf"))
    with pytest.raises(ExternalProcessError, match="not found"):
        run_renderer(plan, working_dir=tmp_path)


def test_build_skipped_when_suppressed_and_present(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    context = _context(tmp_path, build=False)
    context.working_dir.mkdir()

    def fail(*args: object, **kwargs: object) -> None:
        pytest.fail("builder should not run")

    monkeypatch.setattr("wkbook.driver.subprocess.run", fail)
    assert not needs_build(context)
    assert build_book(context) is False


@pytest.mark.parametrize("build", [True, False])
def test_build_runs_gitbook(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, build: bool
) -> None:
    context = _context(tmp_path, build=build)
    calls: list[tuple[list[str], dict[str, typ.Any]]] = []

    def record(args: list[str], **kwargs: typ.Any) -> subprocess.CompletedProcess[str]:
        calls.append((args, kwargs))
        return subprocess.CompletedProcess(args, 0)

    monkeypatch.setattr("wkbook.driver.subprocess.run", record)
    assert build_book(context) is True
    ((args, kwargs),) = calls
    assert args == [
        "gitbook", "build", ".", str(tmp_path / "_ebook"), "--format", "ebook",
    ]  # fmt: skip
    assert kwargs["cwd"] == tmp_path
    assert kwargs["check"] is True


def test_build_failure_is_external_process_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def explode(args: list[str], **kwargs: typ.Any) -> None:
        raise subprocess.CalledProcessError(2, args)

    monkeypatch.setattr("wkbook.driver.subprocess.run", explode)
    with pytest.raises(ExternalProcessError, match="status 2"):
        build_book(_context(tmp_path, build=True))
