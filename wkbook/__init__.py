"""Compile a GitBook into a single PDF by driving wkhtmltopdf.

The package resolves book assets into the GitBook ebook directory, flattens the
rendered summary into an ordered page list, and assembles the wkhtmltopdf
invocation (cover, TOC, and one section per page).

Exports
-------
- ``app``: Cyclopts application for the ``wkbook`` command.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from wkbook import main
>>> main()  # doctest: +SKIP
>>> from wkbook import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
