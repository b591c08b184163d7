r"""Flatten the book's table of contents into an ordered page list.

The document builder renders the book summary as ``SUMMARY.html``; its outline
is a ``div.toc`` holding nested ``ol > li`` entries, each with a
``span > a[href]`` link. :func:`normalize_summary` parses that file with
BeautifulSoup and keeps a normalised copy next to it,
:func:`outline_roots` adapts the top-level entries to :class:`OutlineNode`, and
:func:`flatten_outline` walks any outline in pre-order.

Example
-------
>>> from bs4 import BeautifulSoup
>>> from wkbook.toc import flatten_outline, outline_roots
>>> soup = BeautifulSoup(
...     '<div class="toc"><ol><li><span><a href="a.html"> A </a></span>'
...     '<ol><li><span><a href="b.html">B</a></span></li></ol></li></ol></div>',
...     "html.parser",
... )
>>> [(p.locator, p.level) for p in flatten_outline(outline_roots(soup))]
[('a.html', 1), ('b.html', 2)]
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import dataclasses as dc
import logging
import typing as typ

from bs4 import BeautifulSoup, Doctype, Tag

from ._constants import MAX_OUTLINE_DEPTH, MAX_OUTLINE_NODES

if typ.TYPE_CHECKING:
    from .config import BuildContext

LOGGER = logging.getLogger(__name__)

OUTLINE_ROOT_SELECTOR = 'div[class*="toc"] > ol > li'
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'


class TocStructureError(ValueError):
    """Raised when the outline markup cannot be turned into a page list."""


class OutlineNode(typ.Protocol):
    """One table-of-contents entry, independent of the markup library."""

    @property
    def address(self) -> str: ...

    @property
    def label(self) -> str: ...

    @property
    def children(self) -> cabc.Sequence[OutlineNode]: ...


@dc.dataclass(frozen=True, slots=True)
class PageDescriptor:
    """A content page handed to the renderer.

    Attributes
    ----------
    locator : str
        Link target relative to the working directory.
    title : str
        Whitespace-normalised display label.
    level : int
        Nesting depth; top-level entries are ``1``.
    index : int
        1-based position in pre-order traversal.
    """

    locator: str
    title: str
    level: int
    index: int


def _normalize_space(text: str) -> str:
    return " ".join(text.split())


class HtmlOutlineNode:
    """Adapt an ``li`` element of the rendered summary to :class:`OutlineNode`."""

    __slots__ = ("element",)

    def __init__(self, element: Tag) -> None:
        self.element = element

    def _link(self) -> Tag:
        span = self.element.find("span", recursive=False)
        link = span.find("a", recursive=False) if isinstance(span, Tag) else None
        if not isinstance(link, Tag) or not link.get("href"):
            snippet = _normalize_space(self.element.get_text())[:60]
            msg = f"Outline entry has no 'span > a[href]' link: {snippet!r}"
            raise TocStructureError(msg)
        return link

    @property
    def address(self) -> str:
        return str(self._link()["href"])

    @property
    def label(self) -> str:
        return _normalize_space(self._link().get_text())

    @property
    def children(self) -> list[HtmlOutlineNode]:
        sublist = self.element.find("ol", recursive=False)
        if not isinstance(sublist, Tag):
            return []
        return [
            HtmlOutlineNode(item) for item in sublist.find_all("li", recursive=False)
        ]


def outline_roots(document: BeautifulSoup | Tag) -> list[HtmlOutlineNode]:
    """Return the top-level outline entries of a parsed summary."""
    return [HtmlOutlineNode(item) for item in document.select(OUTLINE_ROOT_SELECTOR)]


def flatten_outline(
    roots: cabc.Iterable[OutlineNode],
    *,
    max_depth: int = MAX_OUTLINE_DEPTH,
    max_nodes: int = MAX_OUTLINE_NODES,
) -> list[PageDescriptor]:
    """Flatten an outline in pre-order.

    Parameters
    ----------
    roots : iterable of OutlineNode
        Top-level entries in document order.
    max_depth : int, optional
        Deepest level accepted before the outline is rejected.
    max_nodes : int, optional
        Largest number of entries accepted before the outline is rejected.

    Returns
    -------
    list[PageDescriptor]
        One descriptor per entry; each entry is followed by its descendants
        before its next sibling.

    Raises
    ------
    TocStructureError
        If an entry has no link, or either ceiling is exceeded.
    """
    pages: list[PageDescriptor] = []
    stack: list[tuple[OutlineNode, int]] = [(node, 1) for node in reversed(list(roots))]
    while stack:
        node, level = stack.pop()
        if level > max_depth:
            msg = f"Outline is nested deeper than {max_depth} levels."
            raise TocStructureError(msg)
        if len(pages) >= max_nodes:
            msg = f"Outline has more than {max_nodes} entries."
            raise TocStructureError(msg)
        pages.append(
            PageDescriptor(
                locator=node.address,
                title=node.label,
                level=level,
                index=len(pages) + 1,
            )
        )
        stack.extend((child, level + 1) for child in reversed(node.children))
    return pages


def to_xhtml(document: BeautifulSoup) -> str:
    """Serialize ``document`` as well-formed XHTML.

    The doctype is dropped, the root ``html`` element carries the XHTML
    namespace, and void elements are self-closed. ``document`` is left
    untouched.
    """
    xhtml = copy.copy(document)
    for node in list(xhtml.contents):
        if isinstance(node, Doctype):
            node.extract()
    root = xhtml.find("html")
    if not isinstance(root, Tag):
        root = xhtml.new_tag("html")
        for node in list(xhtml.contents):
            root.append(node.extract())
        xhtml.append(root)
    root["xmlns"] = XHTML_NAMESPACE
    return XML_DECLARATION + xhtml.prettify()


def normalize_summary(context: BuildContext) -> BeautifulSoup:
    """Parse the builder's summary and write it back out as XHTML.

    Returns the parsed document so the caller can flatten it without reading
    the file twice.
    """
    source = context.summary_html
    if not source.exists():
        msg = f"Rendered summary '{source}' not found; was the book built?"
        raise FileNotFoundError(msg)
    soup = BeautifulSoup(source.read_text(encoding="utf-8"), "html.parser")
    context.summary_xhtml.write_text(to_xhtml(soup), encoding="utf-8")
    LOGGER.debug("Normalised summary written to %s", context.summary_xhtml)
    return soup


def load_pages(context: BuildContext) -> list[PageDescriptor]:
    """Normalise the summary and return its flattened page list."""
    return flatten_outline(outline_roots(normalize_summary(context)))


__all__ = [
    "OUTLINE_ROOT_SELECTOR",
    "HtmlOutlineNode",
    "OutlineNode",
    "PageDescriptor",
    "TocStructureError",
    "flatten_outline",
    "load_pages",
    "normalize_summary",
    "outline_roots",
    "to_xhtml",
]
