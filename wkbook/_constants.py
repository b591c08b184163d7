"""Common literal values used across wkbook.

These constants keep file names, defaults, and renderer tokens centralized so
the resolver, the invocation builder, the CLI, and the tests agree on them.
Intended for internal use within the wkbook package.

Examples
--------
>>> from wkbook import _constants
>>> _constants.URL_PLACEHOLDER
'%url_current_dir%'
>>> _constants.DEFAULT_RENDER_TIMEOUT
200.0
"""

DEFAULT_CONFIG_FILE = "book.json"
DEFAULT_EBOOK_DIRECTORY = "_ebook"
DEFAULT_OUTPUT_FILE = "book_wk.pdf"
DEFAULT_ZOOM = 1.2
DEFAULT_JAVASCRIPT_DELAY = 1000
DEFAULT_SUMMARY = "SUMMARY.md"

# wkhtmltopdf can loop forever on some inputs.
DEFAULT_RENDER_TIMEOUT = 200.0

RENDERER_EXECUTABLE = "wkhtmltopdf"
BUILDER_EXECUTABLE = "gitbook"

URL_PLACEHOLDER = "%url_current_dir%"
SUMMARY_HTML_SUFFIX = ".html"
SUMMARY_XHTML_SUFFIX = ".xhtml"

MAX_OUTLINE_DEPTH = 64
MAX_OUTLINE_NODES = 10_000
LESS_EXECUTABLE = "lessc"
