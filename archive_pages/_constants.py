"""Common literal values used across archive_pages.

These constants keep filenames and archive layout names centralized so the
orchestrator, the page builders, and tests can import the same values without
drifting. Intended for internal use within the archive_pages package.

Examples
--------
>>> from archive_pages import _constants
>>> _constants.SEARCH_INDEX_FILENAME
'search-index.json'
>>> _constants.PAGE_FILENAME
'index.html'
"""

PAGE_FILENAME = "index.html"
SEARCH_INDEX_FILENAME = "search-index.json"
STYLESHEET_PATH = "css/main.css"
SEARCH_SCRIPT_PATH = "js/search.js"
LUNR_SCRIPT_PATH = "js/lunr.min.js"

ARCHIVE_DATA_DIR = "data"
ARCHIVE_DOCUMENTATION_DIR = "documentation"
ARCHIVE_TUTORIALS_DIR = "tutorials"
ARCHIVE_INDEX_PATH = ("index", "index.json")
ARCHIVE_MEDIA_DIRS = ("images", "downloads", "videos")

DEFAULT_LANGUAGE = "swift"
DEFAULT_OUTPUT_DIR = ".build/documentation"
DEFAULT_PORT = 8080

DEFAULT_FOOTER = "Generated with archive-pages from a documentation archive."
