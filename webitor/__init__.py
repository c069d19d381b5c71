"""
Webitor: JSON-bound pages with inline editing.

Components:
  paths     : dotted/bracket path resolution over JSON (resolve, assign)
  renderer  : paints data-bind annotations and expands data-repeat templates
  editing   : toggles inline editing, writes edits back on focus loss
  diff      : changelist between the original and working data
  component : one page + one content file, the API the host extension drives
"""

from webitor.component import WebitorComponent
from webitor.diff import diff
from webitor.document import MemoryDocument, parse_html
from webitor.paths import TraversalError, assign, resolve
from webitor.types import UNDEFINED, ChangeRecord, Snapshot

__version__ = "0.1.0"

__all__ = [
    "WebitorComponent",
    "MemoryDocument",
    "parse_html",
    "resolve",
    "assign",
    "diff",
    "TraversalError",
    "ChangeRecord",
    "Snapshot",
    "UNDEFINED",
]
