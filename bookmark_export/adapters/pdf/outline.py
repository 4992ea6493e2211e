"""
PyMuPDF bookmark stores.

PyMuPDF exposes a document outline as a flat table of contents
(doc.get_toc / doc.set_toc) rather than as an editable tree, so:

- PyMuPDFOutlineReader indexes a TOC once and serves children from it;
  ids are TOC row indices.
- PyMuPDFOutlineWriter collects inserts under generated ids and renders
  them back into a TOC for doc.set_toc.

TOC pages are 1-indexed; BookmarkNode pages are 0-indexed (-1 = no target).
"""
import itertools
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import fitz

from bookmark_export.core.exceptions import PDFError, ValidationError
from bookmark_export.core.models.bookmark import BookmarkSpec, Relationship, ZoomMode
from bookmark_export.core.ports.bookmarks import DestinationBookmarkStore, SourceBookmarkStore

logger = logging.getLogger(__name__)


def _row_to_record(index: int, row: Sequence[Any]) -> Dict[str, Any]:
    """Convert a get_toc(simple=False) row to a raw bookmark record."""
    _, title, page = row[0], row[1], row[2]
    dest = row[3] if len(row) > 3 and isinstance(row[3], dict) else {}
    to = dest.get("to")
    color = dest.get("color")

    return {
        "id": index,
        "title": title,
        "page": page - 1 if page > 0 else -1,
        "left": float(to[0]) if to is not None else 0.0,
        "top": float(to[1]) if to is not None else 0.0,
        "zoomFactor": float(dest.get("zoom") or 0.0),
        "zoomMode": int(ZoomMode.XYZ),
        "color": tuple(color) if color else None,
        "isBold": bool(dest.get("bold", False)),
        "isItalic": bool(dest.get("italic", False)),
    }


class PyMuPDFOutlineReader(SourceBookmarkStore):
    """Source bookmark store over a PyMuPDF table of contents."""

    def __init__(self, toc: Sequence[Sequence[Any]]):
        """
        Index a table of contents.

        Args:
            toc: Rows from doc.get_toc(simple=False): [level, title, page, dest]
        """
        self._records: Dict[int, Dict[str, Any]] = {}
        self._children: Dict[Optional[int], List[int]] = {None: []}

        # (level, row index) of the current ancestor chain
        stack: List[tuple] = []
        for index, row in enumerate(toc):
            level = row[0]
            while stack and stack[-1][0] >= level:
                stack.pop()
            parent = stack[-1][1] if stack else None
            self._children[parent].append(index)
            self._children[index] = []
            self._records[index] = _row_to_record(index, row)
            stack.append((level, index))

        logger.debug(f"Indexed {len(self._records)} TOC entries")

    @classmethod
    def from_document(cls, doc: "fitz.Document") -> "PyMuPDFOutlineReader":
        """Index the outline of an open document."""
        try:
            toc = doc.get_toc(simple=False)
        except Exception as e:
            raise PDFError(f"Failed to read outline: {e}") from e
        return cls(toc)

    async def get_children(self, parent_id: Optional[Any] = None) -> List[Mapping[str, Any]]:
        """List the direct children of a TOC entry (None = top level)."""
        if parent_id not in self._children:
            raise PDFError(f"Unknown bookmark id {parent_id!r}")
        return [dict(self._records[i]) for i in self._children[parent_id]]


class PyMuPDFOutlineWriter(DestinationBookmarkStore):
    """Destination bookmark store rendered with doc.set_toc."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._specs: Dict[int, BookmarkSpec] = {}
        self._children: Dict[Optional[int], List[int]] = {None: []}

    def __len__(self) -> int:
        return len(self._specs)

    async def add_bookmark(self, spec: BookmarkSpec) -> int:
        """Append a bookmark as the last child of spec.parent_id."""
        if spec.relationship != Relationship.LAST_CHILD:
            raise ValidationError(
                f"Unsupported relationship {spec.relationship!r}; only LAST_CHILD is supported"
            )
        if spec.parent_id not in self._children:
            raise PDFError(f"Unknown parent bookmark id {spec.parent_id!r}")

        new_id = next(self._ids)
        self._specs[new_id] = spec
        self._children[new_id] = []
        self._children[spec.parent_id].append(new_id)
        return new_id

    def to_toc(self) -> List[List[Any]]:
        """Render the collected bookmarks as set_toc rows, depth-first."""
        rows: List[List[Any]] = []

        def emit(parent_id: Optional[int], level: int) -> None:
            for bookmark_id in self._children[parent_id]:
                rows.append(self._row(self._specs[bookmark_id], level))
                emit(bookmark_id, level + 1)

        emit(None, 1)
        return rows

    def apply(self, doc: "fitz.Document") -> None:
        """Replace the document's outline with the collected bookmarks."""
        if not self._specs:
            return
        try:
            doc.set_toc(self.to_toc())
        except Exception as e:
            raise PDFError(f"Failed to write outline: {e}") from e
        logger.info(f"Wrote {len(self._specs)} outline entries")

    @staticmethod
    def _row(spec: BookmarkSpec, level: int) -> List[Any]:
        destination = spec.destination
        page = destination.page_index + 1 if destination.page_index >= 0 else -1
        dest: Dict[str, Any] = {
            "kind": fitz.LINK_GOTO if page > 0 else fitz.LINK_NONE,
            "to": fitz.Point(destination.left, destination.top),
            "zoom": destination.zoom_factor,
            "bold": spec.style.bold,
            "italic": spec.style.italic,
        }
        if spec.color is not None:
            dest["color"] = tuple(spec.color)
        return [level, spec.title, page, dest]
