"""
Bookmark tree domain models.

A BookmarkTree is the outline of one document: an ordered list of root
BookmarkNode values, each carrying its own ordered children. Nodes carry
two store-scoped identifiers: the id issued by the store the node was read
from, and the id issued by the store it was written to.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from bookmark_export.core.exceptions import ValidationError


class ZoomMode(IntEnum):
    """Zoom behaviour of a bookmark destination view."""
    XYZ = 1
    FIT = 2
    FIT_H = 3
    FIT_V = 4
    FIT_R = 5
    FIT_B = 6
    FIT_BH = 7
    FIT_BV = 8


class Relationship(IntEnum):
    """Placement of a new bookmark relative to its reference bookmark."""
    FIRST_CHILD = 0
    LAST_CHILD = 1
    PREVIOUS_SIBLING = 2
    NEXT_SIBLING = 3


def _zoom_mode(value: Any) -> Union[ZoomMode, int]:
    # Stores may report modes this enum does not know; keep them verbatim.
    try:
        return ZoomMode(value)
    except ValueError:
        return value


@dataclass
class BookmarkNode:
    """One bookmark and its subtree."""
    title: str
    page: int
    left: float = 0.0
    top: float = 0.0
    zoom_factor: float = 0.0
    zoom_mode: Union[ZoomMode, int] = ZoomMode.XYZ
    color: Any = None
    is_bold: bool = False
    is_italic: bool = False
    children: List["BookmarkNode"] = field(default_factory=list)
    source_id: Any = None
    dest_id: Any = None

    @property
    def id(self) -> Any:
        """Destination id once written, source id before that."""
        return self.dest_id if self.dest_id is not None else self.source_id

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        children: Optional[List["BookmarkNode"]] = None,
    ) -> "BookmarkNode":
        """
        Build a node from a raw source-store record.

        Args:
            record: Mapping with id, title, page, left, top, zoomFactor,
                zoomMode, color, isBold, isItalic
            children: Already materialized child nodes, in display order

        Returns:
            BookmarkNode with source_id set from the record

        Raises:
            ValidationError: If title or page is missing
        """
        missing = [key for key in ("title", "page") if record.get(key) is None]
        if missing:
            raise ValidationError(
                f"Bookmark record {record.get('id')!r} is missing {', '.join(missing)}"
            )

        return cls(
            title=record["title"],
            page=record["page"],
            left=record.get("left", 0.0),
            top=record.get("top", 0.0),
            zoom_factor=record.get("zoomFactor", 0.0),
            zoom_mode=_zoom_mode(record.get("zoomMode", ZoomMode.XYZ)),
            color=record.get("color"),
            is_bold=bool(record.get("isBold", False)),
            is_italic=bool(record.get("isItalic", False)),
            children=list(children or []),
            source_id=record.get("id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "page": self.page,
            "left": self.left,
            "top": self.top,
            "zoom_factor": self.zoom_factor,
            "zoom_mode": int(self.zoom_mode),
            "color": list(self.color) if isinstance(self.color, tuple) else self.color,
            "is_bold": self.is_bold,
            "is_italic": self.is_italic,
            "children": [child.to_dict() for child in self.children],
        }


BookmarkTree = List[BookmarkNode]


@dataclass
class Destination:
    """Target view of a bookmark."""
    page_index: int
    left: float = 0.0
    top: float = 0.0
    zoom_factor: float = 0.0
    zoom_mode: Union[ZoomMode, int] = ZoomMode.XYZ


@dataclass
class Style:
    """Font style flags of a bookmark title."""
    bold: bool = False
    italic: bool = False


@dataclass
class BookmarkSpec:
    """Insert request for a destination bookmark store."""
    title: str
    destination: Destination
    style: Style = field(default_factory=Style)
    color: Any = None
    parent_id: Any = None
    relationship: Relationship = Relationship.LAST_CHILD

    @classmethod
    def for_node(cls, node: BookmarkNode, parent_id: Any = None) -> "BookmarkSpec":
        """Build the insert request for a node placed last under parent_id."""
        return cls(
            title=node.title,
            destination=Destination(
                page_index=node.page,
                left=node.left,
                top=node.top,
                zoom_factor=node.zoom_factor,
                zoom_mode=node.zoom_mode,
            ),
            style=Style(bold=node.is_bold, italic=node.is_italic),
            color=node.color,
            parent_id=parent_id,
            relationship=Relationship.LAST_CHILD,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Render the camelCase record understood by bookmark stores."""
        return {
            "color": self.color,
            "destination": {
                "pageIndex": self.destination.page_index,
                "left": self.destination.left,
                "top": self.destination.top,
                "zoomFactor": self.destination.zoom_factor,
                "zoomMode": int(self.destination.zoom_mode),
            },
            "style": {
                "bold": self.style.bold,
                "italic": self.style.italic,
            },
            "title": self.title,
            "destId": self.parent_id,
            "relationship": int(self.relationship),
        }


def iter_nodes(tree: BookmarkTree) -> Iterator[BookmarkNode]:
    """Yield every node of the tree depth-first, parents before children."""
    for node in tree:
        yield node
        yield from iter_nodes(node.children)


def count_nodes(tree: BookmarkTree) -> int:
    """Total number of bookmarks in the tree."""
    return sum(1 for _ in iter_nodes(tree))


def tree_depth(tree: BookmarkTree) -> int:
    """Number of levels in the tree (0 for an empty tree)."""
    if not tree:
        return 0
    return 1 + max(tree_depth(node.children) for node in tree)
