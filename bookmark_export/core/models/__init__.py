"""Domain models and entities.

Bookmark tree structures shared by the outline reader and writer.
"""

from bookmark_export.core.models.bookmark import (
    BookmarkNode,
    BookmarkSpec,
    BookmarkTree,
    Destination,
    Relationship,
    Style,
    ZoomMode,
    count_nodes,
    iter_nodes,
    tree_depth,
)

__all__ = [
    "BookmarkNode",
    "BookmarkSpec",
    "BookmarkTree",
    "Destination",
    "Relationship",
    "Style",
    "ZoomMode",
    "count_nodes",
    "iter_nodes",
    "tree_depth",
]
