"""
Outline reader - materializes a document's bookmark tree.

Every node's children are fetched with one store call; sibling subtrees are
read concurrently and reassembled in the order the store listed them.
"""
import logging
from typing import Any, List, Mapping, Optional

from bookmark_export.core.exceptions import EnumerationError, ValidationError
from bookmark_export.core.models.bookmark import BookmarkNode, BookmarkTree, count_nodes
from bookmark_export.core.outline.concurrency import call_limiter, gather_ordered
from bookmark_export.core.ports.bookmarks import SourceBookmarkStore

logger = logging.getLogger(__name__)


class OutlineReader:
    """
    Reads the full bookmark tree of a source store.

    Usage:
        reader = OutlineReader(store, max_concurrency=8)
        tree = await reader.read()
    """

    def __init__(self, store: SourceBookmarkStore, max_concurrency: Optional[int] = None):
        """
        Initialize reader.

        Args:
            store: Source bookmark store
            max_concurrency: Maximum get_children calls in flight (None = unlimited)
        """
        self._store = store
        self._limiter = call_limiter(max_concurrency)

    async def read(self) -> BookmarkTree:
        """
        Snapshot the store's bookmark tree.

        Returns:
            Root nodes in display order with fully populated subtrees

        Raises:
            EnumerationError: If any node's children could not be listed
            ValidationError: If the store returned a malformed record
        """
        tree = await self._read_level(None)
        logger.info(f"OutlineReader: {count_nodes(tree)} bookmarks, {len(tree)} roots")
        return tree

    async def _read_level(
        self, parent_id: Any, title: Optional[str] = None
    ) -> List[BookmarkNode]:
        records = await self._fetch_children(parent_id, title)
        return await gather_ordered(self._read_node(record) for record in records)

    async def _read_node(self, record: Mapping[str, Any]) -> BookmarkNode:
        # A record without an id would be listed as the root level again.
        if record.get("id") is None:
            raise ValidationError(f"Bookmark record {record.get('title')!r} has no id")
        children = await self._read_level(record["id"], record.get("title"))
        return BookmarkNode.from_record(record, children)

    async def _fetch_children(
        self, parent_id: Any, title: Optional[str]
    ) -> List[Mapping[str, Any]]:
        try:
            async with self._limiter:
                records = await self._store.get_children(parent_id)
        except EnumerationError:
            raise
        except Exception as e:
            where = "root level" if parent_id is None else f"bookmark {title!r} (id {parent_id!r})"
            raise EnumerationError(
                f"Failed to list children of {where}: {e}",
                parent_id=parent_id,
                title=title,
            ) from e

        records = list(records or [])
        logger.debug(f"Listed {len(records)} children of {parent_id!r}")
        return records


async def read_tree(
    store: SourceBookmarkStore, max_concurrency: Optional[int] = None
) -> BookmarkTree:
    """
    Read the full bookmark tree of a source store.

    Args:
        store: Source bookmark store
        max_concurrency: Maximum get_children calls in flight (None = unlimited)

    Returns:
        BookmarkTree with source_id set on every node
    """
    return await OutlineReader(store, max_concurrency).read()
