"""
Outline writer - recreates a bookmark tree in a destination store.

Ordering rules:
1. A bookmark is inserted only after its parent's insert returned an id.
2. Siblings are inserted one after another in source order, so appending
   each as the parent's last child reproduces the source order.
3. Once a bookmark has its id, its subtree is written concurrently with the
   siblings that follow it.

Any failure cancels the remaining work, including inserts of siblings and
subtrees elsewhere in the tree that are still in flight. Bookmarks already
inserted stay in the destination store.
"""
import asyncio
import logging
from typing import Any, List, Optional, Tuple

from bookmark_export.core.exceptions import InsertionError
from bookmark_export.core.models.bookmark import BookmarkNode, BookmarkSpec, BookmarkTree
from bookmark_export.core.outline.concurrency import call_limiter, cancel_all, gather_ordered
from bookmark_export.core.ports.bookmarks import DestinationBookmarkStore

logger = logging.getLogger(__name__)


class OutlineWriter:
    """
    Writes a bookmark tree into a destination store.

    Usage:
        writer = OutlineWriter(store)
        inserted = await writer.write(tree)
    """

    def __init__(self, store: DestinationBookmarkStore, max_concurrency: Optional[int] = None):
        """
        Initialize writer.

        Args:
            store: Destination bookmark store
            max_concurrency: Maximum add_bookmark calls in flight (None = unlimited)
        """
        self._store = store
        self._limiter = call_limiter(max_concurrency)
        self._inserted = 0
        self._root: Optional["asyncio.Future[None]"] = None
        self._failure: Optional[BaseException] = None

    async def write(self, tree: BookmarkTree) -> int:
        """
        Insert every node of the tree, roots at the store's top level.

        Sets dest_id on each node as it is inserted.

        Args:
            tree: Root nodes in display order

        Returns:
            Number of bookmarks inserted

        Raises:
            InsertionError: If any insert failed; earlier inserts are kept
        """
        self._inserted = 0
        self._failure = None
        if not tree:
            logger.info("OutlineWriter: empty tree, nothing to write")
            return 0

        self._root = asyncio.ensure_future(self._write_level(tree, None))
        try:
            await self._root
        except asyncio.CancelledError:
            # Set when a subtree task failed; otherwise the caller cancelled us.
            if self._failure is None:
                raise
            error = self._failure
        except InsertionError as e:
            error = self._failure or e
        else:
            logger.info(f"OutlineWriter: {self._inserted} bookmarks written")
            return self._inserted
        finally:
            self._root = None

        logger.error(f"OutlineWriter: aborted after {self._inserted} bookmarks: {error}")
        raise error

    async def _write_level(self, nodes: List[BookmarkNode], parent_id: Any) -> None:
        subtrees: List["asyncio.Future[None]"] = []
        try:
            for node in nodes:
                _, subtree = await self._write_node(node, parent_id)
                if subtree is not None:
                    subtrees.append(subtree)
        except BaseException:
            await cancel_all(subtrees)
            raise
        await gather_ordered(subtrees)

    async def _write_node(
        self, node: BookmarkNode, parent_id: Any
    ) -> Tuple[Any, Optional["asyncio.Future[None]"]]:
        """Insert one node, then start writing its children under the new id."""
        new_id = await self._insert(node, parent_id)
        if not node.children:
            return new_id, None
        subtree = asyncio.ensure_future(self._write_level(node.children, new_id))
        subtree.add_done_callback(self._subtree_done)
        return new_id, subtree

    def _subtree_done(self, task: "asyncio.Future[None]") -> None:
        """Abandon the whole write as soon as any subtree fails."""
        if task.cancelled():
            return
        error = task.exception()
        if error is None or self._failure is not None:
            return
        self._failure = error
        if self._root is not None:
            self._root.cancel()

    async def _insert(self, node: BookmarkNode, parent_id: Any) -> Any:
        spec = BookmarkSpec.for_node(node, parent_id)
        try:
            async with self._limiter:
                new_id = await self._store.add_bookmark(spec)
        except InsertionError:
            raise
        except Exception as e:
            raise InsertionError(
                f"Failed to insert bookmark {node.title!r}: {e}",
                title=node.title,
                parent_id=parent_id,
            ) from e

        if new_id is None:
            raise InsertionError(
                f"Store returned no id for bookmark {node.title!r}",
                title=node.title,
                parent_id=parent_id,
            )

        node.dest_id = new_id
        self._inserted += 1
        logger.debug(f"Inserted {node.title!r} as {new_id!r} under {parent_id!r}")
        return new_id


async def write_tree(
    store: DestinationBookmarkStore,
    tree: BookmarkTree,
    max_concurrency: Optional[int] = None,
) -> int:
    """
    Recreate a bookmark tree in a destination store.

    Args:
        store: Destination bookmark store
        tree: Tree produced by read_tree
        max_concurrency: Maximum add_bookmark calls in flight (None = unlimited)

    Returns:
        Number of bookmarks inserted
    """
    return await OutlineWriter(store, max_concurrency).write(tree)
