"""Bookmark tree reading and writing."""
from bookmark_export.core.outline.reader import OutlineReader, read_tree
from bookmark_export.core.outline.writer import OutlineWriter, write_tree

__all__ = [
    "OutlineReader",
    "OutlineWriter",
    "read_tree",
    "write_tree",
]
