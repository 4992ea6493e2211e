"""Tests for bookmark models."""
import pytest

from bookmark_export.core.exceptions import ValidationError
from bookmark_export.core.models.bookmark import (
    BookmarkNode,
    BookmarkSpec,
    Relationship,
    ZoomMode,
    count_nodes,
    iter_nodes,
    tree_depth,
)


def make_tree():
    return [
        BookmarkNode("A", 0, children=[
            BookmarkNode("A1", 1, children=[BookmarkNode("A1a", 1)]),
            BookmarkNode("A2", 2),
        ]),
        BookmarkNode("B", 3),
    ]


class TestBookmarkNode:

    def test_from_record_maps_fields(self):
        record = {
            "id": 42, "title": "Intro", "page": 3, "left": 1.0, "top": 2.0,
            "zoomFactor": 0.5, "zoomMode": 3, "color": "#ff0000",
            "isBold": True, "isItalic": False,
        }

        node = BookmarkNode.from_record(record)

        assert node.source_id == 42
        assert node.title == "Intro"
        assert node.page == 3
        assert node.zoom_factor == 0.5
        assert node.zoom_mode is ZoomMode.FIT_H
        assert node.color == "#ff0000"
        assert node.is_bold is True
        assert node.children == []

    def test_from_record_defaults(self):
        node = BookmarkNode.from_record({"id": 1, "title": "T", "page": 0})

        assert node.left == 0.0
        assert node.zoom_mode is ZoomMode.XYZ
        assert node.color is None
        assert node.is_italic is False

    def test_unknown_zoom_mode_kept(self):
        node = BookmarkNode.from_record({"id": 1, "title": "T", "page": 0, "zoomMode": 42})
        assert node.zoom_mode == 42

    def test_missing_title_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            BookmarkNode.from_record({"id": 1, "page": 0})
        assert "title" in str(exc_info.value)

    def test_page_zero_is_valid(self):
        assert BookmarkNode.from_record({"id": 1, "title": "T", "page": 0}).page == 0

    def test_id_prefers_destination(self):
        node = BookmarkNode("T", 0, source_id="src")
        assert node.id == "src"

        node.dest_id = "dst"
        assert node.id == "dst"
        assert node.source_id == "src"

    def test_to_dict_is_recursive(self):
        data = make_tree()[0].to_dict()

        assert data["title"] == "A"
        assert [c["title"] for c in data["children"]] == ["A1", "A2"]
        assert data["children"][0]["children"][0]["title"] == "A1a"
        assert data["zoom_mode"] == 1


class TestBookmarkSpec:

    def test_for_node_copies_attributes(self):
        node = BookmarkNode(
            "T", 4, left=5.0, top=6.0, zoom_factor=2.0, zoom_mode=ZoomMode.FIT,
            color=(0, 0, 1), is_bold=True, is_italic=True, source_id="s",
        )

        spec = BookmarkSpec.for_node(node, parent_id="p")

        assert spec.parent_id == "p"
        assert spec.relationship is Relationship.LAST_CHILD
        assert spec.destination.page_index == 4
        assert spec.destination.left == 5.0
        assert spec.destination.top == 6.0
        assert spec.style.bold and spec.style.italic

    def test_to_dict_wire_format(self):
        spec = BookmarkSpec.for_node(BookmarkNode("T", 2, color="red"), parent_id=None)

        assert spec.to_dict() == {
            "color": "red",
            "destination": {
                "pageIndex": 2,
                "left": 0.0,
                "top": 0.0,
                "zoomFactor": 0.0,
                "zoomMode": 1,
            },
            "style": {"bold": False, "italic": False},
            "title": "T",
            "destId": None,
            "relationship": 1,
        }


class TestTreeHelpers:

    def test_iter_nodes_is_preorder(self):
        assert [n.title for n in iter_nodes(make_tree())] == ["A", "A1", "A1a", "A2", "B"]

    def test_count_nodes(self):
        assert count_nodes(make_tree()) == 5
        assert count_nodes([]) == 0

    def test_tree_depth(self):
        assert tree_depth(make_tree()) == 3
        assert tree_depth([]) == 0
