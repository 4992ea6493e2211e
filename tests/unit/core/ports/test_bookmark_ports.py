"""Tests for store and document port interfaces."""
import pytest
from bookmark_export.core.ports import (
    DestinationBookmarkStore,
    DestinationDocumentPort,
    DocumentFactoryPort,
    SourceBookmarkStore,
    SourceDocumentPort,
)


class TestPortInterfaces:
    @pytest.mark.parametrize("port", [
        SourceBookmarkStore,
        DestinationBookmarkStore,
        SourceDocumentPort,
        DestinationDocumentPort,
        DocumentFactoryPort,
    ])
    def test_cannot_instantiate_abstract_port(self, port):
        with pytest.raises(TypeError):
            port()

    @pytest.mark.asyncio
    async def test_concrete_store_works(self):
        class ListStore(SourceBookmarkStore):
            async def get_children(self, parent_id=None):
                return [{"id": 1, "title": "Only", "page": 0}] if parent_id is None else []

        store = ListStore()
        assert await store.get_children() == [{"id": 1, "title": "Only", "page": 0}]
        assert await store.get_children(1) == []
