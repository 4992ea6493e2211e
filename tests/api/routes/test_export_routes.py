"""Tests for export routes"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bookmark_export.api.middleware.authentication import create_token_verifier
from bookmark_export.api.routes.export import create_export_router
from bookmark_export.config.settings import ExportSettings
from bookmark_export.core.export import BookmarkExporter
from tests.fakes import (
    FakeDocumentFactory,
    FakeSourceDocument,
    FakeSourceStore,
    bookmark,
)

PDF_UPLOAD = ("book.pdf", b"%PDF-1.7 upload", "application/pdf")
SETTINGS = ExportSettings(api_key="route-test-key")


def outline():
    return [
        bookmark("Ch1", 0, [bookmark("1.1", 1), bookmark("1.2", 2)]),
        bookmark("Ch2", 3),
    ]


class TestExportRoutes:
    """Test export and outline endpoints"""

    @pytest.fixture
    def opened(self):
        return []

    @pytest.fixture
    def factory(self):
        return FakeDocumentFactory()

    @pytest.fixture
    def make_client(self, opened, factory):
        def build(store=None, exported=None):
            def opener(data, file_name):
                opened.append((data, file_name))
                return FakeSourceDocument(store or FakeSourceStore(outline()), name=file_name, pages=4)

            router = create_export_router(
                exporter=BookmarkExporter(SETTINGS),
                verify_token_func=create_token_verifier(SETTINGS),
                factory=factory,
                source_opener=opener,
                on_export=exported,
            )
            app = FastAPI()
            app.include_router(router)
            return TestClient(app)
        return build

    @pytest.fixture
    def auth(self):
        return {"Authorization": "Bearer route-test-key"}

    def test_export_returns_pdf(self, make_client, factory, opened, auth):
        """Should return the exported document with its name and counts"""
        exported = []
        client = make_client(exported=lambda: exported.append(True))

        response = client.post("/api/v1/export", files={"file": PDF_UPLOAD}, headers=auth)

        assert response.status_code == 200
        assert response.content == b"%PDF-exported"
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            "attachment; filename*=UTF-8''book_with_bookmarks.pdf"
        )
        assert response.headers["x-bookmark-count"] == "4"
        assert response.headers["x-page-count"] == "4"
        assert opened == [(b"%PDF-1.7 upload", "book.pdf")]
        assert factory.created[0].store.tree() == [
            ("Ch1", [("1.1", []), ("1.2", [])]),
            ("Ch2", []),
        ]
        assert exported == [True]

    def test_export_with_requested_name(self, make_client, auth):
        """Should sanitize and quote a requested file name"""
        response = make_client().post(
            "/api/v1/export",
            files={"file": PDF_UPLOAD},
            data={"file_name": "Notes: Week 1"},
            headers=auth,
        )

        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            "attachment; filename*=UTF-8''Notes%20Week%201.pdf"
        )

    def test_export_rejects_invalid_token(self, make_client):
        """Should reject requests with a wrong bearer token"""
        response = make_client().post(
            "/api/v1/export",
            files={"file": PDF_UPLOAD},
            headers={"Authorization": "Bearer wrong"},
        )

        assert response.status_code == 401

    def test_export_rejects_non_pdf(self, make_client, opened, auth):
        """Should reject uploads that are not PDFs"""
        response = make_client().post(
            "/api/v1/export",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth,
        )

        assert response.status_code == 400
        assert opened == []

    def test_export_rejects_empty_upload(self, make_client, auth):
        """Should reject empty uploads"""
        response = make_client().post(
            "/api/v1/export",
            files={"file": ("book.pdf", b"", "application/pdf")},
            headers=auth,
        )

        assert response.status_code == 400

    def test_export_failure_is_422(self, make_client, auth):
        """Should report pipeline failures as unprocessable"""
        store = FakeSourceStore(outline())
        store.fail_on = store.id_of("Ch1")
        exported = []

        response = make_client(store=store, exported=lambda: exported.append(True)).post(
            "/api/v1/export", files={"file": PDF_UPLOAD}, headers=auth,
        )

        assert response.status_code == 422
        assert "Ch1" in response.json()["detail"]
        assert exported == []

    def test_outline_returns_tree(self, make_client, factory, auth):
        """Should return the bookmark tree without exporting"""
        response = make_client().post("/api/v1/outline", files={"file": PDF_UPLOAD}, headers=auth)

        assert response.status_code == 200
        data = response.json()
        assert data["file_name"] == "book.pdf"
        assert data["bookmark_count"] == 4
        assert data["depth"] == 2
        assert [b["title"] for b in data["bookmarks"]] == ["Ch1", "Ch2"]
        assert [c["title"] for c in data["bookmarks"][0]["children"]] == ["1.1", "1.2"]
        assert data["bookmarks"][0]["children"][1]["page"] == 2
        assert factory.created == []

    def test_outline_failure_is_422(self, make_client, auth):
        """Should report unreadable outlines as unprocessable"""
        store = FakeSourceStore(outline())
        store.fail_on = store.id_of("Ch1")

        response = make_client(store=store).post(
            "/api/v1/outline", files={"file": PDF_UPLOAD}, headers=auth,
        )

        assert response.status_code == 422
