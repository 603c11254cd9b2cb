from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from showcase_bot.dependencies import get_storage_service, get_store
from showcase_bot.main import app
from showcase_bot.services.store import DocumentStore, StoreError


@pytest.fixture
def client(store, storage):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_storage_service] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def add_item(store, title, created_at, status="published", **extra):
    return store.add(
        "showcase",
        {
            "title": title,
            "author": "Student A",
            "description": "A poem.",
            "pdfObjectName": f"{title}.pdf",
            "thumbnailUrl": "/thumbnails/test.jpg",
            "status": status,
            "createdAt": created_at,
            "updatedAt": created_at,
            **extra,
        },
    )


class TestShowcaseListing:
    def test_lists_published_newest_first(self, client, store):
        add_item(store, "older", "2024-01-01T00:00:00+00:00")
        add_item(store, "draft", "2024-06-01T00:00:00+00:00", status="new")
        add_item(store, "newer", "2024-03-01T00:00:00+00:00")

        response = client.get("/api/showcase")

        assert response.status_code == 200
        data = response.json()
        assert data["fallback"] is False
        assert data["totalItems"] == 2
        assert [item["title"] for item in data["collections"]] == ["newer", "older"]

    def test_pdf_url_is_freshly_signed(self, client, store, gcs_client):
        add_item(store, "essay", "2024-01-01T00:00:00+00:00", pdfUrl="https://stale.example/old")

        item = client.get("/api/showcase").json()["collections"][0]

        assert item["pdfUrl"] == "https://storage.googleapis.com/test-pdfs/signed"
        gcs_client.bucket.return_value.blob.assert_called_with("essay.pdf")

    def test_gs_thumbnail_converted_to_https(self, client, store):
        add_item(store, "essay", "2024-01-01T00:00:00+00:00", thumbnailUrl="gs://test-thumbnails/1-thumbnail.jpg")

        item = client.get("/api/showcase").json()["collections"][0]

        assert item["thumbnailUrl"] == "https://storage.googleapis.com/test-thumbnails/1-thumbnail.jpg"

    def test_signing_failure_keeps_item(self, client, store, gcs_client):
        gcs_client.bucket.return_value.blob.return_value.generate_signed_url.side_effect = RuntimeError("no key")
        add_item(store, "essay", "2024-01-01T00:00:00+00:00")

        data = client.get("/api/showcase").json()

        assert data["totalItems"] == 1
        assert data["collections"][0]["pdfUrl"] is None

    def test_store_failure_serves_static_fallback(self, storage):
        broken = Mock(spec=DocumentStore)
        broken.query.side_effect = StoreError("unreachable")
        app.dependency_overrides[get_store] = lambda: broken
        app.dependency_overrides[get_storage_service] = lambda: storage
        try:
            response = TestClient(app).get("/api/showcase")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        data = response.json()
        assert data["fallback"] is True
        assert data["totalItems"] == 3
        assert [item["title"] for item in data["collections"]] == [
            "Student Work A",
            "Student Work B",
            "Student Work C",
        ]
