"""
Tests for the Web API.

Tests the Flask JSON endpoints over an injected in-memory store and the
mapping of store errors to HTTP statuses.
"""

import json
import pytest
from pathlib import Path

# Import the Flask app
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from web.app import app

from tests.test_config import EXPECTED


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def client(seeded_store):
    """Flask test client over the seeded store."""
    app.config["TESTING"] = True
    app.config["IDEA_STORE"] = seeded_store
    with app.test_client() as client:
        yield client
    app.config.pop("IDEA_STORE", None)


@pytest.fixture
def empty_client(store):
    """Flask test client over an empty store."""
    app.config["TESTING"] = True
    app.config["IDEA_STORE"] = store
    with app.test_client() as client:
        yield client
    app.config.pop("IDEA_STORE", None)


def result_ids(response):
    return [idea["id"] for idea in response.get_json()["results"]]


# =============================================================================
# Listing
# =============================================================================

class TestListIdeas:
    """Tests for GET /api/ideas."""

    def test_lists_newest_first(self, client):
        response = client.get("/api/ideas")

        assert response.status_code == 200
        data = response.get_json()
        assert data["count"] == data["total"] == 4
        assert result_ids(response) == ["idea-2", "idea-4", "idea-3", "idea-1"]

    def test_oldest_first(self, client):
        response = client.get("/api/ideas?order=oldest")
        assert result_ids(response)[0] == "idea-1"

    def test_filters(self, client):
        assert result_ids(client.get("/api/ideas?type=image")) == ["idea-3"]
        assert result_ids(client.get("/api/ideas?favorites=true")) == ["idea-1"]
        assert result_ids(client.get("/api/ideas?q=cat")) == ["idea-4", "idea-1"]
        assert result_ids(client.get("/api/ideas?date=2026-01-11")) == ["idea-3"]

    def test_tag_param_repeatable_and_comma_separated(self, client):
        repeated = result_ids(client.get("/api/ideas?tag=work&tag=idea"))
        commas = result_ids(client.get("/api/ideas?tag=work,idea"))
        assert sorted(repeated) == sorted(commas) == ["idea-1", "idea-2", "idea-3"]

    def test_type_all_means_no_filter(self, client):
        assert client.get("/api/ideas?type=all").get_json()["count"] == 4

    @pytest.mark.parametrize("query", ["type=sound", "date=yesterday", "order=random"])
    def test_bad_params_are_400(self, client, query):
        assert client.get(f"/api/ideas?{query}").status_code == 400


# =============================================================================
# Mutations
# =============================================================================

class TestCreateIdea:
    """Tests for POST /api/ideas."""

    def test_creates_with_camel_case_fields(self, empty_client, store):
        response = empty_client.post("/api/ideas", json={
            "type": "voice",
            "title": "Memo",
            "recordingUri": "file:///memo.m4a",
            "tags": ["Work"],
            "isFavorite": True,
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data["recordingUri"] == "file:///memo.m4a"
        assert data["tags"] == ["work"]
        assert data["isFavorite"] is True
        assert [i.id for i in store.list()] == [data["id"]]

    def test_invalid_idea_is_400_with_details(self, empty_client, store):
        response = empty_client.post("/api/ideas", json={"type": "text", "title": "", "content": "x"})

        assert response.status_code == EXPECTED["http_status"]["ValidationError"]
        body = response.get_json()
        assert body["type"] == "ValidationError"
        assert body["details"]
        assert store.list() == []

    def test_unknown_field_is_400(self, empty_client):
        response = empty_client.post("/api/ideas", json={"title": "T", "content": "c", "colour": "red"})
        assert response.status_code == 400

    def test_client_supplied_id_is_rejected(self, empty_client):
        response = empty_client.post("/api/ideas", json={"id": "mine", "title": "T", "content": "c"})
        assert response.status_code == 400

    def test_non_object_body_is_400(self, empty_client):
        response = empty_client.post("/api/ideas", data="[]", content_type="application/json")
        assert response.status_code == 400


class TestIdeaEndpoints:
    """Tests for the single-idea endpoints."""

    def test_get(self, client):
        assert client.get("/api/ideas/idea-3").get_json()["uri"] == "file:///images/board.jpg"

    def test_get_missing_is_404(self, client):
        response = client.get("/api/ideas/missing")
        assert response.status_code == EXPECTED["http_status"]["NotFoundError"]
        assert response.get_json()["type"] == "NotFoundError"

    def test_patch(self, client):
        response = client.patch("/api/ideas/idea-1", json={"title": "Dog cafe", "isFavorite": False})

        assert response.status_code == 200
        data = response.get_json()
        assert data["title"] == "Dog cafe"
        assert data["isFavorite"] is False
        assert data["updatedAt"] > data["createdAt"]

    def test_patch_ignores_id_and_type(self, client):
        data = client.patch("/api/ideas/idea-1", json={"id": "x", "type": "image", "title": "T"}).get_json()
        assert (data["id"], data["type"]) == ("idea-1", "text")

    @pytest.mark.parametrize("key", ["idea_id", "self"])
    def test_patch_with_parameter_name_key_is_400(self, client, key):
        response = client.patch("/api/ideas/idea-1", json={key: "x", "title": "n"})

        assert response.status_code == 400
        assert response.get_json()["type"] == "ValidationError"

    def test_patch_missing_is_404(self, client):
        assert client.patch("/api/ideas/missing", json={"title": "x"}).status_code == 404

    def test_delete_is_idempotent(self, client):
        assert client.delete("/api/ideas/idea-2").status_code == 204
        assert client.delete("/api/ideas/idea-2").status_code == 204
        assert client.get("/api/ideas/idea-2").status_code == 404

    def test_toggle_favorite(self, client):
        assert client.post("/api/ideas/idea-2/favorite").get_json()["isFavorite"] is True
        assert client.post("/api/ideas/idea-2/favorite").get_json()["isFavorite"] is False

    def test_clear_all(self, client):
        assert client.delete("/api/ideas").status_code == 204
        assert client.get("/api/ideas").get_json()["total"] == 0


# =============================================================================
# Collection endpoints and errors
# =============================================================================

class TestCollectionEndpoints:
    """Tests for tags, stats and export."""

    def test_tags(self, client):
        assert client.get("/api/tags").get_json()["tags"] == [
            "business", "cats", "design", "idea", "personal", "work",
        ]

    def test_stats(self, client):
        data = client.get("/api/stats").get_json()
        assert data["total"] == 4
        assert data["by_type"] == {"text": 2, "voice": 1, "image": 1}
        assert data["favorites"] == 1

    def test_export(self, client, sample_dicts):
        response = client.get("/api/export")

        assert response.mimetype == "application/json"
        assert "attachment" in response.headers["Content-Disposition"]
        assert json.loads(response.get_data(as_text=True)) == sample_dicts


class TestStorageErrors:
    """Storage failures surface as 503 and leave the store unchanged."""

    def test_failed_save_is_503(self, client, seeded_storage, seeded_store):
        seeded_storage.fail_writes = True

        response = client.post("/api/ideas", json={"title": "T", "content": "c"})

        assert response.status_code == EXPECTED["http_status"]["StorageUnavailable"]
        assert response.get_json()["type"] == "StorageUnavailable"
        assert len(seeded_store.list()) == 4

    def test_uninitialized_store_with_unreadable_storage_is_503(self, memory_storage):
        from braindrop.store import IdeaStore

        memory_storage.fail_reads = True
        app.config["TESTING"] = True
        app.config["IDEA_STORE"] = IdeaStore(memory_storage)
        try:
            with app.test_client() as client:
                assert client.get("/api/ideas").status_code == 503
        finally:
            app.config.pop("IDEA_STORE", None)

    def test_corrupt_storage_is_500(self):
        from braindrop.storage import MemoryStorage
        from braindrop.store import IdeaStore

        app.config["TESTING"] = True
        app.config["IDEA_STORE"] = IdeaStore(MemoryStorage(blob="{broken"))
        try:
            with app.test_client() as client:
                response = client.get("/api/stats")
                assert response.status_code == EXPECTED["http_status"]["DecodeError"]
        finally:
            app.config.pop("IDEA_STORE", None)
