"""HTTP tests for the /words routes."""
import pytest
from fastapi.testclient import TestClient

from conftest import BrokenCollection, FakeTranslator
from vocab_backend.app.main import get_app


class BrokenDatabase:
    def __getitem__(self, name):
        return BrokenCollection()


@pytest.fixture
def client(mongo_db, definitions):
    app = get_app(db=mongo_db, definition_provider=definitions, translation_provider=FakeTranslator(failing={"te"}))
    with TestClient(app) as c:
        yield c


def test_health_check(client):
    assert client.get("/").json() == {"status": "running"}


def test_list_words_pagination(client, seed_words):
    seed_words(*[f"word{i:02d}" for i in range(45)])
    response = client.get("/words", params={"limit": 20, "page": 3})
    assert response.status_code == 200
    data = response.json()
    assert len(data["words"]) == 5
    assert data["currentPage"] == 3
    assert data["totalPages"] == 3
    assert data["totalWords"] == 45
    assert data["hasNextPage"] is False
    assert data["hasPrevPage"] is True


def test_list_words_rejects_bad_limit(client):
    assert client.get("/words", params={"limit": 0}).status_code == 422
    assert client.get("/words", params={"limit": 101}).status_code == 422


def test_list_words_sort_alias(client, seed_words):
    seed_words("alpha", "beta", "gamma")
    data = client.get("/words", params={"sortBy": "reverse"}).json()
    assert [w["word"] for w in data["words"]] == ["gamma", "beta", "alpha"]


def test_search_route(client, seed_words):
    seed_words("apt", "apply", "apple", "ap")
    data = client.get("/words/search", params={"q": "ap"}).json()
    assert [w["word"] for w in data["words"]] == ["ap", "apple", "apply", "apt"]
    assert client.get("/words/search", params={"q": ""}).json() == {"words": []}


def test_useful_words(client, seed_words):
    seed_words("one", "two", "three")
    data = client.get("/words/useful").json()
    assert sorted(w["word"] for w in data["words"]) == ["one", "three", "two"]


def test_word_details_enriches_unknown_word(client, raw_words):
    response = client.get("/words/Ephemeral")
    assert response.status_code == 200
    data = response.json()
    assert data["word"] == "ephemeral"
    assert data["partOfSpeech"] == "adjective"
    assert data["source"] == "enriched"
    assert data["translations"] == {"es": "ephemeral-es", "hi": "ephemeral-hi", "te": ""}
    assert data["completeness"] == "partial"
    assert raw_words.count_documents({"word": "ephemeral"}) == 1


def test_api_prefix_is_mounted(client, seed_words):
    seed_words("apple")
    assert client.get("/api/words/search", params={"q": "apple"}).json()["words"][0]["word"] == "apple"


def test_blank_word_is_not_found(client):
    response = client.get("/words/%20")
    assert response.status_code == 404
    assert response.json() == {"message": "Word not found"}


def test_store_outage_returns_500(definitions):
    app = get_app(db=BrokenDatabase(), definition_provider=definitions, translation_provider=FakeTranslator())
    with TestClient(app) as c:
        response = c.get("/words/apple")
        assert response.status_code == 500
        assert "message" in response.json()

        assert c.get("/words/search", params={"q": "ap"}).status_code == 500


def test_list_words_is_cached_per_query(client, seed_words):
    seed_words("alpha")
    first = client.get("/words").json()

    seed_words("beta")
    assert client.get("/words").json() == first
    assert client.get("/words", params={"limit": 50}).json()["totalWords"] == 2
