from fastapi.testclient import TestClient

import catalog_ingest.api.main as api_main
from catalog_ingest.catalogs import get_dataset
from catalog_ingest.config import Settings
from catalog_ingest.sources.google_books import GoogleBooksClient

from conftest import FakeResponse, FakeSession, FakeSource, make_candidate
from test_google_books import DOM_CASMURRO


def make_client(monkeypatch, repository, sources=None, service_key="test-service-key"):
    monkeypatch.setattr(api_main, "settings", Settings(service_key=service_key, item_delay=0))
    monkeypatch.setattr(api_main, "database", repository)
    monkeypatch.setattr(api_main, "sources", sources if sources is not None else {"google_books": FakeSource()})
    return TestClient(api_main.app)


def test_ingest_response_shape(monkeypatch, repository, test_dataset):
    test_dataset(["Livro 1", "Livro 2", "Livro 3"])
    source = FakeSource({
        "Livro 1": make_candidate(external_id="a", title="Livro 1"),
        "Livro 3": make_candidate(external_id="c", title="Livro 3", thumbnail=False),
    })
    client = make_client(monkeypatch, repository, {"google_books": source})

    response = client.get("/ingest", params={"datasetVariant": "test", "startIndex": 0, "batchSize": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["datasetVariant"] == "test"
    assert body["success"] == 1
    assert body["skippedCount"] == 1
    assert body["totalBooks"] == 3
    assert body["startIndex"] == 0
    assert body["endIndex"] == 2
    assert body["nextOffset"] == 2
    assert body["hasMore"] is True
    assert body["results"][0]["title"] == "Livro 1"
    assert body["skipped"] == ["not found: Livro 2"]
    assert body["errors"] == []


def test_dom_casmurro_end_to_end(monkeypatch, repository, test_dataset):
    test_dataset(["Dom Casmurro Machado de Assis"])
    session = FakeSession({
        "Dom Casmurro Machado de Assis": FakeResponse(payload={"totalItems": 1, "items": [DOM_CASMURRO]}),
    })
    client = make_client(monkeypatch, repository, {"google_books": GoogleBooksClient(session=session)})
    params = {"datasetVariant": "test", "startIndex": 0, "batchSize": 1}

    first = client.get("/ingest", params=params).json()
    second = client.get("/ingest", params=params).json()

    assert first["success"] == 1
    assert first["results"][0]["title"] == "Dom Casmurro"
    assert second["results"][0]["id"] == first["results"][0]["id"]
    assert repository.count_entries("9788535910670") == 1
    assert repository.count_entries() == 1

    stored = repository.get_by_natural_key("9788535910670")
    assert stored["authors"] == ["Machado de Assis"]
    assert stored["published_date"] == "2016-01-01"
    assert stored["cover_url"].startswith("https://books.google.com/")
    assert "zoom=3" in stored["cover_url"]
    assert "edge=curl" not in stored["cover_url"]


def test_missing_service_key_is_401(monkeypatch, repository):
    client = make_client(monkeypatch, repository, service_key=None)

    response = client.get("/ingest")

    assert response.status_code == 401
    assert "error" in response.json()


def test_unknown_dataset_is_404(monkeypatch, repository):
    client = make_client(monkeypatch, repository)

    response = client.get("/ingest", params={"datasetVariant": "nope"})

    assert response.status_code == 404


def test_invalid_paging_is_rejected(monkeypatch, repository):
    client = make_client(monkeypatch, repository)

    assert client.get("/ingest", params={"startIndex": -1}).status_code == 422
    assert client.get("/ingest", params={"batchSize": 0}).status_code == 422
    assert client.get("/ingest", params={"batchSize": 41}).status_code == 422


def test_uninitialized_storage_is_500(monkeypatch, repository):
    client = make_client(monkeypatch, repository)
    monkeypatch.setattr(api_main, "database", None)

    response = client.get("/ingest")

    assert response.status_code == 500


def test_checkpoint_endpoint(monkeypatch, repository, test_dataset):
    test_dataset(["a", "b", "c"])
    repository.update_ingest_offset("test", 2, 3)
    client = make_client(monkeypatch, repository)

    response = client.get("/ingest/checkpoint", params={"datasetVariant": "test"})

    assert response.status_code == 200
    assert response.json() == {"datasetVariant": "test", "nextOffset": 2, "totalBooks": 3}


def test_datasets_lists_builtin_variants(monkeypatch, repository):
    client = make_client(monkeypatch, repository)

    response = client.get("/datasets")

    assert response.status_code == 200
    by_name = {d["name"]: d for d in response.json()}
    assert by_name["brazil"]["source"] == "google_books"
    assert by_name["brazil"]["totalQueries"] == 145
    assert by_name["openlibrary"]["source"] == "openlibrary"
    assert by_name["expansion"]["source"] == "google_books"
    assert by_name["expansion"]["totalQueries"] == 4


def test_health(monkeypatch, repository):
    client = make_client(monkeypatch, repository)

    assert client.get("/health").json() == {"status": "healthy"}


def test_expansion_queries_are_title_restricted(monkeypatch, repository):
    session = FakeSession()
    client = make_client(monkeypatch, repository, {"google_books": GoogleBooksClient(session=session)})

    response = client.get("/ingest", params={"datasetVariant": "expansion", "batchSize": 40})

    assert response.status_code == 200
    assert response.json()["skipped"][0] == "not found: intitle:O problema dos três corpos"
    sent = [call["params"]["q"] for call in session.calls]
    assert sent == [q.text for q in get_dataset("expansion").queries]
    assert all(q.startswith("intitle:") for q in sent)
