import pytest
import requests

from catalog_ingest.errors import RateLimitedError, SourceError
from catalog_ingest.sources.google_books import GoogleBooksClient

from conftest import FakeResponse, FakeSession


DOM_CASMURRO = {
    "id": "dc001",
    "volumeInfo": {
        "title": "Dom Casmurro",
        "authors": ["Machado de Assis"],
        "publisher": "Penguin-Companhia",
        "publishedDate": "2016",
        "description": "Bentinho e Capitu.",
        "industryIdentifiers": [
            {"type": "ISBN_10", "identifier": "8535910670"},
            {"type": "ISBN_13", "identifier": "9788535910670"},
        ],
        "pageCount": 256,
        "categories": ["Fiction"],
        "language": "pt-BR",
        "imageLinks": {
            "smallThumbnail": "http://books.google.com/books/content?id=dc001&printsec=frontcover&img=1&zoom=5&source=gbs_api",
            "thumbnail": "http://books.google.com/books/content?id=dc001&printsec=frontcover&img=1&zoom=1&edge=curl&source=gbs_api",
        },
    },
}


def make_client(responses=None, default=None, api_key=None):
    session = FakeSession(responses=responses, default=default)
    return GoogleBooksClient(api_key=api_key, timeout=5, session=session), session


def test_search_maps_first_volume():
    client, session = make_client(
        {"Dom Casmurro": FakeResponse(payload={"totalItems": 1, "items": [DOM_CASMURRO]})}
    )

    candidate = client.search("Dom Casmurro", language="pt", max_results=5)

    assert candidate.external_id == "dc001"
    assert candidate.source == "google_books"
    assert candidate.title == "Dom Casmurro"
    assert candidate.authors == ["Machado de Assis"]
    assert {"type": "ISBN_13", "identifier": "9788535910670"} in candidate.identifiers
    assert candidate.page_count == 256
    assert "thumbnail" in candidate.image_links
    assert candidate.cover_fallback_url.endswith("id=dc001&printsec=frontcover&img=1&zoom=3")

    params = session.calls[0]["params"]
    assert params["q"] == "Dom Casmurro"
    assert params["langRestrict"] == "pt"
    assert params["maxResults"] == 5
    assert params["printType"] == "books"
    assert "key" not in params
    assert session.calls[0]["timeout"] == 5


def test_api_key_is_sent_when_configured():
    client, session = make_client(api_key="abc")

    client.search("Qualquer")

    assert session.calls[0]["params"]["key"] == "abc"


def test_no_items_is_not_found():
    client, _ = make_client()

    assert client.search("Livro inexistente") is None


def test_timeout_is_source_error():
    client, _ = make_client(default=requests.Timeout("slow"))

    with pytest.raises(SourceError) as exc:
        client.search("Dom Casmurro")
    assert not isinstance(exc.value, RateLimitedError)


def test_http_429_is_rate_limited():
    client, _ = make_client(default=FakeResponse(status_code=429, payload={}, reason="Too Many Requests"))

    with pytest.raises(RateLimitedError):
        client.search("Dom Casmurro")


def test_quota_403_is_rate_limited():
    payload = {"error": {"code": 403, "errors": [{"reason": "rateLimitExceeded"}]}}
    client, _ = make_client(default=FakeResponse(status_code=403, payload=payload, reason="Forbidden"))

    with pytest.raises(RateLimitedError):
        client.search("Dom Casmurro")


def test_server_error_is_source_error():
    client, _ = make_client(default=FakeResponse(status_code=503, payload={}, reason="Service Unavailable"))

    with pytest.raises(SourceError, match="503"):
        client.search("Dom Casmurro")


def test_invalid_json_is_source_error():
    client, _ = make_client(default=FakeResponse(payload=ValueError("not json")))

    with pytest.raises(SourceError):
        client.search("Dom Casmurro")
