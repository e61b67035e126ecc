import pytest
import requests

from catalog_ingest.errors import RateLimitedError, SourceError
from catalog_ingest.records.keys import resolve_natural_key
from catalog_ingest.sources.openlibrary import OpenLibraryClient

from conftest import FakeResponse, FakeSession


DOC = {
    "key": "/works/OL1234W",
    "title": "Vidas Secas",
    "author_name": ["Graciliano Ramos"],
    "isbn": ["8501004062", "978-85-01-00406-2", "bogus"],
    "first_publish_year": 1938,
    "publisher": ["Record", "Martins"],
    "subject": ["Drought", "Brazil", "Fiction", "Sertão"],
    "number_of_pages_median": 176,
    "first_sentence": ["Na planície avermelhada os juazeiros alargavam duas manchas verdes."],
    "cover_i": 98765,
    "cover_edition_key": "OL99M",
    "ratings_average": 4.1,
    "ratings_count": 30,
}


def make_client(responses=None, default=None):
    session = FakeSession(responses=responses, default=default)
    return OpenLibraryClient(timeout=5, session=session), session


def test_search_maps_first_doc():
    client, session = make_client({"Vidas Secas": FakeResponse(payload={"numFound": 1, "docs": [DOC]})})

    candidate = client.search("Vidas Secas", language="pt", max_results=10)

    assert candidate.external_id == "OL1234W"
    assert candidate.source == "openlibrary"
    assert candidate.title == "Vidas Secas"
    assert candidate.authors == ["Graciliano Ramos"]
    assert candidate.identifiers == [
        {"type": "ISBN_10", "identifier": "8501004062"},
        {"type": "ISBN_13", "identifier": "9788501004062"},
    ]
    assert candidate.publisher == "Record"
    assert candidate.published_date == "1938"
    assert candidate.description.startswith("Na planície")
    assert candidate.categories == ["Drought", "Brazil", "Fiction"]
    assert candidate.image_links["thumbnail"] == "https://covers.openlibrary.org/b/id/98765-L.jpg"
    assert candidate.image_links["smallThumbnail"] == "https://covers.openlibrary.org/b/id/98765-M.jpg"
    assert candidate.cover_fallback_url == "https://covers.openlibrary.org/b/olid/OL99M-L.jpg"
    assert resolve_natural_key(candidate) == "9788501004062"

    params = session.calls[0]["params"]
    assert session.calls[0]["url"].endswith("/search.json")
    assert params["language"] == "por"
    assert params["limit"] == 10


def test_doc_without_cover_or_isbn():
    client, _ = make_client()

    candidate = client.to_candidate({"key": "/works/OL5W", "title": "Sem Capa"})

    assert candidate.image_links == {}
    assert candidate.cover_fallback_url is None
    assert resolve_natural_key(candidate) == "OPENLIBRARY-OL5W"


def test_no_docs_is_not_found():
    client, _ = make_client(default=FakeResponse(payload={"numFound": 0, "docs": []}))

    assert client.search("nada") is None


def test_connection_error_is_source_error():
    client, _ = make_client(default=requests.ConnectionError("refused"))

    with pytest.raises(SourceError):
        client.search("Vidas Secas")


def test_http_429_is_rate_limited():
    client, _ = make_client(default=FakeResponse(status_code=429, payload={}, reason="Too Many Requests"))

    with pytest.raises(RateLimitedError):
        client.search("Vidas Secas")


def test_key_is_stable_when_edition_isbns_are_reordered():
    client, _ = make_client()
    isbns = ["9788535910670", "9788572326972", "8535910670", "9788508133956"]
    swapped = [isbns[1], isbns[0]] + isbns[2:]

    first = client.to_candidate(dict(DOC, isbn=isbns))
    second = client.to_candidate(dict(DOC, isbn=swapped))

    assert resolve_natural_key(first) == resolve_natural_key(second) == "9788508133956"
