import pytest
import requests

from catalog_ingest import catalogs
from catalog_ingest.catalogs import DatasetVariant, _queries
from catalog_ingest.config import SERVICE_KEY_ENV, Settings
from catalog_ingest.db import CatalogRepository
from catalog_ingest.sources.types import CandidateRecord


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.payload = payload
        self.reason = reason

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Stands in for requests.Session; responses keyed by the `q` param."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default if default is not None else FakeResponse(payload={"totalItems": 0})
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        response = self.responses.get((params or {}).get("q"), self.default)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


class FakeSource:
    """Source adapter returning canned candidates (or raising) per query."""

    name = "google_books"

    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    def search(self, query, language="pt", max_results=5):
        self.calls.append(query)
        result = self.results.get(query)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        pass


def make_candidate(external_id="vol1", title="Livro", isbn13=None, isbn10=None, thumbnail=True, **overrides):
    identifiers = []
    if isbn10:
        identifiers.append({"type": "ISBN_10", "identifier": isbn10})
    if isbn13:
        identifiers.append({"type": "ISBN_13", "identifier": isbn13})
    image_links = {}
    if thumbnail:
        image_links = {
            "smallThumbnail": f"http://books.google.com/books/content?id={external_id}&printsec=frontcover&img=1&zoom=5&source=gbs_api",
            "thumbnail": f"http://books.google.com/books/content?id={external_id}&printsec=frontcover&img=1&zoom=1&edge=curl&source=gbs_api",
        }
    fields = dict(
        external_id=external_id,
        source="google_books",
        key_prefix="GBOOKS",
        title=title,
        authors=["Autor Teste"],
        identifiers=identifiers,
        image_links=image_links,
        cover_fallback_url=f"https://books.google.com/books/content?id={external_id}&printsec=frontcover&img=1&zoom=3",
    )
    fields.update(overrides)
    return CandidateRecord(**fields)


@pytest.fixture
def repository(tmp_path):
    repo = CatalogRepository(url=f"sqlite:///{tmp_path / 'catalog.db'}", settings=Settings())
    yield repo
    repo.close()


@pytest.fixture
def service_key(monkeypatch):
    monkeypatch.setenv(SERVICE_KEY_ENV, "test-service-key")
    return "test-service-key"


@pytest.fixture
def test_dataset(monkeypatch):
    """Registers a dataset variant named `test` with the given query texts."""

    def _register(texts, name="test", source="google_books"):
        dataset = DatasetVariant(
            name=name,
            source=source,
            description="test dataset",
            queries=_queries(name, texts),
        )
        monkeypatch.setitem(catalogs.DATASETS, name, dataset)
        return dataset

    return _register


@pytest.fixture
def timeout_error():
    return requests.Timeout("read timed out")
