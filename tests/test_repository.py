import pytest

from catalog_ingest.config import Settings
from catalog_ingest.db import CatalogRepository
from catalog_ingest.errors import ConfigurationError
from catalog_ingest.records.keys import resolve_natural_key
from catalog_ingest.records.normalizer import normalize_candidate

from conftest import make_candidate


def keyed(candidate):
    return normalize_candidate(candidate).with_key(resolve_natural_key(candidate))


def test_upsert_twice_keeps_one_row_and_updates_content(repository):
    first = keyed(make_candidate(external_id="a", title="Dom Casmurro", isbn13="9788535910670"))
    second = keyed(make_candidate(
        external_id="b",
        title="Dom Casmurro (edição revista)",
        isbn13="9788535910670",
        page_count=300,
    ))

    inserted = repository.upsert_entry(first)
    updated = repository.upsert_entry(second)

    assert updated.id == inserted.id
    assert updated.title == "Dom Casmurro (edição revista)"
    assert repository.count_entries() == 1
    stored = repository.get_by_natural_key("9788535910670")
    assert stored["external_id"] == "b"
    assert stored["page_count"] == 300


def test_distinct_keys_are_separate_rows(repository):
    repository.upsert_entry(keyed(make_candidate(external_id="a", isbn13="9780000000001")))
    repository.upsert_entry(keyed(make_candidate(external_id="b")))

    assert repository.count_entries() == 2
    assert repository.count_entries("GBOOKS-b") == 1


def test_upsert_without_key_is_rejected(repository):
    record = normalize_candidate(make_candidate())

    with pytest.raises(ValueError):
        repository.upsert_entry(record)


def test_ingest_offset_defaults_and_updates(repository):
    assert repository.get_ingest_offset("brazil") == (0, 0)

    repository.update_ingest_offset("brazil", 10, 145)
    repository.update_ingest_offset("brazil", 20, 145)

    assert repository.get_ingest_offset("brazil") == (20, 145)
    assert repository.get_ingest_offset("mega") == (0, 0)


def test_postgres_url_requires_service_key():
    with pytest.raises(ConfigurationError):
        CatalogRepository(settings=Settings())


def test_postgres_url_uses_service_key_as_password():
    settings = Settings(service_key="s3cret", postgres_host="db", postgres_db="books")

    assert settings.database_url_for() == "postgresql+psycopg://catalog:s3cret@db:5432/books"
    assert settings.database_url_for(use_sqlite=True) == "sqlite:///data/catalog.db"


def test_settings_from_env_parses_numbers():
    settings = Settings.from_env({
        "CATALOG_SERVICE_KEY": "k",
        "INGEST_BATCH_SIZE": "0",
        "INGEST_ITEM_DELAY": "oops",
        "USE_SQLITE": "1",
    })

    assert settings.service_key == "k"
    assert settings.batch_size == 1
    assert settings.item_delay == 0.1
    assert settings.use_sqlite is True
