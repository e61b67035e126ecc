from typing import Dict, Optional

from catalog_ingest.config import Settings
from catalog_ingest.sources.google_books import GoogleBooksClient
from catalog_ingest.sources.openlibrary import OpenLibraryClient
from catalog_ingest.sources.types import CandidateRecord, SourceClient


def get_sources(settings: Optional[Settings] = None) -> Dict[str, SourceClient]:
    settings = settings or Settings.from_env()
    return {
        GoogleBooksClient.name: GoogleBooksClient(
            api_key=settings.google_books_api_key,
            timeout=settings.source_timeout,
        ),
        OpenLibraryClient.name: OpenLibraryClient(timeout=settings.source_timeout),
    }


__all__ = ["CandidateRecord", "SourceClient", "GoogleBooksClient", "OpenLibraryClient", "get_sources"]
