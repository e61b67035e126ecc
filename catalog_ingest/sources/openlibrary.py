"""
Open Library API Integration
----------------------------
Searches Open Library and maps the top work into a catalog candidate.
"""

import logging
from typing import Optional

from catalog_ingest.sources.http import get_json, make_session
from catalog_ingest.sources.types import CandidateRecord

logger = logging.getLogger(__name__)

# Open Library filters by MARC (ISO 639-2/B) language codes
LANGUAGE_CODES = {"pt": "por", "en": "eng", "es": "spa", "fr": "fre", "de": "ger", "it": "ita"}

SEARCH_FIELDS = ",".join([
    "key",
    "title",
    "subtitle",
    "author_name",
    "isbn",
    "first_publish_year",
    "publisher",
    "subject",
    "number_of_pages_median",
    "first_sentence",
    "cover_i",
    "cover_edition_key",
    "ratings_average",
    "ratings_count",
])


class OpenLibraryClient:
    """Client for Open Library API"""

    name = "openlibrary"
    key_prefix = "OPENLIBRARY"
    BASE_URL = "https://openlibrary.org"
    COVERS_URL = "https://covers.openlibrary.org/b"

    def __init__(self, timeout: float = 10.0, session=None):
        self.timeout = timeout
        # Open Library grants a higher rate limit to identified clients
        self.session = session or make_session("CatalogIngest/1.0 (catalog seeding)")

    def search(self, query: str, language: str = "pt", max_results: int = 10) -> Optional[CandidateRecord]:
        params = {
            "q": query,
            "language": LANGUAGE_CODES.get(language, language),
            "limit": max_results,
            "fields": SEARCH_FIELDS,
        }
        data = get_json(
            self.session,
            f"{self.BASE_URL}/search.json",
            params=params,
            timeout=self.timeout,
            source=self.name,
        )
        docs = data.get("docs") or []
        if not docs:
            logger.debug("Open Library returned no docs for %r", query)
            return None
        return self.to_candidate(docs[0], language)

    def to_candidate(self, doc: dict, language: str = "pt") -> CandidateRecord:
        # /works/OL123W -> OL123W
        work_id = str(doc.get("key") or "").split("/")[-1]

        identifiers = []
        for isbn in doc.get("isbn") or []:
            compact = str(isbn).replace("-", "").strip()
            if len(compact) == 13:
                identifiers.append({"type": "ISBN_13", "identifier": compact})
            elif len(compact) == 10:
                identifiers.append({"type": "ISBN_10", "identifier": compact})

        image_links = {}
        cover_id = doc.get("cover_i")
        if cover_id:
            image_links = {
                "thumbnail": f"{self.COVERS_URL}/id/{cover_id}-L.jpg",
                "smallThumbnail": f"{self.COVERS_URL}/id/{cover_id}-M.jpg",
            }
        edition_key = doc.get("cover_edition_key")
        fallback = f"{self.COVERS_URL}/olid/{edition_key}-L.jpg" if edition_key else None

        first_sentence = doc.get("first_sentence")
        if isinstance(first_sentence, list):
            first_sentence = first_sentence[0] if first_sentence else None

        year = doc.get("first_publish_year")
        publishers = doc.get("publisher") or []

        return CandidateRecord(
            external_id=work_id,
            source=self.name,
            key_prefix=self.key_prefix,
            title=doc.get("title"),
            subtitle=doc.get("subtitle"),
            authors=list(doc.get("author_name") or []),
            identifiers=identifiers,
            publisher=publishers[0] if publishers else None,
            published_date=str(year) if year else None,
            description=first_sentence,
            page_count=doc.get("number_of_pages_median"),
            language=language,
            image_links=image_links,
            categories=list(doc.get("subject") or [])[:3],
            average_rating=doc.get("ratings_average"),
            ratings_count=doc.get("ratings_count"),
            cover_fallback_url=fallback,
        )

    def close(self) -> None:
        self.session.close()
