"""
Google Books API Integration
----------------------------
Looks up the best match for a free-text query, restricted to one language.
"""

import logging
from typing import Optional

from catalog_ingest.sources.http import get_json, make_session
from catalog_ingest.sources.types import CandidateRecord

logger = logging.getLogger(__name__)


class GoogleBooksClient:
    """Client for the Google Books volumes search endpoint"""

    name = "google_books"
    key_prefix = "GBOOKS"
    BASE_URL = "https://www.googleapis.com/books/v1/volumes"
    COVER_URL = "https://books.google.com/books/content?id={id}&printsec=frontcover&img=1&zoom=3"

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0, session=None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or make_session("CatalogIngest/1.0 (catalog seeding)")

    def search(self, query: str, language: str = "pt", max_results: int = 5) -> Optional[CandidateRecord]:
        """
        Return the first volume for `query`, or None when nothing matches.
        Raises SourceError / RateLimitedError on transport failures.
        """
        params = {
            "q": query,
            "langRestrict": language,
            "maxResults": max_results,
            "printType": "books",
        }
        if self.api_key:
            params["key"] = self.api_key

        data = get_json(self.session, self.BASE_URL, params=params, timeout=self.timeout, source=self.name)
        items = data.get("items") or []
        if not items:
            logger.debug("Google Books returned no items for %r", query)
            return None
        return self.to_candidate(items[0])

    def to_candidate(self, item: dict) -> CandidateRecord:
        volume_id = str(item.get("id") or "")
        info = item.get("volumeInfo") or {}
        identifiers = [
            {"type": str(i.get("type") or ""), "identifier": str(i.get("identifier") or "")}
            for i in info.get("industryIdentifiers") or []
            if isinstance(i, dict)
        ]
        return CandidateRecord(
            external_id=volume_id,
            source=self.name,
            key_prefix=self.key_prefix,
            title=info.get("title"),
            subtitle=info.get("subtitle"),
            authors=list(info.get("authors") or []),
            identifiers=identifiers,
            publisher=info.get("publisher"),
            published_date=info.get("publishedDate"),
            description=info.get("description"),
            page_count=info.get("pageCount"),
            language=info.get("language"),
            image_links=dict(info.get("imageLinks") or {}),
            categories=list(info.get("categories") or []),
            average_rating=info.get("averageRating"),
            ratings_count=info.get("ratingsCount"),
            cover_fallback_url=self.COVER_URL.format(id=volume_id) if volume_id else None,
        )

    def close(self) -> None:
        self.session.close()
