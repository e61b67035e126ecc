"""
Canonical catalog record produced by the normalizer.
"""
from dataclasses import dataclass, field, replace
from typing import List, Optional

DEFAULT_AUTHORS = ("Autor Desconhecido",)
DEFAULT_CATEGORIES = ("Literatura",)
DEFAULT_DESCRIPTION = "Descrição não disponível."
DEFAULT_LANGUAGE = "pt"


@dataclass(frozen=True)
class NormalizedRecord:
    title: str
    external_id: str
    source: str
    cover_url: str
    cover_thumbnail: str
    authors: List[str] = field(default_factory=lambda: list(DEFAULT_AUTHORS))
    natural_key: str = ""
    subtitle: Optional[str] = None
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    description: str = DEFAULT_DESCRIPTION
    page_count: Optional[int] = None
    language: str = DEFAULT_LANGUAGE
    categories: List[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    avg_rating: float = 0.0
    ratings_count: int = 0
    verified: bool = True

    def with_key(self, natural_key: str) -> "NormalizedRecord":
        return replace(self, natural_key=natural_key)

    def to_row(self) -> dict:
        """Column values for the `books` table."""
        return {
            "isbn": self.natural_key,
            "external_id": self.external_id,
            "source": self.source,
            "title": self.title,
            "subtitle": self.subtitle,
            "authors": list(self.authors),
            "publisher": self.publisher,
            "published_date": self.published_date,
            "description": self.description,
            "page_count": self.page_count,
            "language": self.language,
            "cover_url": self.cover_url,
            "cover_thumbnail": self.cover_thumbnail,
            "categories": list(self.categories),
            "avg_rating": self.avg_rating,
            "ratings_count": self.ratings_count,
            "is_verified": self.verified,
        }


@dataclass(frozen=True)
class PersistedEntry:
    id: str
    title: str
