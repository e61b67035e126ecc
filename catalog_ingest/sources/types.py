from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol


@dataclass
class CandidateRecord:
    """Raw fields of the top external match for one query."""

    external_id: str
    source: str
    key_prefix: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    identifiers: List[Dict[str, str]] = field(default_factory=list)
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    description: Optional[str] = None
    page_count: Optional[int] = None
    language: Optional[str] = None
    image_links: Dict[str, str] = field(default_factory=dict)
    categories: List[str] = field(default_factory=list)
    average_rating: Optional[float] = None
    ratings_count: Optional[int] = None
    cover_fallback_url: Optional[str] = None


class SourceClient(Protocol):
    name: str

    def search(self, query: str, language: str = "pt", max_results: int = 5) -> Optional[CandidateRecord]:
        ...

    def close(self) -> None:
        ...
