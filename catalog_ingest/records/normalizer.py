import re
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from catalog_ingest.errors import IncompleteCandidate
from catalog_ingest.records.schema import (
    DEFAULT_AUTHORS,
    DEFAULT_CATEGORIES,
    DEFAULT_DESCRIPTION,
    DEFAULT_LANGUAGE,
    NormalizedRecord,
)
from catalog_ingest.sources.types import CandidateRecord

MAX_ZOOM = "3"
CROP_PARAMS = {"edge"}

_YEAR_RE = re.compile(r"^\d{4}$")
_YEAR_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    1999 -> 1999-01-01, 1999-05 -> 1999-05-01; anything else non-empty is kept.
    """
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    if _YEAR_RE.match(value):
        return f"{value}-01-01"
    if _YEAR_MONTH_RE.match(value):
        return f"{value}-01"
    return value


def _secure(url: str) -> str:
    if url.startswith("http:"):
        return "https:" + url[len("http:"):]
    return url


def upgrade_thumbnail(url: str) -> str:
    """Force https, bump zoom to the maximum and drop the page-curl crop artifact."""
    parts = urlsplit(_secure(url))
    query = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in CROP_PARAMS:
            continue
        if key == "zoom":
            value = MAX_ZOOM
        query.append((key, value))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def resolve_cover_url(candidate: CandidateRecord) -> str:
    links = candidate.image_links or {}
    if not any(links.values()):
        raise IncompleteCandidate("no cover")
    thumbnail = links.get("thumbnail")
    if thumbnail:
        return upgrade_thumbnail(thumbnail)
    if candidate.cover_fallback_url:
        return candidate.cover_fallback_url
    raise IncompleteCandidate("no cover")


def _non_negative(value, cast):
    try:
        return max(cast(0), cast(value or 0))
    except (TypeError, ValueError):
        return cast(0)


def normalize_candidate(candidate: CandidateRecord, query: str = "") -> NormalizedRecord:
    """
    Map a raw candidate into the canonical record. Raises IncompleteCandidate
    when there is no usable cover; the natural key is attached separately.
    """
    cover_url = resolve_cover_url(candidate)
    small = (candidate.image_links or {}).get("smallThumbnail")
    cover_thumbnail = _secure(small) if small else cover_url

    page_count = candidate.page_count if isinstance(candidate.page_count, int) and candidate.page_count > 0 else None

    return NormalizedRecord(
        title=candidate.title or query,
        external_id=candidate.external_id,
        source=candidate.source,
        cover_url=cover_url,
        cover_thumbnail=cover_thumbnail,
        authors=[a for a in candidate.authors if a] or list(DEFAULT_AUTHORS),
        subtitle=candidate.subtitle or None,
        publisher=candidate.publisher or None,
        published_date=normalize_date(candidate.published_date),
        description=candidate.description or DEFAULT_DESCRIPTION,
        page_count=page_count,
        language=candidate.language or DEFAULT_LANGUAGE,
        categories=[c for c in candidate.categories if c] or list(DEFAULT_CATEGORIES),
        avg_rating=_non_negative(candidate.average_rating, float),
        ratings_count=_non_negative(candidate.ratings_count, int),
        verified=True,
    )
