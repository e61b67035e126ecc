import logging
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Dict, List, Mapping, Optional

from catalog_ingest.catalogs import CatalogQuery, get_dataset
from catalog_ingest.db import CatalogRepository
from catalog_ingest.errors import (
    CatalogIngestError,
    IncompleteCandidate,
    PersistenceError,
    RateLimitedError,
    SourceError,
)
from catalog_ingest.records.keys import resolve_natural_key
from catalog_ingest.records.normalizer import normalize_candidate
from catalog_ingest.sources.types import SourceClient


logger = logging.getLogger(__name__)

SKIP_NOT_FOUND = "not found"
SKIP_NO_COVER = "no cover"


class RateLimiter:
    def __init__(
        self,
        interval_seconds: float,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.interval = max(0.0, interval_seconds)
        self._clock = clock
        self._sleep = sleep
        self._lock = Lock()
        self._next_time = 0.0

    def wait(self) -> None:
        if self.interval == 0:
            return
        with self._lock:
            now = self._clock()
            delay = 0.0
            if now < self._next_time:
                delay = self._next_time - now
                self._next_time += self.interval
            else:
                self._next_time = now + self.interval
        if delay > 0:
            self._sleep(delay)


@dataclass
class InsertedRecord:
    id: str
    title: str


@dataclass
class SkippedQuery:
    reason: str
    query: str

    def message(self) -> str:
        return f"{self.reason}: {self.query}"


@dataclass
class BatchResult:
    dataset_variant: str
    start_index: int
    batch_size: int
    total: int
    processed_count: int = 0
    inserted: List[InsertedRecord] = field(default_factory=list)
    skipped: List[SkippedQuery] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    rate_limited: int = 0

    @property
    def next_offset(self) -> int:
        return self.start_index + self.batch_size

    @property
    def end_index(self) -> int:
        return self.next_offset

    @property
    def has_more(self) -> bool:
        return self.next_offset < self.total

    def to_response(self) -> Dict:
        return {
            "datasetVariant": self.dataset_variant,
            "success": len(self.inserted),
            "skippedCount": len(self.skipped),
            "totalBooks": self.total,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "nextOffset": self.next_offset,
            "hasMore": self.has_more,
            "rateLimited": self.rate_limited,
            "results": [{"id": r.id, "title": r.title} for r in self.inserted],
            "skipped": [s.message() for s in self.skipped],
            "errors": list(self.errors),
        }


class BatchExecutor:
    """
    Runs one slice of a dataset variant end to end: lookup, normalize, key,
    upsert. Items are processed strictly one after another.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        sources: Mapping[str, SourceClient],
        item_delay: float = 0.1,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.repository = repository
        self.sources = sources
        self.rate_limiter = rate_limiter or RateLimiter(item_delay)

    def run_batch(self, start_offset: int, batch_size: int, dataset_variant: str) -> BatchResult:
        if start_offset < 0:
            raise ValueError("start_offset must be >= 0")
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")

        dataset = get_dataset(dataset_variant)
        client = self.sources.get(dataset.source)
        if client is None:
            raise ValueError(f"Unsupported source {dataset.source}")

        result = BatchResult(
            dataset_variant=dataset.name,
            start_index=start_offset,
            batch_size=batch_size,
            total=len(dataset),
        )
        batch = dataset.slice(start_offset, batch_size)
        logger.info(
            "Batch start dataset=%s source=%s start=%s size=%s items=%s total=%s",
            dataset.name,
            dataset.source,
            start_offset,
            batch_size,
            len(batch),
            result.total,
        )

        start = time.perf_counter()
        for query in batch:
            self.rate_limiter.wait()
            self._process(client, query, dataset.language, dataset.max_results, result)
            result.processed_count += 1

        self._save_checkpoint(result)
        logger.info(
            "Batch done dataset=%s start=%s inserted=%s skipped=%s errors=%s duration=%.2fs",
            dataset.name,
            start_offset,
            len(result.inserted),
            len(result.skipped),
            len(result.errors),
            time.perf_counter() - start,
        )
        return result

    def _process(
        self,
        client: SourceClient,
        query: CatalogQuery,
        language: str,
        max_results: int,
        result: BatchResult,
    ) -> None:
        try:
            candidate = client.search(query.text, language=language, max_results=max_results)
            if candidate is None:
                result.skipped.append(SkippedQuery(SKIP_NOT_FOUND, query.text))
                return

            try:
                record = normalize_candidate(candidate, query=query.text)
            except IncompleteCandidate:
                result.skipped.append(SkippedQuery(SKIP_NO_COVER, candidate.title or query.text))
                return

            record = record.with_key(resolve_natural_key(candidate))
            persisted = self.repository.upsert_entry(record)
            result.inserted.append(InsertedRecord(id=persisted.id, title=persisted.title))
            logger.debug("Upserted %s key=%s id=%s", persisted.title, record.natural_key, persisted.id)
        except RateLimitedError as e:
            result.rate_limited += 1
            result.errors.append(f"Fetch error ({query.text}): {e}")
            logger.warning("Rate limited query=%r: %s", query.text, e)
        except SourceError as e:
            result.errors.append(f"Fetch error ({query.text}): {e}")
            logger.warning("Fetch failed query=%r: %s", query.text, e)
        except PersistenceError as e:
            result.errors.append(f"DB Error: {e}")
            logger.warning("Store rejected query=%r: %s", query.text, e)
        except Exception as e:
            result.errors.append(f"Exception: {e}")
            logger.exception("Unexpected failure query=%r", query.text)

    def _save_checkpoint(self, result: BatchResult) -> None:
        try:
            self.repository.update_ingest_offset(
                result.dataset_variant,
                min(result.next_offset, result.total),
                result.total,
            )
        except CatalogIngestError:
            logger.exception("Failed to store checkpoint dataset=%s", result.dataset_variant)
