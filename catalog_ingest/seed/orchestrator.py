"""
Run orchestration
-----------------
A client-held loop that walks a dataset variant batch by batch, pacing itself
between batches and aggregating totals. One batch is in flight at a time.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol

import requests

from catalog_ingest.errors import BatchInvocationError, ConfigurationError
from catalog_ingest.seed.service import BatchExecutor

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ERRORED = "errored"
    COMPLETED = "completed"


@dataclass
class RunState:
    dataset_variant: str
    batch_size: int
    offset: int = 0
    total_queries: int = 0
    cumulative_inserted: int = 0
    cumulative_skipped: int = 0
    cumulative_errors: int = 0
    batches: int = 0
    status: RunStatus = RunStatus.IDLE
    log: List[str] = field(default_factory=list)
    last_error: Optional[str] = None

    @property
    def progress(self) -> float:
        if not self.total_queries:
            return 0.0
        return min(1.0, self.offset / self.total_queries)


class BatchInvoker(Protocol):
    def invoke(self, dataset_variant: str, start_index: int, batch_size: int) -> Dict:
        ...

    def checkpoint(self, dataset_variant: str) -> int:
        ...


class LocalBatchInvoker:
    """Calls the batch executor in-process."""

    def __init__(self, executor: BatchExecutor):
        self.executor = executor

    def invoke(self, dataset_variant: str, start_index: int, batch_size: int) -> Dict:
        return self.executor.run_batch(start_index, batch_size, dataset_variant).to_response()

    def checkpoint(self, dataset_variant: str) -> int:
        next_offset, _ = self.executor.repository.get_ingest_offset(dataset_variant)
        return next_offset


class HttpBatchInvoker:
    """Calls a running API's /ingest endpoint."""

    def __init__(self, base_url: str, timeout: float = 300.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Dict) -> Dict:
        try:
            resp = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise BatchInvocationError(f"network error: {e}") from e
        try:
            data = resp.json()
        except ValueError as e:
            raise BatchInvocationError(f"HTTP {resp.status_code}: invalid JSON response") from e
        if not isinstance(data, dict):
            raise BatchInvocationError(f"HTTP {resp.status_code}: unexpected response")
        message = data.get("error") or data.get("detail") or resp.reason
        if resp.status_code == 401:
            raise ConfigurationError(f"server rejected the request: {message}")
        if resp.status_code >= 400 or data.get("error"):
            raise BatchInvocationError(f"HTTP {resp.status_code}: {message}")
        return data

    def invoke(self, dataset_variant: str, start_index: int, batch_size: int) -> Dict:
        return self._get(
            "/ingest",
            {"datasetVariant": dataset_variant, "startIndex": start_index, "batchSize": batch_size},
        )

    def checkpoint(self, dataset_variant: str) -> int:
        data = self._get("/ingest/checkpoint", {"datasetVariant": dataset_variant})
        return int(data.get("nextOffset") or 0)


class RunOrchestrator:
    def __init__(
        self,
        invoker: BatchInvoker,
        dataset_variant: str,
        batch_size: int = 10,
        batch_delay: float = 0.2,
        max_batch_delay: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.invoker = invoker
        self.dataset_variant = dataset_variant
        self.batch_size = batch_size
        self.batch_delay = max(0.0, batch_delay)
        self.max_batch_delay = max(self.batch_delay, max_batch_delay)
        self.current_delay = self.batch_delay
        self._sleep = sleep
        self._pause = threading.Event()
        self.state = RunState(dataset_variant=dataset_variant, batch_size=batch_size)

    def _add_log(self, message: str) -> None:
        self.state.log.append(message)

    def start(self, start_offset: int = 0) -> RunState:
        if self.state.status == RunStatus.RUNNING:
            raise RuntimeError("A run is already in progress")
        if start_offset < 0:
            raise ValueError("start_offset must be >= 0")
        self.state = RunState(
            dataset_variant=self.dataset_variant,
            batch_size=self.batch_size,
            offset=start_offset,
        )
        self.current_delay = self.batch_delay
        self._add_log(f"Starting dataset {self.dataset_variant} at offset {start_offset}")
        logger.info("Run start dataset=%s offset=%s batch_size=%s", self.dataset_variant, start_offset, self.batch_size)
        return self._run()

    def resume(self) -> RunState:
        if self.state.status not in (RunStatus.PAUSED, RunStatus.ERRORED):
            raise RuntimeError(f"Cannot resume a run in state {self.state.status.value}")
        self._add_log(f"Resuming at offset {self.state.offset}")
        logger.info("Run resume dataset=%s offset=%s", self.dataset_variant, self.state.offset)
        return self._run()

    def resume_from_checkpoint(self) -> RunState:
        return self.start(self.invoker.checkpoint(self.dataset_variant))

    def request_pause(self) -> None:
        self._pause.set()

    def reset(self) -> None:
        if self.state.status == RunStatus.RUNNING:
            raise RuntimeError("Cannot reset a running run")
        self._pause.clear()
        self.current_delay = self.batch_delay
        self.state = RunState(dataset_variant=self.dataset_variant, batch_size=self.batch_size)

    def _run(self) -> RunState:
        state = self.state
        self._pause.clear()
        state.status = RunStatus.RUNNING
        state.last_error = None

        while True:
            if self._pause.is_set():
                self._paused()
                break

            self._add_log(f"Processing {state.offset + 1} - {state.offset + self.batch_size}")
            try:
                data = self.invoker.invoke(self.dataset_variant, state.offset, self.batch_size)
                self._apply(data)
            except ConfigurationError as e:
                self._halt(e)
                raise
            except Exception as e:
                self._halt(e)
                break

            if state.offset >= state.total_queries:
                state.status = RunStatus.COMPLETED
                self._add_log("Run complete")
                logger.info(
                    "Run complete dataset=%s inserted=%s skipped=%s errors=%s",
                    self.dataset_variant,
                    state.cumulative_inserted,
                    state.cumulative_skipped,
                    state.cumulative_errors,
                )
                break

            if self._pause.is_set():
                self._paused()
                break

            self._sleep(self._next_delay(data))

        return state

    def _halt(self, error: Exception) -> None:
        self.state.status = RunStatus.ERRORED
        self.state.last_error = str(error)
        self._add_log(f"error: {error}")
        logger.error("Run halted dataset=%s offset=%s: %s", self.dataset_variant, self.state.offset, error)

    def _paused(self) -> None:
        self.state.status = RunStatus.PAUSED
        self._add_log(f"Paused at offset {self.state.offset}")
        logger.info("Run paused dataset=%s offset=%s", self.dataset_variant, self.state.offset)

    def _apply(self, data: Dict) -> None:
        try:
            total = int(data["totalBooks"])
            inserted = int(data.get("success") or 0)
            skipped_count = int(data.get("skippedCount") or 0)
        except (KeyError, TypeError, ValueError) as e:
            raise BatchInvocationError(f"malformed batch response: {e!r}") from e

        state = self.state
        for item in data.get("results") or []:
            self._add_log(f"inserted: {item.get('title')}")
        for message in data.get("skipped") or []:
            self._add_log(f"skipped: {message}")
        errors = data.get("errors") or []
        for message in errors:
            self._add_log(f"error: {message}")

        state.total_queries = total
        state.cumulative_inserted += inserted
        state.cumulative_skipped += skipped_count
        state.cumulative_errors += len(errors)
        state.batches += 1
        state.offset += self.batch_size

    def _next_delay(self, data: Dict) -> float:
        if data.get("rateLimited"):
            self.current_delay = min(max(self.current_delay * 2, 1.0), self.max_batch_delay)
            logger.warning("Rate limited; backing off %.1fs before next batch", self.current_delay)
        else:
            self.current_delay = self.batch_delay
        return self.current_delay
