import argparse
import json
import logging
import os
import signal
import sys
from typing import Optional

from catalog_ingest.catalogs import DATASETS, get_dataset
from catalog_ingest.config import Settings, configure_logging
from catalog_ingest.db import CatalogRepository
from catalog_ingest.errors import BatchInvocationError, ConfigurationError, UnknownDatasetError
from catalog_ingest.seed.orchestrator import HttpBatchInvoker, LocalBatchInvoker, RunOrchestrator, RunStatus
from catalog_ingest.seed.service import BatchExecutor
from catalog_ingest.sources import get_sources


logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _build_executor(settings: Settings, use_sqlite: bool) -> BatchExecutor:
    settings.require_service_key()
    repository = CatalogRepository(use_sqlite=use_sqlite or None, settings=settings)
    return BatchExecutor(repository, get_sources(settings), item_delay=settings.item_delay)


def run_ingest(
    dataset_variant: str,
    batch_size: Optional[int] = None,
    start_offset: int = 0,
    resume: bool = False,
    api_url: Optional[str] = None,
    use_sqlite: bool = False,
    settings: Optional[Settings] = None,
):
    """
    Walks a dataset variant to the end, either in-process or against a
    running API. Ctrl-C pauses after the in-flight batch.
    """
    settings = settings or Settings.from_env()
    get_dataset(dataset_variant)
    if batch_size is None:
        batch_size = settings.batch_size

    executor = None
    if api_url:
        invoker = HttpBatchInvoker(api_url)
        print(f"Running dataset {dataset_variant} against {api_url}")
    else:
        executor = _build_executor(settings, use_sqlite)
        invoker = LocalBatchInvoker(executor)
        print(f"Running dataset {dataset_variant} in-process (SQLite={use_sqlite or settings.use_sqlite})")

    orchestrator = RunOrchestrator(
        invoker,
        dataset_variant,
        batch_size=batch_size,
        batch_delay=settings.batch_delay,
        max_batch_delay=settings.max_batch_delay,
    )

    def _request_pause(signum, frame):
        print("\nPause requested, finishing the current batch...")
        orchestrator.request_pause()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    previous = signal.signal(signal.SIGINT, _request_pause)
    try:
        state = orchestrator.resume_from_checkpoint() if resume else orchestrator.start(start_offset)
    finally:
        signal.signal(signal.SIGINT, previous)
        if executor is not None:
            executor.repository.close()

    for line in state.log:
        print(line)
    print(
        f"\nStatus: {state.status.value} | Inserted {state.cumulative_inserted} | "
        f"Skipped {state.cumulative_skipped} | Errors {state.cumulative_errors} | "
        f"Offset {state.offset}/{state.total_queries}"
    )
    if state.status in (RunStatus.PAUSED, RunStatus.ERRORED):
        print(f"Resume with: --start-offset {state.offset}")
    if state.last_error:
        print(f"Last error: {state.last_error}")
    return state


def run_batch(dataset_variant: str, start_index: int, batch_size: int, use_sqlite: bool = False) -> dict:
    settings = Settings.from_env()
    executor = _build_executor(settings, use_sqlite)
    try:
        return executor.run_batch(start_index, batch_size, dataset_variant).to_response()
    finally:
        executor.repository.close()


def list_datasets():
    for dataset in DATASETS.values():
        print(f"{dataset.name:<12} {dataset.source:<12} {len(dataset):>4}  {dataset.description}")


def run_api(host: str = "0.0.0.0", port: int = 8000, use_sqlite: bool = False):
    import uvicorn

    if use_sqlite:
        os.environ["USE_SQLITE"] = "1"
        print("Starting API in SQLite mode")
    else:
        print("Starting API in PostgreSQL mode")

    uvicorn.run("catalog_ingest.api.main:app", host=host, port=port)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Catalog ingestion CLI")
    subparsers = parser.add_subparsers(dest='command', required=True)

    run_parser = subparsers.add_parser('run', help='Ingest a dataset variant batch by batch')
    run_parser.add_argument('dataset', help='Dataset variant name')
    run_parser.add_argument('--batch-size', type=_positive_int, default=None, help='Queries per batch')
    start = run_parser.add_mutually_exclusive_group()
    start.add_argument('--start-offset', type=_non_negative_int, default=0, help='Offset to start from')
    start.add_argument('--resume', action='store_true', help='Start from the stored checkpoint')
    run_parser.add_argument('--api-url', default=None, help='Drive a running API instead of ingesting in-process')
    run_parser.add_argument('--sqlite', action='store_true', help='Use SQLite instead of PostgreSQL')

    batch_parser = subparsers.add_parser('batch', help='Run a single batch and print the result')
    batch_parser.add_argument('dataset', help='Dataset variant name')
    batch_parser.add_argument('--start-index', type=_non_negative_int, default=0)
    batch_parser.add_argument('--batch-size', type=_positive_int, default=10)
    batch_parser.add_argument('--sqlite', action='store_true', help='Use SQLite instead of PostgreSQL')

    subparsers.add_parser('datasets', help='List dataset variants')

    api_parser = subparsers.add_parser('api', help='Run the REST API')
    api_parser.add_argument('--host', default="0.0.0.0")
    api_parser.add_argument('--port', type=int, default=8000)
    api_parser.add_argument('--sqlite', action='store_true', help='Use SQLite instead of PostgreSQL')

    args = parser.parse_args(argv)
    configure_logging()

    try:
        if args.command == 'run':
            state = run_ingest(
                args.dataset,
                batch_size=args.batch_size,
                start_offset=args.start_offset,
                resume=args.resume,
                api_url=args.api_url,
                use_sqlite=args.sqlite,
            )
            return 1 if state.status == RunStatus.ERRORED else 0
        elif args.command == 'batch':
            print(json.dumps(run_batch(args.dataset, args.start_index, args.batch_size, args.sqlite), ensure_ascii=False, indent=2))
        elif args.command == 'datasets':
            list_datasets()
        elif args.command == 'api':
            run_api(args.host, args.port, args.sqlite)
    except (ConfigurationError, UnknownDatasetError) as e:
        logger.error("%s", e)
        return EXIT_CONFIG_ERROR
    except BatchInvocationError as e:
        logger.error("Could not reach the batch executor: %s", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
