import logging
from contextlib import asynccontextmanager
from typing import List, Mapping, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from catalog_ingest.catalogs import DATASETS, DEFAULT_DATASET, get_dataset
from catalog_ingest.config import Settings, configure_logging
from catalog_ingest.db import CatalogRepository
from catalog_ingest.errors import ConfigurationError, UnknownDatasetError
from catalog_ingest.seed.service import BatchExecutor
from catalog_ingest.sources import get_sources
from catalog_ingest.sources.types import SourceClient


logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 40

settings: Settings = Settings.from_env()
database: Optional[CatalogRepository] = None
sources: Optional[Mapping[str, SourceClient]] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global settings, database, sources
    configure_logging()
    settings = Settings.from_env()
    try:
        settings.require_service_key()
        database = CatalogRepository(settings=settings)
    except ConfigurationError as e:
        # requests are refused with 401 until the credential is provided
        logger.error("Catalog storage unavailable: %s", e)
    sources = get_sources(settings)
    yield
    if database is not None:
        database.close()
    for client in (sources or {}).values():
        client.close()


app = FastAPI(title="Catalog Ingest API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class InsertedBook(BaseModel):
    id: str
    title: str


class IngestResponse(BaseModel):
    datasetVariant: str
    success: int
    skippedCount: int
    totalBooks: int
    startIndex: int
    endIndex: int
    nextOffset: int
    hasMore: bool
    rateLimited: int = 0
    results: List[InsertedBook]
    skipped: List[str]
    errors: List[str]


class CheckpointResponse(BaseModel):
    datasetVariant: str
    nextOffset: int
    totalBooks: int


class DatasetInfo(BaseModel):
    name: str
    source: str
    description: str
    totalQueries: int


def _config_error() -> Optional[JSONResponse]:
    try:
        settings.require_service_key()
    except ConfigurationError as e:
        return JSONResponse(status_code=401, content={"error": str(e)})
    if database is None or sources is None:
        return JSONResponse(status_code=500, content={"error": "Catalog storage not initialized"})
    return None


@app.get("/")
async def root():
    return {"message": "Catalog Ingest API"}


@app.get("/datasets", response_model=List[DatasetInfo])
async def list_datasets():
    return [
        DatasetInfo(name=d.name, source=d.source, description=d.description, totalQueries=len(d))
        for d in DATASETS.values()
    ]


@app.get("/ingest", response_model=IngestResponse)
def ingest(
    datasetVariant: str = Query(DEFAULT_DATASET),
    startIndex: int = Query(0, ge=0),
    batchSize: int = Query(10, ge=1, le=MAX_BATCH_SIZE),
):
    error = _config_error()
    if error is not None:
        return error
    try:
        get_dataset(datasetVariant)
    except UnknownDatasetError as e:
        raise HTTPException(status_code=404, detail=str(e))

    executor = BatchExecutor(database, sources, item_delay=settings.item_delay)
    result = executor.run_batch(startIndex, batchSize, datasetVariant)
    return result.to_response()


@app.get("/ingest/checkpoint", response_model=CheckpointResponse)
def ingest_checkpoint(datasetVariant: str = Query(DEFAULT_DATASET)):
    error = _config_error()
    if error is not None:
        return error
    try:
        dataset = get_dataset(datasetVariant)
    except UnknownDatasetError as e:
        raise HTTPException(status_code=404, detail=str(e))
    next_offset, _ = database.get_ingest_offset(dataset.name)
    return CheckpointResponse(datasetVariant=dataset.name, nextOffset=next_offset, totalBooks=len(dataset))


@app.get("/health")
async def health():
    return {"status": "healthy"}
