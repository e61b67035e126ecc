import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from sqlalchemy import create_engine, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from catalog_ingest.config import Settings
from catalog_ingest.db.models import Base, CatalogEntry, IngestOffset, _new_id
from catalog_ingest.errors import PersistenceError
from catalog_ingest.records.schema import NormalizedRecord, PersistedEntry

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _error_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig or exc).strip().splitlines()[0]


class CatalogRepository:
    """Catalog storage: one `books` row per natural key, plus run checkpoints."""

    def __init__(self, url: Optional[str] = None, use_sqlite: Optional[bool] = None, settings: Optional[Settings] = None):
        settings = settings or Settings.from_env()
        self.url = url or settings.database_url_for(use_sqlite)
        parsed = make_url(self.url)
        self.dialect = parsed.get_backend_name()
        if self.dialect not in _DIALECT_INSERTS:
            raise ValueError(f"Unsupported database backend {self.dialect!r}")

        connect_args = {}
        if self.dialect == "sqlite":
            if parsed.database and parsed.database != ":memory:":
                Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
            connect_args["check_same_thread"] = False

        self.engine = create_engine(self.url, pool_pre_ping=True, connect_args=connect_args)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._init_db()

    def _init_db(self) -> None:
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        session = self.Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def upsert_entry(self, record: NormalizedRecord) -> PersistedEntry:
        """
        Insert-or-update keyed on the natural key in one statement. An existing
        row keeps its id and created_at; every other column takes the new values.
        """
        if not record.natural_key:
            raise ValueError("natural_key is required")
        insert = _DIALECT_INSERTS[self.dialect]
        row = record.to_row()

        stmt = insert(CatalogEntry).values(id=_new_id(), **row)
        update_cols = {name: stmt.excluded[name] for name in row if name != "isbn"}
        update_cols["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=["isbn"],
            set_=update_cols,
        ).returning(CatalogEntry.id, CatalogEntry.title)

        try:
            with self.engine.begin() as conn:
                persisted = conn.execute(stmt).one()
        except SQLAlchemyError as e:
            raise PersistenceError(_error_message(e)) from e
        return PersistedEntry(id=persisted.id, title=persisted.title)

    def get_by_natural_key(self, natural_key: str) -> Optional[Dict]:
        with self.get_session() as session:
            entry = session.execute(
                select(CatalogEntry).where(CatalogEntry.isbn == natural_key)
            ).scalar_one_or_none()
            return entry.to_dict() if entry else None

    def count_entries(self, natural_key: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(CatalogEntry)
        if natural_key is not None:
            stmt = stmt.where(CatalogEntry.isbn == natural_key)
        with self.get_session() as session:
            return int(session.execute(stmt).scalar_one())

    def get_ingest_offset(self, dataset_variant: str) -> Tuple[int, int]:
        with self.get_session() as session:
            row = session.execute(
                select(IngestOffset.next_offset, IngestOffset.total)
                .where(IngestOffset.dataset_variant == dataset_variant)
            ).one_or_none()
        if not row:
            return 0, 0
        return int(row.next_offset), int(row.total)

    def update_ingest_offset(self, dataset_variant: str, next_offset: int, total: int) -> None:
        insert = _DIALECT_INSERTS[self.dialect]
        stmt = insert(IngestOffset).values(
            dataset_variant=dataset_variant,
            next_offset=next_offset,
            total=total,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["dataset_variant"],
            set_={
                "next_offset": stmt.excluded.next_offset,
                "total": stmt.excluded.total,
                "updated_at": func.now(),
            },
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(_error_message(e)) from e

    def close(self) -> None:
        self.engine.dispose()
