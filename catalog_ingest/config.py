import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from catalog_ingest.errors import ConfigurationError


SERVICE_KEY_ENV = "CATALOG_SERVICE_KEY"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def configure_logging(env: Optional[Mapping[str, str]] = None) -> None:
    env = os.environ if env is None else env
    log_level = env.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


@dataclass(frozen=True)
class Settings:
    service_key: Optional[str] = None
    database_url: Optional[str] = None
    use_sqlite: bool = False
    sqlite_db_path: str = "data/catalog.db"
    postgres_user: str = "catalog"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"
    postgres_db: str = "catalog"
    google_books_api_key: Optional[str] = None
    batch_size: int = 10
    item_delay: float = 0.1
    batch_delay: float = 0.2
    max_batch_delay: float = 30.0
    source_timeout: float = 10.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            service_key=env.get(SERVICE_KEY_ENV) or None,
            database_url=env.get("DATABASE_URL") or None,
            use_sqlite=env.get("USE_SQLITE", "0") == "1",
            sqlite_db_path=env.get("SQLITE_DB_PATH", "data/catalog.db"),
            postgres_user=env.get("POSTGRES_USER", "catalog"),
            postgres_host=env.get("POSTGRES_HOST", "localhost"),
            postgres_port=env.get("POSTGRES_PORT", "5432"),
            postgres_db=env.get("POSTGRES_DB", "catalog"),
            google_books_api_key=env.get("GOOGLE_BOOKS_API_KEY") or None,
            batch_size=max(1, _int_env(env, "INGEST_BATCH_SIZE", 10)),
            item_delay=max(0.0, _float_env(env, "INGEST_ITEM_DELAY", 0.1)),
            batch_delay=max(0.0, _float_env(env, "INGEST_BATCH_DELAY", 0.2)),
            max_batch_delay=max(0.0, _float_env(env, "INGEST_MAX_BATCH_DELAY", 30.0)),
            source_timeout=max(1.0, _float_env(env, "SOURCE_TIMEOUT_SECONDS", 10.0)),
        )

    def require_service_key(self) -> str:
        if not self.service_key:
            raise ConfigurationError(f"{SERVICE_KEY_ENV} is not configured")
        return self.service_key

    def database_url_for(self, use_sqlite: Optional[bool] = None) -> str:
        """
        Resolve the SQLAlchemy URL. The privileged service key doubles as the
        password of the catalog role when the URL is built from components.
        """
        if use_sqlite is None:
            use_sqlite = self.use_sqlite
        if self.database_url and not use_sqlite:
            return self.database_url
        if use_sqlite:
            return f"sqlite:///{self.sqlite_db_path}"
        password = self.require_service_key()
        return (
            f"postgresql+psycopg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )
