"""Error types for the catalog ingestion pipeline.

Item-level errors are recorded in the batch result and never abort a batch.
Invocation-level and configuration errors stop the run.
"""


class CatalogIngestError(Exception):
    """Base exception for all catalog-ingest errors."""

    pass


class ConfigurationError(CatalogIngestError):
    """Required configuration (e.g. the storage credential) is missing."""

    pass


class UnknownDatasetError(CatalogIngestError):
    """The requested dataset variant does not exist."""

    pass


class SourceError(CatalogIngestError):
    """Transient failure talking to an external catalog API (network, timeout, bad status)."""

    pass


class RateLimitedError(SourceError):
    """The external catalog API rejected the request because of rate limiting."""

    pass


class IncompleteCandidate(CatalogIngestError):
    """Candidate is missing a required visual asset and must not be persisted."""

    pass


class PersistenceError(CatalogIngestError):
    """The store rejected a write for a reason other than the natural-key conflict."""

    pass


class BatchInvocationError(CatalogIngestError):
    """Invoking the batch executor itself failed; the run halts."""

    pass
