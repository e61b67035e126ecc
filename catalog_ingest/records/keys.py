import re
from typing import Optional

from catalog_ingest.sources.types import CandidateRecord

ISBN_PRIORITY = ("ISBN_13", "ISBN_10")

_SEPARATORS = re.compile(r"[\s\-]")


def _compact(identifier: str) -> str:
    return _SEPARATORS.sub("", identifier or "").upper()


def find_identifier(candidate: CandidateRecord, id_type: str) -> Optional[str]:
    """Smallest compacted identifier of the given type, independent of list order."""
    values = {
        _compact(entry.get("identifier", ""))
        for entry in candidate.identifiers
        if entry.get("type") == id_type
    }
    values.discard("")
    return min(values) if values else None


def resolve_natural_key(candidate: CandidateRecord) -> str:
    """ISBN-13, then ISBN-10, then <source prefix>-<external id>."""
    for id_type in ISBN_PRIORITY:
        value = find_identifier(candidate, id_type)
        if value:
            return value
    return f"{candidate.key_prefix}-{candidate.external_id}"
