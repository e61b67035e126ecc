import logging
from typing import Dict, Optional

import requests

from catalog_ingest.errors import RateLimitedError, SourceError

logger = logging.getLogger(__name__)

RATE_LIMIT_REASONS = {"rateLimitExceeded", "userRateLimitExceeded", "dailyLimitExceeded"}


def make_session(user_agent: str) -> requests.Session:
    session = requests.Session()
    session.headers.update({
        "Accept": "application/json",
        "User-Agent": user_agent,
    })
    return session


def _error_reasons(resp: requests.Response) -> set:
    try:
        payload = resp.json()
    except ValueError:
        return set()
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return set()
    return {e.get("reason") for e in error.get("errors") or [] if isinstance(e, dict)}


def get_json(
    session: requests.Session,
    url: str,
    *,
    params: Optional[Dict[str, object]] = None,
    timeout: float,
    source: str,
) -> dict:
    """Single GET with a bounded timeout, no retries."""
    logger.debug("request | source=%s | url=%s | params=%s", source, url, params)
    try:
        resp = session.get(url, params=params, timeout=timeout)
    except requests.Timeout as e:
        raise SourceError(f"{source} timed out after {timeout:g}s") from e
    except requests.RequestException as e:
        raise SourceError(f"{source} request failed: {e}") from e

    if resp.status_code == 429:
        raise RateLimitedError(f"{source} rate limit exceeded (429)")
    if resp.status_code == 403 and _error_reasons(resp) & RATE_LIMIT_REASONS:
        raise RateLimitedError(f"{source} rate limit exceeded (403)")
    if resp.status_code >= 400:
        raise SourceError(f"{source} API error: {resp.status_code} {resp.reason}")

    try:
        data = resp.json()
    except ValueError as e:
        raise SourceError(f"{source} returned invalid JSON") from e
    if not isinstance(data, dict):
        raise SourceError(f"{source} returned unexpected payload")
    return data
