"""Shared HTTP session for Overpass API queries.

Public Overpass instances throttle per client. They answer 429 with a
``Retry-After`` header while too many queries are in flight and 504 when the
server-side queue times out. Both are retried with backoff, honouring
``Retry-After``. Queries are read-only, so POST is retried as well.
"""

from __future__ import annotations

import threading
from typing import Optional

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import (
    HTTP_BACKOFF_FACTOR,
    HTTP_MAX_RETRIES,
    HTTP_POOL_CONNECTIONS,
    HTTP_POOL_MAXSIZE,
    OVERPASS_USER_AGENT,
)

__all__ = ["OVERPASS_RETRY_STATUSES", "build_overpass_retry", "create_overpass_session", "get_overpass_session"]

OVERPASS_RETRY_STATUSES = frozenset({429, 502, 503, 504})

_shared_session: Optional[Session] = None
_shared_session_lock = threading.Lock()


def build_overpass_retry(
    max_retries: int = HTTP_MAX_RETRIES,
    backoff_factor: float = HTTP_BACKOFF_FACTOR,
) -> Retry:
    """Retry policy for throttled or overloaded Overpass servers.

    Once retries run out the last response is returned rather than raised,
    so callers see the real status through ``raise_for_status``.
    """

    return Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=sorted(OVERPASS_RETRY_STATUSES),
        allowed_methods=frozenset({"GET", "POST"}),
        respect_retry_after_header=True,
        raise_on_status=False,
    )


def create_overpass_session(user_agent: str = OVERPASS_USER_AGENT) -> Session:
    adapter = HTTPAdapter(
        pool_connections=HTTP_POOL_CONNECTIONS,
        pool_maxsize=HTTP_POOL_MAXSIZE,
        max_retries=build_overpass_retry(),
    )
    session = requests.Session()
    for prefix in ("https://", "http://"):
        session.mount(prefix, adapter)
    # Overpass operators ask clients to identify themselves.
    session.headers["User-Agent"] = user_agent
    session.headers["Accept"] = "application/json"
    return session


def get_overpass_session() -> Session:
    """Return the process-wide Overpass session, creating it on first use."""

    global _shared_session
    with _shared_session_lock:
        if _shared_session is None:
            _shared_session = create_overpass_session()
        return _shared_session
