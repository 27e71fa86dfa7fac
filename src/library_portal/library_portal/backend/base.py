from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from supabase import Client, PostgrestAPIError

from ..core.exceptions import BackendError, SessionExpiredError
from .connection import BackendConnection

logger = logging.getLogger(__name__)

# PostgREST codes for a JWT that failed validation (PGRST303 carries "JWT expired").
EXPIRED_TOKEN_CODES = {"PGRST301", "PGRST303"}


@contextmanager
def backend_client(conn_factory: BackendConnection, *, action: str = "query") -> Iterator[Client]:
    """Yield a client; backend query errors surface as ``BackendError``.

    No retries and no transactions: every failure is terminal for the action.
    """

    client = conn_factory.connect()
    try:
        yield client
    except PostgrestAPIError as e:
        message = getattr(e, "message", None) or str(e)
        if is_expired_token_error(e):
            logger.info("backend %s rejected an expired token", action)
            raise SessionExpiredError() from e
        logger.warning("backend %s failed: %s", action, message)
        raise BackendError(message) from e


def is_expired_token_error(error: PostgrestAPIError) -> bool:
    code = getattr(error, "code", None)
    message = (getattr(error, "message", None) or "").lower()
    return code in EXPIRED_TOKEN_CODES or "jwt expired" in message


def fetchall(response) -> List[Dict[str, Any]]:
    rows = getattr(response, "data", None)
    return list(rows or [])


def fetchone(response) -> Optional[Dict[str, Any]]:
    rows = getattr(response, "data", None)
    if isinstance(rows, list):
        return rows[0] if rows else None
    return rows or None


def fetchcount(response) -> int:
    return int(getattr(response, "count", None) or 0)
