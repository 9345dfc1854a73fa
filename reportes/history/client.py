"""
History API client -- GET /api/registros.

Every failure mode (transport, non-2xx status, malformed payload) is
collapsed into ``HistoryFetchError`` so callers only handle one type.
"""
from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from reportes.core.config import get_settings
from reportes.core.logging import get_logger
from reportes.history.models import HistoryRecord
from reportes.history.token_store import read_token

logger = get_logger(__name__)

_UNSET: Any = object()


class HistoryFetchError(Exception):
    """The history log could not be retrieved."""


def build_headers(token: str | None) -> dict[str, str]:
    """Authorization header for *token*; empty when there is no token."""
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def parse_items(payload: Any) -> list[HistoryRecord]:
    """Turn the ``{"items": [...]}`` body into records (missing items -> [])."""
    if not isinstance(payload, dict):
        raise HistoryFetchError("Unexpected response body: expected a JSON object")
    items = payload.get("items") or []
    if not isinstance(items, list):
        raise HistoryFetchError(
            f"Unexpected 'items' field: expected a list, got {type(items).__name__}"
        )
    try:
        return [HistoryRecord.model_validate(item) for item in items]
    except ValidationError as exc:
        raise HistoryFetchError(f"Malformed history record: {exc.error_count()} error(s)") from exc


def fetch_history(
    client: httpx.Client | None = None,
    token: str | None = _UNSET,
    limit: int | None = None,
) -> list[HistoryRecord]:
    """Fetch the most recent history records.

    Parameters
    ----------
    client : httpx.Client, optional
        Client to issue the request with.  A short-lived one is created
        when omitted.
    token : str, optional
        Bearer token.  Read from local storage when not given; ``None``
        sends the request without credentials.
    limit : int, optional
        Override ``history_limit`` from settings.
    """
    settings = get_settings()
    if token is _UNSET:
        token = read_token()
    if limit is None:
        limit = settings.history_limit

    if token is None:
        logger.info("No stored token -- requesting history without credentials")

    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=settings.request_timeout)
    try:
        resp = client.get(
            settings.history_url,
            params={"limit": limit},
            headers=build_headers(token),
        )
        resp.raise_for_status()
        payload = resp.json()
    except httpx.HTTPStatusError as exc:
        raise HistoryFetchError(f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise HistoryFetchError(f"Transport error: {exc}") from exc
    except httpx.InvalidURL as exc:
        raise HistoryFetchError(f"Invalid history URL: {exc}") from exc
    except ValueError as exc:
        raise HistoryFetchError("Response body is not valid JSON") from exc
    finally:
        if owns_client:
            client.close()

    records = parse_items(payload)
    logger.info("Fetched %d history records", len(records))
    return records
