# backend/catalog/client.py
from typing import Any, Dict, List, Optional

import httpx

from ..config import get_settings
from ..errors import UpstreamDataError, UpstreamUnavailable
from ..log import get_logger

logger = get_logger(__name__)

_client: Optional[httpx.Client] = None


def get_client() -> httpx.Client:
    global _client
    if _client is None:
        settings = get_settings()
        _client = httpx.Client(
            timeout=settings.GRID_API_TIMEOUT,
            headers={"Content-Type": "application/json"},
        )
    return _client


def _error_messages(errors: Any) -> List[str]:
    if not isinstance(errors, list):
        return [str(errors)]
    messages = []
    for e in errors:
        if isinstance(e, dict):
            messages.append(str(e.get("message", e)))
        else:
            messages.append(str(e))
    return messages


def run_query(
    query: str,
    variables: Optional[Dict[str, Any]] = None,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """
    POST a GraphQL document to The Grid and return its `data` object.

    Raises UpstreamUnavailable on transport failures and non-2xx answers,
    UpstreamDataError when the body is not JSON, carries `errors`, or has
    no `data` object.
    """
    settings = get_settings()
    http = client or get_client()

    try:
        response = http.post(
            settings.GRID_API_URL,
            json={"query": query, "variables": variables or {}},
        )
    except httpx.HTTPError as e:
        logger.warning(f"Catalog request failed: {e}")
        raise UpstreamUnavailable(f"Catalog request failed: {e}") from e

    if response.is_error:
        logger.warning(f"Catalog answered HTTP {response.status_code}")
        raise UpstreamUnavailable(
            f"GraphQL request failed: HTTP {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise UpstreamDataError(f"Catalog returned invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise UpstreamDataError("Catalog returned a non-object payload")

    if payload.get("errors"):
        messages = _error_messages(payload["errors"])
        logger.warning(f"Catalog reported {len(messages)} GraphQL error(s): {messages}")
        raise UpstreamDataError("GraphQL errors: " + "; ".join(messages), errors=messages)

    data = payload.get("data")
    if not isinstance(data, dict):
        raise UpstreamDataError("Catalog response has no data object")
    return data
