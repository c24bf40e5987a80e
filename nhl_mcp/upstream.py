"""
Upstream client for the NHL statistics web API.

One GET per logical query against the configured base endpoint. Non-success
statuses raise UpstreamError; nothing is cached or retried here.
"""

from typing import Any, Dict, Optional

from .config import create_http_client, get_api_base_url, get_http_headers
from .errors import UpstreamError
from .logging_config import get_logger
from .metrics import measure

logger = get_logger(__name__)


async def fetch_json(
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    service: str = "generic",
    what: Optional[str] = None
) -> Any:
    """
    Fetch and decode one JSON document.

    Args:
        path: Path below the API base URL, e.g. "/v1/roster/TBL/current"
        params: Optional query parameters
        service: USER_AGENTS key identifying the caller
        what: Human description used in failure messages, e.g. "roster for TBL"

    Returns:
        The parsed JSON body

    Raises:
        UpstreamError: On any non-success HTTP status
    """
    url = f"{get_api_base_url()}{path}"
    headers = get_http_headers(service)

    with measure("upstream_request", service=service):
        async with create_http_client() as client:
            response = await client.get(url, params=params, headers=headers)

        status = response.status_code
        logger.debug(f"GET {url} params={params} -> {status}")

        if not 200 <= status < 300:
            reason = getattr(response, "reason_phrase", "") or ""
            description = f"Failed to fetch {what or path}: HTTP {status}"
            if reason:
                description = f"{description} {reason}"
            logger.debug(description)
            raise UpstreamError(description, status_code=status, url=url)

        return response.json()
