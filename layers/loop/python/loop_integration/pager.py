# pager.py
# Cursor-based pagination over /shipment-jobs.

import logging
from typing import Any, Dict, List, Optional

from loop_integration.client import LoopApiError, LoopClient
from loop_integration.config import DEFAULT_LIMIT

logger = logging.getLogger(__name__)


class PaginationStalledError(LoopApiError):
    pass


def fetch_all(
    client: LoopClient,
    start_date: str,
    end_date: str,
    limit: int = DEFAULT_LIMIT,
) -> List[Dict[str, Any]]:
    """
    Accumulate shipments across pages until the API reports no next page or
    `limit` records have been collected. Never returns more than `limit`.

    Any failed page aborts the whole fetch (no retry). A page that claims
    hasNextPage but is empty, or does not advance endCursor, raises
    PaginationStalledError.
    """
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")

    shipments: List[Dict[str, Any]] = []
    cursor: Optional[str] = None
    has_next_page = True

    while has_next_page and len(shipments) < limit:
        page = client.get_shipment_jobs(start_date, end_date, limit - len(shipments), cursor)
        data = page.get("data") or []
        page_info = page.get("pageInfo") or {}

        shipments.extend(data[: limit - len(shipments)])
        logger.info(f"Fetched {len(data)} shipments. Total: {len(shipments)}")

        previous_cursor = cursor
        has_next_page = bool(page_info.get("hasNextPage"))
        cursor = page_info.get("endCursor")

        if not has_next_page or len(shipments) >= limit:
            continue
        if not data:
            raise PaginationStalledError(
                f"Empty page with hasNextPage=true after {len(shipments)} shipments (cursor={cursor!r})"
            )
        if not cursor or cursor == previous_cursor:
            raise PaginationStalledError(
                f"hasNextPage=true without a new endCursor after {len(shipments)} shipments (cursor={cursor!r})"
            )

    return shipments
