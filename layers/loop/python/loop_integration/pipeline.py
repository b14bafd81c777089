# pipeline.py
# ping -> paginated fetch -> concurrent carrier enrichment -> allocation codes

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from loop_integration import allocation, carriers
from loop_integration.client import LoopClient
from loop_integration.config import DEFAULT_LIMIT
from loop_integration.pager import fetch_all

logger = logging.getLogger(__name__)

# Shipments with this BOL get the full carrier record (legal name included).
FULL_CARRIER_BOL = "BOL123"


def _bol_number(shipment: Dict[str, Any]) -> Optional[str]:
    refs = shipment.get("referenceNumbers")
    return refs.get("bolNumber") if isinstance(refs, dict) else None


def _carrier_org_id(shipment: Dict[str, Any]) -> Optional[str]:
    info = shipment.get("jobTypeInfo")
    return info.get("carrierOrganizationQid") if isinstance(info, dict) else None


def enrich_shipment(client: LoopClient, shipment: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the shipment with carrierData attached."""
    org_id = _carrier_org_id(shipment)
    if _bol_number(shipment) == FULL_CARRIER_BOL:
        info = carriers.lookup_full(client, org_id)
    else:
        info = carriers.lookup_basic(client, org_id)
    return {**shipment, "carrierData": info.to_dict()}


def enrich_all(
    client: LoopClient,
    shipments: List[Dict[str, Any]],
    max_workers: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Enrich every shipment concurrently. One worker per shipment unless
    max_workers caps the pool. Output order matches input order.
    """
    if not shipments:
        return []
    workers = min(max_workers, len(shipments)) if max_workers else len(shipments)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda s: enrich_shipment(client, s), shipments))


def run(
    client: LoopClient,
    start_date: str,
    end_date: str,
    limit: int = DEFAULT_LIMIT,
    max_workers: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Full pipeline for one date range. Ping and pagination failures propagate;
    enrichment and code generation degrade to sentinel values instead.
    """
    client.ping()
    logger.info("Auth validated...")

    shipments = fetch_all(client, start_date, end_date, limit)
    logger.info(f"Total shipments fetched: {len(shipments)}")

    enriched = enrich_all(client, shipments, max_workers)

    return [
        {**shipment, "allocationCodes": allocation.generate(shipment)}
        for shipment in enriched
    ]
