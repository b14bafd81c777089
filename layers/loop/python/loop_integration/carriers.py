# carriers.py
# Carrier organization lookups. Both entry points are total: missing ids and
# failed lookups come back as sentinel records, never as exceptions.

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from loop_integration.client import LoopClient

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
ERROR = "Error"


@dataclass(frozen=True)
class BasicCarrierInfo:
    us_dot_number: str
    scac: str
    mc_number: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "usDotNumber": self.us_dot_number,
            "scac": self.scac,
            "mcNumber": self.mc_number,
        }


@dataclass(frozen=True)
class FullCarrierInfo:
    legal_name: str
    us_dot_number: str
    scac: str
    mc_number: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "legalName": self.legal_name,
            "usDotNumber": self.us_dot_number,
            "scac": self.scac,
            "mcNumber": self.mc_number,
        }


CarrierInfo = Union[BasicCarrierInfo, FullCarrierInfo]

UNKNOWN_BASIC = BasicCarrierInfo(UNKNOWN, UNKNOWN, UNKNOWN)
UNKNOWN_FULL = FullCarrierInfo(UNKNOWN, UNKNOWN, UNKNOWN, UNKNOWN)
# Failed lookups always report every field, legalName included.
ERROR_INFO = FullCarrierInfo(ERROR, ERROR, ERROR, ERROR)


def _field(obj: Dict[str, Any], key: str) -> str:
    return obj.get(key) or UNKNOWN


def _fetch_carrier_fields(client: LoopClient, org_id: str):
    org = client.get_organization(org_id)
    trucking = org["truckingCarrierInfo"]
    return (
        _field(org, "legalName"),
        _field(trucking, "usDotNumber"),
        _field(trucking, "scac"),
        _field(trucking, "mcNumber"),
    )


def lookup_basic(client: LoopClient, org_id: Optional[str]) -> CarrierInfo:
    """DOT/SCAC/MC numbers for a carrier organization."""
    if not org_id:
        logger.warning("Missing carrierOrganizationQid, skipping carrier info fetch")
        return UNKNOWN_BASIC
    try:
        _, us_dot_number, scac, mc_number = _fetch_carrier_fields(client, org_id)
        return BasicCarrierInfo(us_dot_number, scac, mc_number)
    except Exception as e:
        logger.error(f"Error fetching carrier info for {org_id}: {e}")
        return ERROR_INFO


def lookup_full(client: LoopClient, org_id: Optional[str]) -> FullCarrierInfo:
    """Like lookup_basic, plus the carrier's legal name."""
    if not org_id:
        logger.warning("Missing carrierOrganizationQid, skipping carrier info fetch")
        return UNKNOWN_FULL
    try:
        return FullCarrierInfo(*_fetch_carrier_fields(client, org_id))
    except Exception as e:
        logger.error(f"Error fetching carrier info for {org_id}: {e}")
        return ERROR_INFO
