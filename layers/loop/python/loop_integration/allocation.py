# allocation.py
# Billing (allocation) codes derived from freight terms and job type.

from typing import Any, Dict

UNKNOWN = "Unknown"

FREIGHT_TERMS_CODES = {
    "3rd Party": "123.445",
    "Collect": "987.434",
    UNKNOWN: "756.434",
}

JOB_TYPE_CODES = {
    "FTL": "999.123",
    "LTL": "001.456",
    UNKNOWN: "000.000",
}


def _normalize_terms(value: Any) -> str:
    # Only the first character is capitalised: "3RD PARTY" -> "3rd party" (no match).
    if not isinstance(value, str) or not value:
        return UNKNOWN
    normalized = value[0].upper() + value[1:].lower()
    return normalized if normalized in FREIGHT_TERMS_CODES else UNKNOWN


def _normalize_job_type(value: Any) -> str:
    if not isinstance(value, str):
        return UNKNOWN
    normalized = value.strip().upper()
    return normalized if normalized in JOB_TYPE_CODES else UNKNOWN


def generate(shipment: Dict[str, Any]) -> Dict[str, Any]:
    job_type_info = shipment.get("jobTypeInfo")
    if not isinstance(job_type_info, dict):
        job_type_info = {}
    freight_terms = _normalize_terms(job_type_info.get("freightChargeTerms"))
    job_type = _normalize_job_type(shipment.get("jobType"))
    return {
        "shipmentQid": shipment.get("qid"),
        "freightChargeTerms": FREIGHT_TERMS_CODES[freight_terms],
        "jobType": JOB_TYPE_CODES[job_type],
    }
