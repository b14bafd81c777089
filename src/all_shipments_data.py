# all_shipments_data.py
# Lambda entry for GET /shipments: Loop shipment jobs enriched with carrier data
# and allocation codes, returned as a JSON array.
# Optional query params: startDate, endDate (YYYY-MM-DD) override the configured range.

import json
import logging
from typing import Any, Dict

from loop_integration import pipeline
from loop_integration.client import LoopClient
from loop_integration.config import ConfigError, load_settings

logger = logging.getLogger()
logger.setLevel(logging.INFO)


# =============== HTTP helpers ===============

def _cors_headers() -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Allow-Methods": "OPTIONS,GET",
    }


def _resp(status: int, body: Any) -> Dict[str, Any]:
    return {"statusCode": status, "headers": _cors_headers(), "body": json.dumps(body)}


def _event_dict(event) -> Dict[str, Any]:
    # Direct invokes may pass any JSON payload; only API Gateway dicts carry routing data.
    return event if isinstance(event, dict) else {}


def _qs(event: Dict[str, Any]) -> Dict[str, str]:
    qs = event.get("queryStringParameters")
    return qs if isinstance(qs, dict) else {}


# =============== Lambda entry ===============

def lambda_handler(event, _context):
    logger.info("Lambda function started")
    event = _event_dict(event)
    method = str(event.get("httpMethod") or "").upper()

    if method == "OPTIONS":
        return _resp(200, {"message": "CORS preflight successful"})

    try:
        settings = load_settings()
        logger.setLevel(settings.log_level)
    except Exception as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        return _resp(500, {"error": "Internal Server Error", "details": str(e)})

    qs = _qs(event)
    try:
        settings = settings.with_dates(qs.get("startDate"), qs.get("endDate"))
    except ConfigError as e:
        return _resp(400, {"error": str(e)})

    try:
        logger.info(f"Processing shipments... {settings.describe()}")
        client = LoopClient.from_settings(settings)
        tms_data = pipeline.run(
            client,
            settings.start_date,
            settings.end_date,
            limit=settings.limit,
            max_workers=settings.max_workers,
        )
        logger.info(f"Shipment processing completed ({len(tms_data)} shipments)")
        logger.debug(f"Tms Data: {json.dumps(tms_data, indent=2)}")
        return _resp(200, tms_data)
    except Exception as e:
        logger.error(f"An error occurred: {e}", exc_info=True)
        return _resp(500, {"error": "Internal Server Error", "details": str(e)})
