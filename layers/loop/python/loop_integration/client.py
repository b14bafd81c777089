# client.py
# Thin REST client for the Loop logistics API (Bearer token).
#   GET /ping
#   GET /shipment-jobs?revisedAfter&revisedBefore&first&after
#   GET /organizations/{id}

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from loop_integration.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, LoopSettings
from loop_integration.kms_utils import mask_secret

logger = logging.getLogger(__name__)


class LoopApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class LoopClient:
    """
    Immutable client value. Build one per pipeline run and pass it to every
    component that talks to Loop.
    """
    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_settings(cls, settings: LoopSettings) -> "LoopClient":
        logger.info(f"Loop client for {settings.base_url} (key {mask_secret(settings.api_key)})")
        return cls(api_key=settings.api_key, base_url=settings.base_url, timeout=settings.timeout)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url.rstrip('/')}{path}"
        try:
            r = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise LoopApiError(f"Loop GET {path} failed: {e}")
        if not r.ok:
            # Upstream bodies stay in the log; the exception message reaches API callers.
            logger.error(f"Loop GET {path} {r.status_code}: {r.text}")
            raise LoopApiError(f"Loop GET {path} failed with status {r.status_code}", status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise LoopApiError(f"Loop GET {path} returned invalid JSON: {e}", status_code=r.status_code)

    # ---------------- Endpoints ----------------

    def ping(self) -> Any:
        """Auth/connectivity check. Raises LoopApiError when the token is rejected."""
        try:
            data = self._get("/ping")
        except LoopApiError as e:
            logger.error(f"Error in ping: {e}")
            raise
        logger.info(f"Auth test response: {data}")
        return data

    def get_shipment_jobs(
        self,
        start_date: str,
        end_date: str,
        first: int,
        after: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch one page of shipment jobs revised within [start_date, end_date]."""
        params: Dict[str, Any] = {
            "revisedAfter": start_date,
            "revisedBefore": end_date,
            "first": first,
        }
        if after:
            params["after"] = after
        try:
            return self._get("/shipment-jobs", params=params)
        except LoopApiError as e:
            logger.error(f"Error in get_shipment_jobs: {e}")
            raise

    def get_organization(self, org_id: str) -> Dict[str, Any]:
        return self._get(f"/organizations/{org_id}")
