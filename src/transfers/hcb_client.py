"""
HCB Transfer Client

Wraps the HCB v4 transfers endpoint used to move funds between organizations.
"""

import logging
from typing import Dict, Any, Optional

import requests

from ..errors import UpstreamError

logger = logging.getLogger(__name__)


def to_cents(dollars: float) -> int:
    """Convert a signed dollar amount to a non-negative number of cents."""
    return int(round(abs(dollars) * 100))


class HCBClient:
    """
    Client for HCB organization-to-organization transfers.

    Direction is expressed only by which organization is the source;
    the amount is always a non-negative integer number of cents.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://hcb.hackclub.com/api/v4",
        timeout: Optional[float] = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize HCB client.

        Args:
            api_token: HCB bearer token
            base_url: API root, without trailing slash
            timeout: Per-request timeout in seconds
            session: Optional pre-built requests session
        """
        if not api_token:
            raise ValueError("HCBClient requires api_token")

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json"
        })
        logger.info(f"HCBClient initialized with base URL: {self.base_url}")

    def transfer(
        self,
        source_org: str,
        dest_org: str,
        name: str,
        amount_cents: int
    ) -> Dict[str, Any]:
        """
        Transfer funds from one organization to another.

        Args:
            source_org: HCB organization the money leaves
            dest_org: HCB organization the money arrives at
            name: Human-readable transfer label
            amount_cents: Non-negative amount in cents

        Returns:
            Decoded response body (empty dict when HCB returns no JSON)

        Raises:
            ValueError: If amount_cents is negative or not an integer
            UpstreamError: On transport failure or non-2xx response
        """
        if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents < 0:
            raise ValueError(f"amount_cents must be a non-negative integer, got {amount_cents!r}")

        url = f"{self.base_url}/organizations/{source_org}/transfers/"
        body = {
            'to_organization_id': dest_org,
            'name': name,
            'amount_cents': amount_cents
        }

        logger.info(f"Sending HCB transfer: {source_org} -> {dest_org}, "
                    f"{amount_cents} cents ({name})")

        try:
            response = self.session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"HCB request failed: {e}")
            raise UpstreamError("HCB request failed", body=str(e)) from e

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                "HCB API error",
                status=response.status_code,
                body=response.text
            )

        logger.info(f"HCB transfer successful: {response.text}")

        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {'data': payload}
