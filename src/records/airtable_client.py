"""
Airtable Records Client

Paginated read access to the events table and create/update access to the
disbursements table of an Airtable base.
"""

import logging
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

import requests
from pydantic import BaseModel, Field, ValidationError

from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class DisbursementStatus(str, Enum):
    """Lifecycle of a disbursement record."""
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


class DisbursementType(str, Enum):
    """Type tag written to the disbursement record."""
    AUTOGRANT = "autogrant"
    WITHDRAWAL = "withdrawal"
    MISCELLANEOUS = "miscellaneous"


class Event(BaseModel):
    """An events-table record with the amount owed to (or by) its organization."""
    id: str = Field(..., description="Airtable record id")
    hcb_event_id: str = Field("", description="HCB organization id of the event")
    amount_owed: float = Field(0.0, description="Signed dollars; positive is owed to the event")
    record_id: str = Field("", description="Secondary identifier from the base")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        if not isinstance(record, dict):
            raise TypeError(f"Event record must be an object, got {type(record).__name__}")
        fields = record.get('fields') or {}
        if not isinstance(fields, dict):
            raise TypeError(f"Event fields must be an object, got {type(fields).__name__}")
        # Airtable leaves empty cells out of the payload entirely
        return cls(
            id=record['id'],
            hcb_event_id=str(fields.get('hcb_event_id') or ''),
            amount_owed=fields.get('amount_owed') or 0.0,
            record_id=str(fields.get('record_id') or '')
        )


class Disbursement(BaseModel):
    """A disbursements-table record as returned by Airtable."""
    id: str
    disbursement_id: int = Field(..., description="Autonumber used in transfer names")
    associated_event: List[str] = Field(default_factory=list)
    amount: float
    status: DisbursementStatus
    disbursement_type: DisbursementType
    notes: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Disbursement":
        return cls(id=record['id'], **record['fields'])


class AirtableClient:
    """
    Thin REST client for the events and disbursements tables.

    Every method blocks until Airtable answers. Non-2xx responses and
    undecodable bodies raise UpstreamError carrying the response body.
    """

    API_ROOT = "https://api.airtable.com/v0"

    def __init__(
        self,
        base_id: str,
        api_key: str,
        events_table: str = "events",
        disbursements_table: str = "disbursements",
        timeout: Optional[float] = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Airtable client.

        Args:
            base_id: Airtable base identifier (app...)
            api_key: Personal access token
            events_table: Name of the events table
            disbursements_table: Name of the disbursements table
            timeout: Per-request timeout in seconds
            session: Optional pre-built requests session
        """
        if not base_id or not api_key:
            raise ValueError("AirtableClient requires base_id and api_key")

        self.base_url = f"{self.API_ROOT}/{base_id}"
        self.events_table = events_table
        self.disbursements_table = disbursements_table
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json"
        })
        logger.info(f"AirtableClient initialized for base: {base_id}")

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Perform a request and return the decoded JSON body."""
        url = f"{self.base_url}/{path}"

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Airtable request failed: {method} {path}: {e}")
            raise UpstreamError("Airtable request failed", body=str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Airtable API error on {method} {path}: "
                         f"{response.status_code} {response.text}")
            raise UpstreamError(
                "Airtable API error",
                status=response.status_code,
                body=response.text
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                "Malformed Airtable response",
                status=response.status_code,
                body=response.text
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamError(
                "Malformed Airtable response",
                status=response.status_code,
                body=response.text
            )

        return payload

    def _get_events_page(self, view_id: str, offset: str = "") -> Tuple[List[Event], str]:
        """
        Fetch one page of the events view.

        Returns:
            Tuple of (events, next_offset); next_offset is "" on the last page
        """
        params = {'view': view_id}
        if offset:
            params['offset'] = offset

        payload = self._request('GET', self.events_table, params=params)

        try:
            events = [Event.from_record(record) for record in payload.get('records', [])]
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise UpstreamError("Malformed event record", body=str(e)) from e

        return events, payload.get('offset') or ""

    def list_events(self, view_id: str) -> List[Event]:
        """
        Fetch every event in a view, following the pagination cursor.

        Args:
            view_id: Airtable view identifier

        Returns:
            Events in the order Airtable returned them

        Raises:
            UpstreamError: If any page fails
        """
        all_events: List[Event] = []
        offset = ""
        page = 0

        while True:
            events, offset = self._get_events_page(view_id, offset)
            page += 1
            all_events.extend(events)
            logger.debug(f"Fetched events page {page}: {len(events)} records")

            if not offset:
                break

        logger.info(f"Fetched {len(all_events)} events across {page} page(s)")
        return all_events

    def create_disbursement(
        self,
        event_id: str,
        amount: float,
        disbursement_type: DisbursementType,
        notes: str
    ) -> Disbursement:
        """
        Create a pending disbursement linked to one event.

        Args:
            event_id: Airtable record id of the event
            amount: Signed dollar amount
            disbursement_type: Type tag for the record
            notes: Initial notes

        Returns:
            The created Disbursement with Airtable-assigned ids

        Raises:
            UpstreamError: On non-2xx status or malformed response
        """
        body = {
            'fields': {
                'associated_event': [event_id],
                'amount': amount,
                'status': DisbursementStatus.PENDING.value,
                'disbursement_type': DisbursementType(disbursement_type).value,
                'notes': notes
            }
        }

        payload = self._request('POST', self.disbursements_table, json=body)

        try:
            disbursement = Disbursement.from_record(payload)
        except (KeyError, TypeError, ValidationError) as e:
            raise UpstreamError("Malformed disbursement response", body=str(payload)) from e

        logger.info(f"Created disbursement {disbursement.disbursement_id} for event {event_id}")
        return disbursement

    def update_disbursement_status(
        self,
        record_id: str,
        status: DisbursementStatus,
        notes: str
    ) -> None:
        """
        Overwrite the status and notes of a disbursement; other fields are untouched.

        Raises:
            UpstreamError: On non-2xx status
        """
        body = {
            'fields': {
                'status': DisbursementStatus(status).value,
                'notes': notes
            }
        }

        self._request('PATCH', f"{self.disbursements_table}/{record_id}", json=body)
        logger.debug(f"Disbursement {record_id} marked {DisbursementStatus(status).value}")
