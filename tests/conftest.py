"""
Shared fixtures: in-memory stand-ins for the Airtable and HCB clients,
and a helper for faking requests responses.
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from src.errors import UpstreamError
from src.records.airtable_client import Disbursement, DisbursementStatus, Event


def make_response(status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> Mock:
    """Build a Mock that looks enough like a requests.Response."""
    response = Mock()
    response.status_code = status_code
    if text is None:
        response.text = json.dumps(payload)
        response.json.return_value = payload
    else:
        response.text = text
        response.json.side_effect = ValueError("No JSON object could be decoded")
    return response


def make_event(record_id: str, amount: float, org: Optional[str] = None) -> Event:
    return Event(
        id=record_id,
        hcb_event_id=org or f"org_{record_id}",
        amount_owed=amount,
        record_id=f"R-{record_id}"
    )


class FakeRecords:
    """In-memory Airtable: events to list, disbursements created and updated."""

    def __init__(self, events: List[Event]):
        self.events = events
        self.list_calls = 0
        self.fail_list = False
        self.fail_create_for = set()
        self.fail_update = False
        self.disbursements: Dict[str, Disbursement] = {}
        self.updates: List[Dict[str, Any]] = []
        self._next_id = 1

    def list_events(self, view_id: str) -> List[Event]:
        self.list_calls += 1
        if self.fail_list:
            raise UpstreamError("Airtable API error", status=500, body='{"error": "boom"}')
        return list(self.events)

    def create_disbursement(self, event_id, amount, disbursement_type, notes) -> Disbursement:
        if event_id in self.fail_create_for:
            raise UpstreamError("Airtable API error", status=422, body="INVALID_VALUE")
        disbursement = Disbursement(
            id=f"recD{self._next_id}",
            disbursement_id=self._next_id,
            associated_event=[event_id],
            amount=amount,
            status=DisbursementStatus.PENDING,
            disbursement_type=disbursement_type,
            notes=notes
        )
        self._next_id += 1
        self.disbursements[disbursement.id] = disbursement
        return disbursement

    def update_disbursement_status(self, record_id, status, notes) -> None:
        self.updates.append({'id': record_id, 'status': status, 'notes': notes})
        if self.fail_update:
            raise UpstreamError("Airtable API error", status=503, body="unavailable")
        record = self.disbursements[record_id]
        record.status = status
        record.notes = notes

    def for_event(self, event_id: str) -> Disbursement:
        return next(d for d in self.disbursements.values() if d.associated_event == [event_id])


class FakeTransfers:
    """Records every transfer; fails those touching an organization in fail_orgs."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.fail_orgs = set()

    def transfer(self, source_org, dest_org, name, amount_cents):
        self.calls.append({
            'source': source_org,
            'dest': dest_org,
            'name': name,
            'amount_cents': amount_cents
        })
        if source_org in self.fail_orgs or dest_org in self.fail_orgs:
            raise UpstreamError("HCB API error", status=400, body="insufficient funds")
        return {}


@pytest.fixture
def mixed_events() -> List[Event]:
    return [
        make_event("rec1", 5.00),
        make_event("rec2", -3.00),
        make_event("rec3", 0.0)
    ]


@pytest.fixture
def transfers() -> FakeTransfers:
    return FakeTransfers()
