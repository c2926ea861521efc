"""
Tests for the Airtable records client: pagination, disbursement
create/update payloads and upstream error handling.
"""

from unittest.mock import MagicMock

import pytest
import requests

from conftest import make_response
from src.errors import UpstreamError
from src.records.airtable_client import (
    AirtableClient,
    DisbursementStatus,
    DisbursementType
)


def record(record_id, amount=None, org="org_x"):
    fields = {'hcb_event_id': org, 'record_id': f"R-{record_id}"}
    if amount is not None:
        fields['amount_owed'] = amount
    return {'id': record_id, 'createdTime': '2025-01-01T00:00:00.000Z', 'fields': fields}


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return AirtableClient(base_id="appTEST", api_key="patTEST", session=session)


class TestListEvents:
    """Pagination over the events view."""

    def test_follows_cursor_until_empty(self, client, session):
        """Pages [A,B]->cursor1, [C]->cursor2, []->'' yield [A,B,C] after three requests."""
        session.request.side_effect = [
            make_response(200, {'records': [record("A", 1), record("B", 2)], 'offset': 'cursor1'}),
            make_response(200, {'records': [record("C", 3)], 'offset': 'cursor2'}),
            make_response(200, {'records': [], 'offset': ''})
        ]

        events = client.list_events("viwTEST")

        assert [e.id for e in events] == ["A", "B", "C"]
        assert session.request.call_count == 3

        offsets = [call.kwargs['params'].get('offset') for call in session.request.call_args_list]
        assert offsets == [None, 'cursor1', 'cursor2']
        assert all(call.kwargs['params']['view'] == "viwTEST"
                   for call in session.request.call_args_list)

    def test_stops_when_offset_omitted(self, client, session):
        session.request.return_value = make_response(200, {'records': [record("A", 1)]})

        events = client.list_events("viwTEST")

        assert len(events) == 1
        assert session.request.call_count == 1
        method, url = session.request.call_args.args
        assert method == 'GET'
        assert url == "https://api.airtable.com/v0/appTEST/events"

    def test_missing_amount_reads_as_zero(self, client, session):
        session.request.return_value = make_response(200, {'records': [record("A")]})

        events = client.list_events("viwTEST")

        assert events[0].amount_owed == 0.0
        assert events[0].hcb_event_id == "org_x"
        assert events[0].record_id == "R-A"

    def test_error_page_raises_with_body(self, client, session):
        session.request.side_effect = [
            make_response(200, {'records': [record("A", 1)], 'offset': 'cursor1'}),
            make_response(422, {'error': {'type': 'LIST_RECORDS_ITERATOR_NOT_AVAILABLE'}})
        ]

        with pytest.raises(UpstreamError) as excinfo:
            client.list_events("viwTEST")

        assert excinfo.value.status == 422
        assert 'LIST_RECORDS_ITERATOR_NOT_AVAILABLE' in excinfo.value.body

    def test_undecodable_page_raises(self, client, session):
        session.request.return_value = make_response(200, text="<html>gateway</html>")

        with pytest.raises(UpstreamError):
            client.list_events("viwTEST")

    def test_transport_error_raises_upstream_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(UpstreamError) as excinfo:
            client.list_events("viwTEST")

        assert excinfo.value.status is None
        assert 'connection refused' in excinfo.value.body

    def test_non_object_record_raises(self, client, session):
        session.request.return_value = make_response(200, {'records': ["garbage"]})

        with pytest.raises(UpstreamError) as excinfo:
            client.list_events("viwTEST")

        assert 'str' in excinfo.value.body

    @pytest.mark.parametrize("fields", ["oops", ["amount_owed", 5]])
    def test_non_object_fields_raises(self, client, session, fields):
        session.request.return_value = make_response(200, {'records': [{'id': "A", 'fields': fields}]})

        with pytest.raises(UpstreamError):
            client.list_events("viwTEST")


class TestDisbursements:
    """Create and status-update calls on the disbursements table."""

    def test_create_sends_pending_record(self, client, session):
        session.request.return_value = make_response(200, {
            'id': 'recD1',
            'fields': {
                'disbursement_id': 42,
                'associated_event': ['recE1'],
                'amount': 5.0,
                'status': 'pending',
                'disbursement_type': 'autogrant',
                'notes': 'Created for event recE1'
            }
        })

        disbursement = client.create_disbursement(
            event_id='recE1',
            amount=5.0,
            disbursement_type=DisbursementType.AUTOGRANT,
            notes='Created for event recE1'
        )

        assert disbursement.id == 'recD1'
        assert disbursement.disbursement_id == 42
        assert disbursement.status == DisbursementStatus.PENDING

        method, url = session.request.call_args.args
        assert method == 'POST'
        assert url.endswith('/appTEST/disbursements')
        assert session.request.call_args.kwargs['json'] == {
            'fields': {
                'associated_event': ['recE1'],
                'amount': 5.0,
                'status': 'pending',
                'disbursement_type': 'autogrant',
                'notes': 'Created for event recE1'
            }
        }

    def test_create_with_malformed_body_raises(self, client, session):
        session.request.return_value = make_response(200, {'id': 'recD1', 'fields': {}})

        with pytest.raises(UpstreamError):
            client.create_disbursement('recE1', 5.0, DisbursementType.AUTOGRANT, 'notes')

    def test_create_error_status_raises(self, client, session):
        session.request.return_value = make_response(403, {'error': 'INVALID_PERMISSIONS'})

        with pytest.raises(UpstreamError) as excinfo:
            client.create_disbursement('recE1', 5.0, DisbursementType.AUTOGRANT, 'notes')

        assert excinfo.value.status == 403

    def test_update_patches_only_status_and_notes(self, client, session):
        session.request.return_value = make_response(200, {'id': 'recD1', 'fields': {}})

        client.update_disbursement_status('recD1', DisbursementStatus.FAILED, 'HCB transfer failed')

        method, url = session.request.call_args.args
        assert method == 'PATCH'
        assert url.endswith('/appTEST/disbursements/recD1')
        assert session.request.call_args.kwargs['json'] == {
            'fields': {'status': 'failed', 'notes': 'HCB transfer failed'}
        }

    def test_update_error_status_raises(self, client, session):
        session.request.return_value = make_response(404, {'error': 'NOT_FOUND'})

        with pytest.raises(UpstreamError):
            client.update_disbursement_status('recD1', DisbursementStatus.PROCESSED, 'done')


def test_bearer_token_set_on_session(session):
    AirtableClient(base_id="appTEST", api_key="patTEST", session=session)

    assert session.headers['Authorization'] == "Bearer patTEST"
