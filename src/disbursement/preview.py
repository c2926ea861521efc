"""
Disbursement Preview

Read-only projection of what a run would do, for confirmation before
any money moves.
"""

import logging
from typing import Any, Dict, Optional

from ..records.airtable_client import AirtableClient
from .planner import parse_custom_amount, plan_custom, plan_standard

logger = logging.getLogger(__name__)


class PreviewService:
    """Fetches events and applies the run's planning without writing anything."""

    def __init__(self, records: AirtableClient, view_id: str):
        self.records = records
        self.view_id = view_id

    def preview(self, custom_amount: Optional[Any] = None) -> Dict[str, Any]:
        """
        Preview a standard run, or a custom run when custom_amount is given.

        Args:
            custom_amount: Optional fixed grant amount (number or numeric string)

        Returns:
            Dictionary with the planned events and totals

        Raises:
            InvalidInput: If custom_amount is given but invalid (nothing is fetched)
            UpstreamError: If fetching events fails
        """
        if custom_amount is not None and custom_amount != "":
            amount = parse_custom_amount(custom_amount)
            events = self.records.list_events(self.view_id)
            planned = plan_custom(events, amount)
        else:
            events = self.records.list_events(self.view_id)
            planned = plan_standard(events)

        total_amount = round(sum(item.amount for item in planned), 2)
        logger.info(f"Preview: {len(planned)} of {len(events)} events, "
                    f"total amount ${total_amount:.2f}")

        return {
            'events': [
                {
                    'event_id': item.event.id,
                    'record_id': item.event.record_id,
                    'counterparty_id': item.event.hcb_event_id,
                    'amount': item.amount,
                    'direction': item.direction
                }
                for item in planned
            ],
            'total_events': len(events),
            'total_amount': total_amount,
            'event_count': len(planned)
        }
