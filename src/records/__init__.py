"""
Records Module

Airtable access for events (read) and disbursements (create/update).
"""

from .airtable_client import (
    AirtableClient,
    Disbursement,
    DisbursementStatus,
    DisbursementType,
    Event
)

__all__ = [
    "AirtableClient",
    "Disbursement",
    "DisbursementStatus",
    "DisbursementType",
    "Event"
]
