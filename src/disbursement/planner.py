"""
Disbursement Planner

Decides which events get a disbursement, for how much, and in which
direction. The pipeline and the preview both go through here so the
preview always matches what a run would do.
"""

import math
from typing import Any, List

from pydantic import BaseModel

from ..errors import InvalidInput
from ..records.airtable_client import DisbursementType, Event
from ..transfers.hcb_client import to_cents

GRANT = "grant"
WITHDRAWAL = "withdrawal"


class PlannedDisbursement(BaseModel):
    """One event scheduled for a disbursement."""
    event: Event
    amount: float
    direction: str
    disbursement_type: DisbursementType


def has_amount_owed(event: Event) -> bool:
    """True when the owed amount is at least one cent either way."""
    return to_cents(event.amount_owed) != 0


def plan_standard(events: List[Event]) -> List[PlannedDisbursement]:
    """
    Sign-based plan: positive owed amounts become grants, negative ones
    withdrawals, anything under a cent is skipped. Fetch order is preserved.
    """
    planned = []
    for event in events:
        if not has_amount_owed(event):
            continue
        if event.amount_owed > 0:
            planned.append(PlannedDisbursement(
                event=event,
                amount=event.amount_owed,
                direction=GRANT,
                disbursement_type=DisbursementType.AUTOGRANT
            ))
        else:
            planned.append(PlannedDisbursement(
                event=event,
                amount=event.amount_owed,
                direction=WITHDRAWAL,
                disbursement_type=DisbursementType.WITHDRAWAL
            ))
    return planned


def plan_custom(events: List[Event], amount: float) -> List[PlannedDisbursement]:
    """Give every event, including zero-owed ones, the same grant amount."""
    return [
        PlannedDisbursement(
            event=event,
            amount=amount,
            direction=GRANT,
            disbursement_type=DisbursementType.MISCELLANEOUS
        )
        for event in events
    ]


def parse_custom_amount(value: Any) -> float:
    """
    Validate a custom disbursement amount.

    Args:
        value: Number or numeric string (e.g. a form field)

    Returns:
        The amount as a float

    Raises:
        InvalidInput: If the value is missing, non-numeric, not finite or not positive
    """
    if value is None or isinstance(value, bool):
        raise InvalidInput("Custom amount is required")

    if isinstance(value, str):
        value = value.strip()

    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Custom amount must be a number, got {value!r}")

    if not math.isfinite(amount) or amount <= 0:
        raise InvalidInput(f"Custom amount must be greater than zero, got {value!r}")

    if round(amount * 100) < 1:
        raise InvalidInput(f"Custom amount must be at least $0.01, got {value!r}")

    return amount
