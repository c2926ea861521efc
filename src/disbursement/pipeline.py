"""
Disbursement Pipeline

Fetches events, creates one disbursement per planned event, sends the
HCB transfer and writes the outcome back to Airtable.

Flow per event:
1. Create a pending disbursement record
2. Send the transfer (direction by sign, amount in cents)
3. Mark the record processed or failed

A failure on one event is recorded and the run moves on to the next.
A failure fetching events aborts the run.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..errors import UpstreamError
from ..records.airtable_client import (
    AirtableClient,
    DisbursementStatus,
    DisbursementType
)
from ..transfers.hcb_client import HCBClient, to_cents
from .planner import (
    GRANT,
    has_amount_owed,
    PlannedDisbursement,
    parse_custom_amount,
    plan_custom,
    plan_standard
)
from .stats import RunGuard, RunResult, RunStatistics, StatsHolder

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"

TRANSFER_LABELS = {
    DisbursementType.AUTOGRANT: "signup grant",
    DisbursementType.WITHDRAWAL: "withdrawal",
    DisbursementType.MISCELLANEOUS: "disbursement"
}


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


class DisbursementPipeline:
    """
    Runs standard (sign-based) and custom (fixed amount) disbursements.

    Only one run executes at a time; a concurrent trigger raises
    RunInProgressError. The latest statistics are published to a
    StatsHolder for the dashboard.
    """

    def __init__(
        self,
        records: AirtableClient,
        transfers: HCBClient,
        view_id: str,
        organization_id: str,
        program_name: str = "Campfire",
        stats: Optional[StatsHolder] = None,
        guard: Optional[RunGuard] = None
    ):
        """
        Initialize the pipeline.

        Args:
            records: Airtable client
            transfers: HCB client
            view_id: Airtable view listing the events to process
            organization_id: HCB organization that funds grants and receives withdrawals
            program_name: Prefix used in transfer names
            stats: Holder the run statistics are published to
            guard: Run guard shared with anything else that must not overlap a run
        """
        self.records = records
        self.transfers = transfers
        self.view_id = view_id
        self.organization_id = organization_id
        self.program_name = program_name
        self.stats = stats or StatsHolder()
        self.guard = guard or RunGuard()

    def run_standard(self) -> RunResult:
        """Disburse every event with a non-zero owed amount."""
        with self.guard.hold():
            return self._run("standard", plan_standard)

    def run_custom(self, fixed_amount: Any) -> RunResult:
        """
        Send the same grant to every event, regardless of its owed amount.

        Raises:
            InvalidInput: If fixed_amount is not a positive number (nothing is fetched)
        """
        amount = parse_custom_amount(fixed_amount)
        with self.guard.hold():
            return self._run("custom", lambda events: plan_custom(events, amount))

    def _run(self, mode: str, plan) -> RunResult:
        logger.info(f"Starting {mode} disbursement process...")

        stats = RunStatistics(
            mode=mode,
            last_run=datetime.now(timezone.utc),
            in_progress=True
        )
        self.stats.publish(stats)

        try:
            try:
                events = self.records.list_events(self.view_id)
            except UpstreamError as e:
                logger.error(f"Error fetching events: {e}")
                raise

            owed = [event for event in events if has_amount_owed(event)]
            stats.total_events = len(events)
            stats.events_with_amount = len(owed)
            stats.total_amount = round(sum(event.amount_owed for event in owed), 2)
            logger.info(f"Found {len(events)} total events, {len(owed)} with an amount owed "
                        f"(total: ${stats.total_amount:.2f})")

            planned: List[PlannedDisbursement] = plan(events)
            stats.planned_amount = round(sum(item.amount for item in planned), 2)
            self.stats.publish(stats)
            logger.info(f"Planned {len(planned)} disbursements, "
                        f"planned amount: ${stats.planned_amount:.2f}")

            for item in planned:
                if self._process(item):
                    stats.processed_count += 1
                else:
                    stats.failed_count += 1
                stats.disbursements_created += 1
                self.stats.publish(stats)
        finally:
            stats.in_progress = False
            self.stats.publish(stats)

        logger.info(f"Disbursement process completed. Created: {stats.disbursements_created}, "
                    f"Processed: {stats.processed_count}, Failed: {stats.failed_count}")

        return RunResult(
            created=stats.disbursements_created,
            processed=stats.processed_count,
            failed=stats.failed_count
        )

    def _process(self, item: PlannedDisbursement) -> bool:
        """
        Handle one planned disbursement.

        Returns:
            True if the transfer went through, False otherwise
        """
        event = item.event
        logger.info(f"Processing disbursement for event {event.id} "
                    f"(HCB ID: {event.hcb_event_id}, Amount: ${item.amount:.2f})")

        try:
            disbursement = self.records.create_disbursement(
                event_id=event.id,
                amount=item.amount,
                disbursement_type=item.disbursement_type,
                notes=f"Created for event {event.id} at {_timestamp()}"
            )
        except UpstreamError as e:
            logger.error(f"Failed to create disbursement for event {event.id}: {e}")
            return False

        if item.direction == GRANT:
            source, dest = self.organization_id, event.hcb_event_id
        else:
            source, dest = event.hcb_event_id, self.organization_id

        name = (f"{self.program_name} {TRANSFER_LABELS[item.disbursement_type]} "
                f"{disbursement.disbursement_id}")

        try:
            self.transfers.transfer(source, dest, name, to_cents(item.amount))
        except (UpstreamError, ValueError) as e:
            logger.error(f"HCB transfer failed for disbursement "
                         f"{disbursement.disbursement_id}: {e}")
            self._write_status(
                disbursement.id,
                DisbursementStatus.FAILED,
                f"HCB transfer failed: {e}. Failed at {_timestamp()}"
            )
            return False

        if item.direction == GRANT:
            outcome = f"Sent ${abs(item.amount):.2f} to organization {event.hcb_event_id}"
        else:
            outcome = f"Withdrew ${abs(item.amount):.2f} from organization {event.hcb_event_id}"

        self._write_status(
            disbursement.id,
            DisbursementStatus.PROCESSED,
            f"Successfully processed HCB transfer. {outcome}. Completed at {_timestamp()}"
        )
        logger.info(f"Successfully completed disbursement {disbursement.disbursement_id}")
        return True

    def _write_status(self, record_id: str, status: DisbursementStatus, notes: str) -> None:
        # The transfer outcome is already decided; a failed write is only logged
        try:
            self.records.update_disbursement_status(record_id, status, notes)
        except UpstreamError as e:
            logger.error(f"Failed to update disbursement {record_id} to {status.value}: {e}")
