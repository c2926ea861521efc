"""
Disbursement Module

Plans, previews and executes disbursement runs, and tracks their statistics.
"""

from .pipeline import DisbursementPipeline
from .planner import (
    PlannedDisbursement,
    has_amount_owed,
    parse_custom_amount,
    plan_custom,
    plan_standard
)
from .preview import PreviewService
from .stats import RunGuard, RunResult, RunStatistics, StatsHolder

__all__ = [
    "DisbursementPipeline",
    "PlannedDisbursement",
    "PreviewService",
    "RunGuard",
    "RunResult",
    "RunStatistics",
    "StatsHolder",
    "has_amount_owed",
    "parse_custom_amount",
    "plan_custom",
    "plan_standard"
]
