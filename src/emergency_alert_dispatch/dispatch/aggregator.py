"""Reduction of per-recipient outcomes into a dispatch result."""

from __future__ import annotations

from collections.abc import Iterable

from emergency_alert_dispatch.dispatch.errors import ErrorCode
from emergency_alert_dispatch.dispatch.models import DeliveryOutcome, DispatchResult, Sent


def aggregate(outcomes: Iterable[DeliveryOutcome]) -> DispatchResult:
    """Reduce delivery outcomes to a DispatchResult.

    A dispatch succeeds overall when at least one recipient was reached.
    When none was, the result carries ALL_DELIVERIES_FAILED.

    Args:
        outcomes: Per-recipient outcomes in plan order.

    Returns:
        DispatchResult with counts and the recorded outcomes.
    """
    recorded = tuple(outcomes)
    sent_count = sum(1 for outcome in recorded if isinstance(outcome, Sent))
    failed_count = len(recorded) - sent_count

    return DispatchResult(
        sent_count=sent_count,
        failed_count=failed_count,
        outcomes=recorded,
        error_code=None if sent_count > 0 else ErrorCode.ALL_DELIVERIES_FAILED,
    )
