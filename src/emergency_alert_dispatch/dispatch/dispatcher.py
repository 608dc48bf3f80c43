"""Alert dispatcher for sequential, paced delivery to every recipient."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from emergency_alert_dispatch.dispatch.aggregator import aggregate
from emergency_alert_dispatch.dispatch.errors import (
    ConfigurationError,
    PermissionDeniedError,
    UnknownCategoryError,
)
from emergency_alert_dispatch.dispatch.models import (
    AlertCategory,
    AlertPayload,
    ComposedMessage,
    DeliveryOutcome,
    DispatchResult,
    Failed,
    Recipient,
    Sent,
)
from emergency_alert_dispatch.dispatch.rate_limiter import RateLimiter
from emergency_alert_dispatch.metrics import DELIVERIES_TOTAL, DISPATCH_DURATION, DISPATCH_TOTAL

if TYPE_CHECKING:
    from emergency_alert_dispatch.dispatch.plan import DispatchPlan, ResolvedPlan
    from emergency_alert_dispatch.dispatch.transports.base import TransportClient

logger = logging.getLogger(__name__)


class AlertDispatcher:
    """Dispatcher for broadcasting one alert to every planned recipient.

    Sends are sequential and follow plan order, so priority recipients are
    reached first. A failure for one recipient is recorded and the loop moves
    on; only configuration errors and missing authorization abort the call,
    and both do so before anything is sent.
    """

    def __init__(
        self,
        plan: DispatchPlan,
        transport: TransportClient,
        *,
        rate_limiter_factory: Callable[[], RateLimiter] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            plan: Category to recipients/template mapping.
            transport: Transport used for every send.
            rate_limiter_factory: Called once per dispatch to obtain the
                limiter pacing that dispatch. Defaults to a fresh
                RateLimiter with the default interval.
            clock: Source of the dispatch timestamp.
        """
        self.plan = plan
        self.transport = transport
        self.rate_limiter_factory = rate_limiter_factory or RateLimiter
        self.clock = clock or (lambda: datetime.now(UTC))

    def compose(self, resolved: ResolvedPlan, payload: AlertPayload) -> ComposedMessage:
        """Render the message sent to every recipient of one dispatch."""
        created_at = self.clock()
        return ComposedMessage(
            category=resolved.category,
            body=resolved.template(payload, created_at),
            created_at=created_at,
        )

    async def _send_to_recipient(
        self, recipient: Recipient, message: ComposedMessage
    ) -> DeliveryOutcome:
        """Send to a single recipient, converting any failure to an outcome."""
        try:
            result = await self.transport.send(recipient.address, message.body)
        except Exception as e:
            logger.warning(
                f"Send to {recipient.address} ({recipient.role}) raised: {e}"
            )
            return Failed(recipient=recipient, reason=str(e) or type(e).__name__)

        if result.ok:
            return Sent(recipient=recipient)

        reason = result.reason or "transport reported failure"
        logger.warning(f"Send to {recipient.address} ({recipient.role}) failed: {reason}")
        return Failed(recipient=recipient, reason=reason)

    async def dispatch(
        self,
        category: AlertCategory,
        payload: AlertPayload,
        *,
        authorized: bool,
    ) -> DispatchResult:
        """Dispatch an alert to every recipient planned for its category.

        Args:
            category: Alert category selecting recipients and template.
            payload: Alert content.
            authorized: Whether the caller confirmed transport authorization.

        Returns:
            DispatchResult with one outcome per planned recipient.

        Raises:
            PermissionDeniedError: If ``authorized`` is false.
            ConfigurationError: If no plan exists for ``category``.
        """
        if not authorized:
            raise PermissionDeniedError("Transport permission not granted")

        try:
            resolved = self.plan.resolve(category)
        except UnknownCategoryError as e:
            logger.error(f"Dispatch aborted: {e}")
            raise ConfigurationError(str(e)) from e

        started = time.perf_counter()
        message = self.compose(resolved, payload)
        limiter = self.rate_limiter_factory()

        outcomes: list[DeliveryOutcome] = []
        for recipient in resolved.recipients:
            async with limiter.throttle():
                outcome = await self._send_to_recipient(recipient, message)
            outcomes.append(outcome)
            DELIVERIES_TOTAL.labels(
                category=category.value,
                status="sent" if isinstance(outcome, Sent) else "failed",
            ).inc()

        result = aggregate(outcomes)

        DISPATCH_DURATION.labels(category=category.value).observe(
            time.perf_counter() - started
        )
        DISPATCH_TOTAL.labels(
            category=category.value,
            outcome="success" if result.overall_success else "failed",
        ).inc()

        if result.overall_success:
            logger.info(
                f"Dispatch complete ({category.value}): "
                f"{result.sent_count}/{result.attempted} sent"
            )
        else:
            logger.error(
                f"Dispatch failed ({category.value}): "
                f"all {result.attempted} deliveries failed"
            )

        return result
