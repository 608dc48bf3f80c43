"""Dispatch engine - plan resolution, paced delivery and result aggregation."""

from emergency_alert_dispatch.dispatch.aggregator import aggregate
from emergency_alert_dispatch.dispatch.dispatcher import AlertDispatcher
from emergency_alert_dispatch.dispatch.errors import (
    ConfigurationError,
    DispatchError,
    ErrorCode,
    PermissionDeniedError,
    TransportError,
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
from emergency_alert_dispatch.dispatch.plan import DispatchPlan, ResolvedPlan
from emergency_alert_dispatch.dispatch.rate_limiter import RateLimiter

__all__ = [
    "AlertCategory",
    "AlertDispatcher",
    "AlertPayload",
    "ComposedMessage",
    "ConfigurationError",
    "DeliveryOutcome",
    "DispatchError",
    "DispatchPlan",
    "DispatchResult",
    "ErrorCode",
    "Failed",
    "PermissionDeniedError",
    "RateLimiter",
    "Recipient",
    "ResolvedPlan",
    "Sent",
    "TransportError",
    "UnknownCategoryError",
    "aggregate",
]
