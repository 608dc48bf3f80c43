"""Data models for the dispatch engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from emergency_alert_dispatch.dispatch.errors import ErrorCode


class AlertCategory(str, Enum):
    """Class of emergency driving recipient selection and message template."""

    STANDARD = "standard"
    WEATHER_EMERGENCY = "weather_emergency"


@dataclass(frozen=True)
class AlertPayload:
    """Caller-supplied alert content.

    Attributes:
        location: Human-readable location of the person raising the alert.
        message: Optional free-text message.
        priority: Whether the caller flagged the alert as high priority.
        weather_condition: Observed condition (weather alerts only).
        temperature_celsius: Observed temperature (weather alerts only).
    """

    location: str
    message: str = ""
    priority: bool = False
    weather_condition: str = ""
    temperature_celsius: float = 0.0


@dataclass(frozen=True)
class Recipient:
    """An addressable alert destination with a logical role tag."""

    address: str
    role: str


@dataclass(frozen=True)
class ComposedMessage:
    """Alert text rendered once per dispatch and sent verbatim to everyone."""

    category: AlertCategory
    body: str
    created_at: datetime


@dataclass(frozen=True)
class Sent:
    """Delivery outcome for a recipient the transport accepted."""

    recipient: Recipient


@dataclass(frozen=True)
class Failed:
    """Delivery outcome for a recipient the transport rejected."""

    recipient: Recipient
    reason: str


DeliveryOutcome = Sent | Failed


@dataclass(frozen=True)
class DispatchResult:
    """Aggregate result of one dispatch.

    Attributes:
        sent_count: Number of recipients the transport accepted.
        failed_count: Number of recipients that failed.
        outcomes: Per-recipient outcomes in plan order.
        error_code: Set to ALL_DELIVERIES_FAILED when nothing was sent.
    """

    sent_count: int
    failed_count: int
    outcomes: tuple[DeliveryOutcome, ...] = field(default_factory=tuple)
    error_code: ErrorCode | None = None

    @property
    def overall_success(self) -> bool:
        """Return True if at least one recipient was reached."""
        return self.sent_count > 0

    @property
    def attempted(self) -> int:
        """Return the number of recipients a send was attempted for."""
        return self.sent_count + self.failed_count

    @property
    def failures(self) -> dict[str, str]:
        """Map failed recipient addresses to their failure reasons."""
        return {
            outcome.recipient.address: outcome.reason
            for outcome in self.outcomes
            if isinstance(outcome, Failed)
        }

    def to_dict(self, message: str) -> dict[str, object]:
        """Serialize to the bridge success shape."""
        return {
            "sent": self.sent_count,
            "failed": self.failed_count,
            "message": message,
        }
