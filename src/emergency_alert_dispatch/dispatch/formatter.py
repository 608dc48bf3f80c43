"""Alert message templates.

Each template turns an AlertPayload into the plain text sent to every
recipient of a dispatch. Templates receive the dispatch timestamp as an
argument so that rendering stays a pure function of its inputs.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from emergency_alert_dispatch.dispatch.models import AlertCategory, AlertPayload

if TYPE_CHECKING:
    from emergency_alert_dispatch.dispatch.models import DispatchResult

MessageTemplate = Callable[[AlertPayload, datetime], str]

DEFAULT_STANDARD_MESSAGE = "Emergency! I need help."
PRIORITY_HEADER = "PRIORITY ALERT"


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp as Unix epoch milliseconds."""
    return str(int(moment.timestamp() * 1000))


def format_temperature(celsius: float) -> str:
    """Format a temperature reading in degrees Celsius."""
    return f"{celsius}°C"


def standard_template(payload: AlertPayload, created_at: datetime) -> str:
    """Render a general emergency alert."""
    lines = []
    if payload.priority:
        lines.append(PRIORITY_HEADER)
    lines.append(payload.message.strip() or DEFAULT_STANDARD_MESSAGE)
    lines.append(f"Location: {payload.location}")
    lines.append(f"Time: {format_timestamp(created_at)}")
    return "\n".join(lines)


def weather_template(payload: AlertPayload, created_at: datetime) -> str:
    """Render a severe weather alert with the observed conditions."""
    lines = [
        "WEATHER EMERGENCY ALERT!",
        "Severe weather conditions detected.",
        f"Condition: {payload.weather_condition}",
        f"Temperature: {format_temperature(payload.temperature_celsius)}",
        f"Location: {payload.location}",
        "Immediate assistance required!",
    ]
    if payload.priority:
        lines.insert(0, PRIORITY_HEADER)
    if payload.message.strip():
        lines.append(f"Note: {payload.message.strip()}")
    lines.append(f"Time: {format_timestamp(created_at)}")
    return "\n".join(lines)


DEFAULT_TEMPLATES: dict[AlertCategory, MessageTemplate] = {
    AlertCategory.STANDARD: standard_template,
    AlertCategory.WEATHER_EMERGENCY: weather_template,
}


def status_message(category: AlertCategory, result: DispatchResult) -> str:
    """Build the one-line status shown to the person raising the alert."""
    if not result.overall_success:
        if category is AlertCategory.WEATHER_EMERGENCY:
            return "Failed to send weather emergency alert"
        return "Failed to send emergency SMS"

    contacts = "contact" if result.sent_count == 1 else "contacts"
    if category is AlertCategory.WEATHER_EMERGENCY:
        text = f"Weather emergency alert sent to {result.sent_count} {contacts}"
    else:
        text = f"Emergency SMS sent to {result.sent_count} {contacts}"
    if result.failed_count:
        text += f" ({result.failed_count} failed)"
    return text
