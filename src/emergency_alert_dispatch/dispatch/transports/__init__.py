"""Transport implementations for alert delivery."""

from emergency_alert_dispatch.dispatch.transports.base import TransportClient, TransportResult
from emergency_alert_dispatch.dispatch.transports.dry_run import DryRunTransport
from emergency_alert_dispatch.dispatch.transports.sms_gateway import SmsGatewayTransport

__all__ = [
    "DryRunTransport",
    "SmsGatewayTransport",
    "TransportClient",
    "TransportResult",
]
