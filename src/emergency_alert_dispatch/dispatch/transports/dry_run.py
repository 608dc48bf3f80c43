"""Transport that logs messages instead of sending them."""

from __future__ import annotations

import logging

from emergency_alert_dispatch.dispatch.transports.base import TransportResult

logger = logging.getLogger(__name__)


class DryRunTransport:
    """Accepts every message and logs it. Used for --dry-run."""

    def __init__(self) -> None:
        self.name = "dry_run"
        self.sent: list[tuple[str, str]] = []

    async def send(self, address: str, body: str) -> TransportResult:
        preview = body.replace("\n", " | ")
        logger.info(f"[dry-run] SMS to {address}: {preview[:80]}")
        self.sent.append((address, body))
        return TransportResult.success()
