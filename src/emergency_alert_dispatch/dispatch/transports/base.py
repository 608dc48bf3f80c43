"""Transport interface used by the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class TransportResult:
    """Result of sending one message to one address."""

    ok: bool
    reason: str | None = None

    @classmethod
    def success(cls) -> TransportResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: str) -> TransportResult:
        return cls(ok=False, reason=reason)


class TransportClient(Protocol):
    """Protocol for message transports (SMS gateway, test doubles)."""

    name: str

    async def send(self, address: str, body: str) -> TransportResult:
        """Send one message to one address."""
        ...
