"""Authorization gate for the message transport."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Authorizer(Protocol):
    """Protocol for the platform permission check guarding the transport."""

    def is_authorized(self) -> bool:
        """Return True if the transport may be used."""
        ...

    def request_authorization(self) -> None:
        """Ask for authorization. The outcome is observed on a later call."""
        ...


class StaticAuthorizer:
    """Authorizer backed by a configured grant.

    Requests cannot change the grant at runtime; they are logged so an
    operator can update ``SMS_PERMISSION_GRANTED``.
    """

    def __init__(self, granted: bool) -> None:
        self.granted = granted
        self.requests = 0

    def is_authorized(self) -> bool:
        return self.granted

    def request_authorization(self) -> None:
        self.requests += 1
        if not self.granted:
            logger.warning(
                "SMS permission requested but not granted; "
                "set SMS_PERMISSION_GRANTED=true to enable emergency alerts"
            )
