"""HTTP SMS gateway transport implementation."""

from __future__ import annotations

import logging

import httpx

from emergency_alert_dispatch.dispatch.transports.base import TransportResult

logger = logging.getLogger(__name__)


class SmsGatewayTransport:
    """Sends SMS messages through an HTTP gateway API.

    Posts one JSON request per message. Any 2xx response counts as accepted;
    every other response or HTTP error is reported as a failed send. Retries
    are left to the gateway.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        sender_id: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize SMS gateway transport.

        Args:
            url: Gateway endpoint accepting message submissions.
            api_key: Bearer token for the gateway.
            sender_id: Optional sender name or number shown to recipients.
            timeout: HTTP request timeout in seconds.
        """
        self.url = url
        self.api_key = api_key
        self.sender_id = sender_id
        self.timeout = timeout
        self.name = "sms_gateway"

    def _build_payload(self, address: str, body: str) -> dict[str, str]:
        payload = {"to": address, "body": body}
        if self.sender_id:
            payload["from"] = self.sender_id
        return payload

    async def send(self, address: str, body: str) -> TransportResult:
        """Submit one SMS to the gateway.

        Args:
            address: Destination phone number or short code.
            body: Message text.

        Returns:
            TransportResult describing whether the gateway accepted it.
        """
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.url,
                    json=self._build_payload(address, body),
                    headers=headers,
                )
        except httpx.TimeoutException:
            logger.warning(f"SMS gateway timeout sending to {address}")
            return TransportResult.failure("gateway timeout")
        except httpx.HTTPError as e:
            logger.error(f"SMS gateway error sending to {address}: {e}")
            return TransportResult.failure(f"gateway error: {e}")

        if 200 <= response.status_code < 300:
            logger.debug(f"SMS gateway accepted message to {address}")
            return TransportResult.success()

        logger.error(
            f"SMS gateway rejected message to {address}: "
            f"{response.status_code} {response.text}"
        )
        return TransportResult.failure(f"gateway returned {response.status_code}")
