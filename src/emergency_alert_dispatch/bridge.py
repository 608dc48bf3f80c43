"""Invocation boundary between the application layer and the dispatcher.

The application calls a named method with a key-value argument map and
receives a key-value reply: ``{"sent", "failed", "message"}`` when at least
one recipient was reached, otherwise ``{"code", "message"}``.

Supported methods:
    sendEmergencySMS: ``location``, ``message``, ``priority``
    triggerWeatherEmergency: ``location``, ``weatherCondition``, ``temperature``
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from emergency_alert_dispatch.dispatch.errors import DispatchError, ErrorCode
from emergency_alert_dispatch.dispatch.formatter import status_message
from emergency_alert_dispatch.dispatch.models import AlertCategory, AlertPayload

if TYPE_CHECKING:
    from emergency_alert_dispatch.authorization import Authorizer
    from emergency_alert_dispatch.dispatch.dispatcher import AlertDispatcher

logger = logging.getLogger(__name__)

METHOD_SEND_EMERGENCY_SMS = "sendEmergencySMS"
METHOD_TRIGGER_WEATHER_EMERGENCY = "triggerWeatherEmergency"

SUCCESS_MESSAGES = {
    AlertCategory.STANDARD: "SMS sent successfully",
    AlertCategory.WEATHER_EMERGENCY: "Weather emergency alert sent",
}


class StatusNotifier(Protocol):
    """Surfaces a single human-readable status line to the end user."""

    def notify(self, text: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes status lines to the log."""

    def notify(self, text: str) -> None:
        logger.info(f"Status: {text}")


class StandardAlertArgs(BaseModel):
    """Arguments of ``sendEmergencySMS``."""

    model_config = ConfigDict(extra="ignore")

    location: str = ""
    message: str = ""
    priority: bool = False

    def to_payload(self) -> AlertPayload:
        return AlertPayload(
            location=self.location,
            message=self.message,
            priority=self.priority,
        )


class WeatherAlertArgs(BaseModel):
    """Arguments of ``triggerWeatherEmergency``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    location: str = ""
    weather_condition: str = Field(default="", alias="weatherCondition")
    temperature: float = 0.0
    message: str = ""
    priority: bool = False

    def to_payload(self) -> AlertPayload:
        return AlertPayload(
            location=self.location,
            message=self.message,
            priority=self.priority,
            weather_condition=self.weather_condition,
            temperature_celsius=self.temperature,
        )


METHODS: dict[str, tuple[AlertCategory, type[StandardAlertArgs] | type[WeatherAlertArgs]]] = {
    METHOD_SEND_EMERGENCY_SMS: (AlertCategory.STANDARD, StandardAlertArgs),
    METHOD_TRIGGER_WEATHER_EMERGENCY: (AlertCategory.WEATHER_EMERGENCY, WeatherAlertArgs),
}


def error_response(code: ErrorCode, message: str) -> dict[str, object]:
    """Build the bridge error reply."""
    return {"code": code.value, "message": message}


class MethodBridge:
    """Maps named method calls onto dispatcher invocations.

    The bridge owns the authorization check: it asks the authorizer before
    every dispatch, requests authorization when it is missing, and only then
    calls the dispatcher.
    """

    def __init__(
        self,
        dispatcher: AlertDispatcher,
        authorizer: Authorizer,
        *,
        notifier: StatusNotifier | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.authorizer = authorizer
        self.notifier = notifier or LoggingNotifier()

    async def handle(
        self, method: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, object]:
        """Handle one method call.

        Args:
            method: Method name selecting the alert category.
            arguments: Method arguments. Missing or null values take defaults.

        Returns:
            Success or error reply map.
        """
        if method not in METHODS:
            logger.warning(f"Unsupported bridge method: {method}")
            return error_response(ErrorCode.NOT_IMPLEMENTED, f"Unknown method: {method}")

        category, args_model = METHODS[method]
        provided = {k: v for k, v in (arguments or {}).items() if v is not None}
        try:
            payload = args_model.model_validate(provided).to_payload()
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {method}: {e.error_count()} errors")
            return error_response(ErrorCode.INVALID_ARGUMENTS, str(e))

        authorized = self.authorizer.is_authorized()
        if not authorized:
            self.authorizer.request_authorization()
            text = "SMS permission not granted"
            self.notifier.notify(f"{text}. Emergency features may not work.")
            return error_response(ErrorCode.PERMISSION_DENIED, text)

        try:
            result = await self.dispatcher.dispatch(category, payload, authorized=authorized)
        except DispatchError as e:
            self.notifier.notify(f"Alert error: {e}")
            return error_response(e.code, str(e))

        self.notifier.notify(status_message(category, result))

        if not result.overall_success:
            return error_response(
                ErrorCode.ALL_DELIVERIES_FAILED,
                status_message(category, result),
            )
        return result.to_dict(SUCCESS_MESSAGES[category])
