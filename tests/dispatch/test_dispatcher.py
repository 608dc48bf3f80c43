"""Tests for the alert dispatcher."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from emergency_alert_dispatch.dispatch.dispatcher import AlertDispatcher
from emergency_alert_dispatch.dispatch.errors import (
    ConfigurationError,
    ErrorCode,
    PermissionDeniedError,
    TransportError,
)
from emergency_alert_dispatch.dispatch.models import (
    AlertCategory,
    AlertPayload,
    Failed,
    Recipient,
    Sent,
)
from emergency_alert_dispatch.dispatch.plan import DEFAULT_RECIPIENTS, DispatchPlan
from emergency_alert_dispatch.dispatch.rate_limiter import RateLimiter
from emergency_alert_dispatch.dispatch.transports.base import TransportResult

FIXED_TIME = datetime(2025, 1, 1, tzinfo=UTC)

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def plan() -> DispatchPlan:
    """Create the default dispatch plan."""
    return DispatchPlan(DEFAULT_RECIPIENTS)


@pytest.fixture
def mock_transport() -> MagicMock:
    """Create a mock transport that accepts every message."""
    transport = MagicMock()
    transport.name = "mock"
    transport.send = AsyncMock(return_value=TransportResult.success())
    return transport


@pytest.fixture
def dispatcher(plan: DispatchPlan, mock_transport: MagicMock) -> AlertDispatcher:
    """Create a dispatcher with no pacing delay and a fixed clock."""
    return AlertDispatcher(
        plan,
        mock_transport,
        rate_limiter_factory=lambda: RateLimiter(0),
        clock=lambda: FIXED_TIME,
    )


@pytest.fixture
def payload() -> AlertPayload:
    return AlertPayload(location="MG Road, Bengaluru", message="Car accident", priority=True)


def sent_addresses(transport: MagicMock) -> list[str]:
    return [call.args[0] for call in transport.send.await_args_list]


# ============================================================================
# Successful dispatch
# ============================================================================


class TestDispatchSuccess:
    """Tests for dispatches where the transport accepts messages."""

    @pytest.mark.asyncio
    async def test_all_recipients_succeed(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        """Standard plan with four working recipients."""
        result = await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        assert result.sent_count == 4
        assert result.failed_count == 0
        assert result.overall_success is True
        assert result.error_code is None
        assert mock_transport.send.await_count == 4

    @pytest.mark.asyncio
    async def test_sends_in_plan_order(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        """Emergency services are contacted first."""
        result = await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        expected = [r.address for r in DEFAULT_RECIPIENTS[AlertCategory.STANDARD]]
        assert sent_addresses(mock_transport) == expected
        assert [o.recipient.address for o in result.outcomes] == expected

    @pytest.mark.asyncio
    async def test_identical_body_for_every_recipient(
        self,
        plan: DispatchPlan,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        """The message is composed once, with a single timestamp read."""
        clock = MagicMock(return_value=FIXED_TIME)
        dispatcher = AlertDispatcher(
            plan,
            mock_transport,
            rate_limiter_factory=lambda: RateLimiter(0),
            clock=clock,
        )

        await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        bodies = {call.args[1] for call in mock_transport.send.await_args_list}
        assert len(bodies) == 1
        clock.assert_called_once()

    @pytest.mark.asyncio
    async def test_weather_message_contents(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
    ) -> None:
        """Weather alerts carry condition, temperature and location verbatim."""
        payload = AlertPayload(
            location="Shimla",
            weather_condition="hailstorm",
            temperature_celsius=-5.0,
        )

        result = await dispatcher.dispatch(
            AlertCategory.WEATHER_EMERGENCY, payload, authorized=True
        )

        assert result.sent_count == 2
        body = mock_transport.send.await_args_list[0].args[1]
        assert "hailstorm" in body
        assert "-5.0" in body
        assert "Shimla" in body

    @pytest.mark.asyncio
    async def test_weather_uses_priority_recipients(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        await dispatcher.dispatch(AlertCategory.WEATHER_EMERGENCY, payload, authorized=True)

        assert sent_addresses(mock_transport) == ["112", "1070"]


# ============================================================================
# Partial and total failure
# ============================================================================


class TestDispatchFailures:
    """Tests for per-recipient fault isolation."""

    @pytest.mark.asyncio
    async def test_failures_do_not_abort_remaining_sends(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        """Second and third sends fail, the fourth is still attempted."""
        mock_transport.send.side_effect = [
            TransportResult.success(),
            TransportResult.failure("no signal"),
            TransportResult.failure("invalid number"),
            TransportResult.success(),
        ]

        result = await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        assert mock_transport.send.await_count == 4
        assert result.sent_count == 2
        assert result.failed_count == 2
        assert result.overall_success is True
        assert result.failures == {
            "+919876543210": "no signal",
            "+919876543211": "invalid number",
        }

    @pytest.mark.asyncio
    async def test_raised_exception_recorded_as_failure(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        """A transport that raises yields a Failed outcome, not an error."""
        mock_transport.send.side_effect = [
            TransportError("radio off"),
            TransportResult.success(),
            RuntimeError("boom"),
            TransportResult.success(),
        ]

        result = await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        assert result.sent_count == 2
        assert result.failed_count == 2
        first, second, third, _ = result.outcomes
        assert first == Failed(recipient=Recipient("112", "emergency-services"), reason="radio off")
        assert isinstance(second, Sent)
        assert isinstance(third, Failed)
        assert third.reason == "boom"

    @pytest.mark.asyncio
    async def test_failure_without_reason(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        mock_transport.send.return_value = TransportResult(ok=False)

        result = await dispatcher.dispatch(
            AlertCategory.WEATHER_EMERGENCY, payload, authorized=True
        )

        assert all(isinstance(o, Failed) and o.reason for o in result.outcomes)

    @pytest.mark.asyncio
    async def test_all_sends_fail(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        """Every recipient failing yields ALL_DELIVERIES_FAILED."""
        mock_transport.send.return_value = TransportResult.failure("gateway down")

        result = await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        assert result.sent_count == 0
        assert result.failed_count == 4
        assert result.overall_success is False
        assert result.error_code == ErrorCode.ALL_DELIVERIES_FAILED


# ============================================================================
# Aborted dispatches
# ============================================================================


class TestDispatchAborts:
    """Tests for calls rejected before any send."""

    @pytest.mark.asyncio
    async def test_unauthorized_sends_nothing(
        self,
        dispatcher: AlertDispatcher,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        with pytest.raises(PermissionDeniedError) as exc_info:
            await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=False)

        assert exc_info.value.code == ErrorCode.PERMISSION_DENIED
        mock_transport.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unplanned_category_is_configuration_error(
        self,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        plan = DispatchPlan(
            {AlertCategory.STANDARD: DEFAULT_RECIPIENTS[AlertCategory.STANDARD]}
        )
        dispatcher = AlertDispatcher(
            plan, mock_transport, rate_limiter_factory=lambda: RateLimiter(0)
        )

        with pytest.raises(ConfigurationError) as exc_info:
            await dispatcher.dispatch(
                AlertCategory.WEATHER_EMERGENCY, payload, authorized=True
            )

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        mock_transport.send.assert_not_awaited()


# ============================================================================
# Pacing
# ============================================================================


class TestDispatchPacing:
    """Tests for rate limiter use."""

    @pytest.mark.asyncio
    async def test_pauses_between_sends_only(
        self,
        plan: DispatchPlan,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        """Four sends produce three pauses; the first send is not delayed."""
        sleep = AsyncMock()
        dispatcher = AlertDispatcher(
            plan,
            mock_transport,
            rate_limiter_factory=lambda: RateLimiter(0.1, clock=lambda: 0.0, sleep=sleep),
        )

        await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        assert sleep.await_count == 3

    @pytest.mark.asyncio
    async def test_fresh_limiter_per_dispatch(
        self,
        plan: DispatchPlan,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        factory = MagicMock(side_effect=lambda: RateLimiter(0))
        dispatcher = AlertDispatcher(plan, mock_transport, rate_limiter_factory=factory)

        await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)
        await dispatcher.dispatch(AlertCategory.WEATHER_EMERGENCY, payload, authorized=True)

        assert factory.call_count == 2

    @pytest.mark.asyncio
    async def test_pacing_continues_after_failure(
        self,
        plan: DispatchPlan,
        mock_transport: MagicMock,
        payload: AlertPayload,
    ) -> None:
        sleep = AsyncMock()
        mock_transport.send.side_effect = RuntimeError("down")
        dispatcher = AlertDispatcher(
            plan,
            mock_transport,
            rate_limiter_factory=lambda: RateLimiter(0.1, clock=lambda: 0.0, sleep=sleep),
        )

        result = await dispatcher.dispatch(AlertCategory.STANDARD, payload, authorized=True)

        assert result.failed_count == 4
        assert sleep.await_count == 3
