"""Tests for mfdls_client._core.lifecycle module."""

from unittest.mock import AsyncMock

import pytest

from mfdls_client._core.lifecycle import LifecycleController
from mfdls_client.errors import SessionStartError, TransportConnectError
from mfdls_client.host import Disposable
from mfdls_client.types import LifecycleState


class TestLifecycleControllerStart:
    """Tests for LifecycleController.start."""

    def test_initial_state(self):
        controller = LifecycleController()

        assert controller.state is LifecycleState.UNSTARTED
        assert controller.session is None
        assert controller.is_running is False

    @pytest.mark.asyncio
    async def test_start_success(self, mock_session, notifier):
        controller = LifecycleController(notifier)
        subscriptions = []

        started = await controller.start(mock_session, subscriptions)

        assert started is True
        mock_session.start.assert_awaited_once()
        assert controller.state is LifecycleState.RUNNING
        assert controller.session is mock_session
        assert len(subscriptions) == 1
        assert isinstance(subscriptions[0], Disposable)
        notifier.show_error_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_start_failure_is_reported_not_raised(self, mock_session, notifier):
        mock_session.start.side_effect = TransportConnectError("connection refused")
        controller = LifecycleController(notifier)
        subscriptions = []

        started = await controller.start(mock_session, subscriptions)

        assert started is False
        assert controller.state is LifecycleState.FAILED
        assert controller.session is None
        assert subscriptions == []
        notifier.show_error_message.assert_called_once()
        assert "connection refused" in notifier.show_error_message.call_args[0][0]

    @pytest.mark.asyncio
    async def test_start_failure_releases_session(self, mock_session):
        mock_session.start.side_effect = RuntimeError("handshake failed")
        controller = LifecycleController()

        await controller.start(mock_session, [])

        mock_session.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_failure_without_notifier(self, mock_session):
        mock_session.start.side_effect = RuntimeError("boom")
        controller = LifecycleController()

        assert await controller.start(mock_session, []) is False

    @pytest.mark.asyncio
    async def test_no_retry_after_failure(self, mock_session):
        mock_session.start.side_effect = RuntimeError("boom")
        controller = LifecycleController()
        await controller.start(mock_session, [])

        with pytest.raises(SessionStartError):
            await controller.start(mock_session, [])

        mock_session.start.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cannot_start_twice(self, mock_session):
        controller = LifecycleController()
        await controller.start(mock_session, [])

        with pytest.raises(SessionStartError):
            await controller.start(mock_session, [])


class TestLifecycleControllerStop:
    """Tests for LifecycleController.stop."""

    @pytest.mark.asyncio
    async def test_stop_before_start_is_noop(self):
        controller = LifecycleController()

        await controller.stop()

        assert controller.state is LifecycleState.UNSTARTED

    @pytest.mark.asyncio
    async def test_stop_after_failed_start_is_noop(self, mock_session):
        mock_session.start.side_effect = RuntimeError("boom")
        controller = LifecycleController()
        await controller.start(mock_session, [])
        mock_session.stop.reset_mock()

        await controller.stop()

        mock_session.stop.assert_not_called()
        assert controller.state is LifecycleState.FAILED

    @pytest.mark.asyncio
    async def test_stop_running_session(self, mock_session):
        controller = LifecycleController()
        await controller.start(mock_session, [])

        await controller.stop()

        mock_session.stop.assert_awaited_once()
        assert controller.state is LifecycleState.STOPPED
        assert controller.session is None

    @pytest.mark.asyncio
    async def test_stop_exactly_once(self, mock_session):
        """Explicit stop and host disposal together stop the session once."""
        controller = LifecycleController()
        subscriptions = []
        await controller.start(mock_session, subscriptions)

        await controller.stop()
        await subscriptions[0].dispose()
        await controller.stop()

        mock_session.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_disposal_stops_session(self, mock_session):
        controller = LifecycleController()
        subscriptions = []
        await controller.start(mock_session, subscriptions)

        await subscriptions[0].dispose()

        mock_session.stop.assert_awaited_once()
        assert controller.state is LifecycleState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_error_propagates(self, mock_session):
        mock_session.stop = AsyncMock(side_effect=RuntimeError("stop failed"))
        controller = LifecycleController()
        await controller.start(mock_session, [])

        with pytest.raises(RuntimeError):
            await controller.stop()

        assert controller.state is LifecycleState.STOPPED
