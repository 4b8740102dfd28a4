"""
Session lifecycle management for mfdls-client.

Handles:
- Starting the session and reporting start failures
- Registering the stop action with the host's cleanup registry
- Stopping the session exactly once
"""

from __future__ import annotations

import logging
from typing import List, Optional, TYPE_CHECKING

from mfdls_client.errors import SessionStartError
from mfdls_client.host import Disposable
from mfdls_client.types import LifecycleState

if TYPE_CHECKING:
    from mfdls_client._core.session import Session
    from mfdls_client.host import Notifier

logger = logging.getLogger(__name__)


class LifecycleController:
    """
    Owns the single session of an activation.

    State machine:
        UNSTARTED -> STARTING -> RUNNING -> STOPPED
        STARTING -> FAILED

    A failed start is terminal: there is no retry, the host has to activate
    again. ``stop`` is safe to call in any state.
    """

    def __init__(self, notifier: Optional["Notifier"] = None) -> None:
        self.notifier = notifier
        self._session: Optional["Session"] = None
        self._state = LifecycleState.UNSTARTED
        self._disposable: Optional[Disposable] = None

    async def start(self, session: "Session", subscriptions: List[Disposable]) -> bool:
        """
        Start a session and register its cleanup.

        Start failures are logged and shown to the user, never raised.

        Args:
            session: Unstarted session to take ownership of
            subscriptions: Host cleanup registry

        Returns:
            True if the session is running

        Raises:
            SessionStartError: If this controller already started a session
        """
        if self._state is not LifecycleState.UNSTARTED:
            raise SessionStartError(
                f"Cannot start a session from state {self._state.value}"
            )

        self._state = LifecycleState.STARTING
        logger.info(f"Starting language client {session.name!r}")

        try:
            await session.start()
        except Exception as e:
            self._state = LifecycleState.FAILED
            logger.exception(f"Error starting the language client {session.name!r}")
            if self.notifier is not None:
                self.notifier.show_error_message(
                    f"Failed to start the MEDFORD language server: {e}"
                )
            # The transport may be half open
            try:
                await session.stop()
            except Exception:
                logger.debug("Error releasing failed session", exc_info=True)
            return False

        self._session = session
        self._state = LifecycleState.RUNNING
        self._disposable = Disposable(self.stop)
        subscriptions.append(self._disposable)
        logger.info(f"Language client {session.name!r} is running")
        return True

    async def stop(self) -> None:
        """Stop the running session. No-op unless a session is running."""
        if self._state is not LifecycleState.RUNNING or self._session is None:
            logger.debug(f"Nothing to stop (state: {self._state.value})")
            return

        session = self._session
        self._state = LifecycleState.STOPPED
        self._session = None
        logger.info(f"Stopping language client {session.name!r}")
        await session.stop()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def session(self) -> Optional["Session"]:
        """The running session, if any."""
        return self._session

    @property
    def is_running(self) -> bool:
        return self._state is LifecycleState.RUNNING
