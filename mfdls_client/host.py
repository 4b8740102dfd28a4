"""
Host editor model for mfdls-client.

The editor that activates the client is an external collaborator. This
module describes the small surface the bootstrap needs from it:

- ExtensionContext: install location, run mode, settings and the cleanup
  registry (``subscriptions``)
- Notifier: user-visible information/warning/error messages
- Disposable: an entry in the cleanup registry

Usage:
    context = ExtensionContext(
        extension_path="/opt/medford/client",
        extension_mode="production",
        settings={"python": {"pythonPath": "/usr/bin/python3"}},
    )
    controller = await Bootstrap().activate(context)
    ...
    await context.dispose()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """User-visible notifications shown by the host editor."""

    def show_information_message(self, message: str) -> Any: ...

    def show_warning_message(self, message: str) -> Any: ...

    def show_error_message(self, message: str) -> Any: ...


class LoggingNotifier:
    """Notifier for hosts without a UI: messages go to the log."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def show_information_message(self, message: str) -> None:
        self._log.info(message)

    def show_warning_message(self, message: str) -> None:
        self._log.warning(message)

    def show_error_message(self, message: str) -> None:
        self._log.error(message)


class Disposable:
    """
    Cleanup action registered with the host.

    The action runs at most once, however many times ``dispose`` is called.
    """

    def __init__(self, action: Callable[[], Awaitable[None]]) -> None:
        self._action = action
        self._disposed = False

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        await self._action()

    @property
    def is_disposed(self) -> bool:
        return self._disposed


@dataclass
class ExtensionContext:
    """
    What the host hands to the client on activation.

    Attributes:
        extension_path: Directory the client is installed in
        extension_mode: Host run mode ("development", "production" or "test")
        settings: User configuration, by section (e.g. ``{"python": {...}}``)
        notifier: Where user-visible messages are shown
        subscriptions: Cleanup registry, disposed on host shutdown
    """
    extension_path: Union[str, "os.PathLike[str]"]
    extension_mode: str = "production"
    settings: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    notifier: Notifier = field(default_factory=LoggingNotifier)
    subscriptions: List[Disposable] = field(default_factory=list)

    def get_configuration(self, section: str) -> Mapping[str, Any]:
        """Get a configuration section; missing sections are empty."""
        return self.settings.get(section, {})

    async def dispose(self) -> None:
        """Dispose every subscription, most recent first."""
        while self.subscriptions:
            subscription = self.subscriptions.pop()
            try:
                await subscription.dispose()
            except Exception:
                logger.exception("Error disposing subscription")
