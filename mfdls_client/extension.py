"""
Activation and deactivation of the MEDFORD language client.

Bootstrap runs the whole connection sequence for one activation:

    mode -> transport -> (production) dependency preflight
         -> session -> start + cleanup registration

Configuration and installation problems abort activation by raising.
Problems starting the session are reported to the user and leave the
client inactive without raising.

Usage:
    bootstrap = Bootstrap()
    await bootstrap.activate(context)
    ...
    await bootstrap.deactivate()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from mfdls_client._core.lifecycle import LifecycleController
from mfdls_client._core.preflight import ensure_dependency
from mfdls_client._core.session import DEFAULT_SESSION_OPTIONS, build_session
from mfdls_client._core.transport import resolve_mode, select_transport
from mfdls_client._core.version import DEPENDENCY_MODULE, DEV_PORT, SERVER_MODULE
from mfdls_client.errors import ConfigurationError, InstallationError
from mfdls_client.host import ExtensionContext
from mfdls_client.types import Mode, SessionOptions

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class BootstrapConfig:
    """
    Configuration for the bootstrap.

    Attributes:
        dev_port: Loopback port of the development server
        server_module: Module run with ``python -m`` in production
        dependency_module: Module that must be importable before spawning
        debug_client: Spawn the server even in development mode
        session_options: Options attached to the session
    """
    dev_port: int = DEV_PORT
    server_module: str = SERVER_MODULE
    dependency_module: str = DEPENDENCY_MODULE
    debug_client: bool = False
    session_options: SessionOptions = DEFAULT_SESSION_OPTIONS

    def __post_init__(self) -> None:
        """Validate configuration on creation."""
        self.validate()

    def validate(self) -> None:
        """Validate configuration values."""
        if not 0 < self.dev_port < 65536:
            raise ConfigurationError(f"dev_port must be 1-65535, got {self.dev_port}")
        if not self.server_module:
            raise ConfigurationError("server_module must not be empty")

    @classmethod
    def from_env(cls) -> "BootstrapConfig":
        """
        Build configuration from environment variables.

        Environment Variables:
            MFDLS_DEV_PORT: Development server port (default: 2087)
            MFDLS_DEBUG_CLIENT: Spawn the server in development mode too
        """
        raw_port = os.environ.get("MFDLS_DEV_PORT", "").strip()
        try:
            dev_port = int(raw_port) if raw_port else DEV_PORT
        except ValueError as e:
            raise ConfigurationError(f"MFDLS_DEV_PORT is not a port number: {raw_port!r}") from e

        debug_client = os.environ.get("MFDLS_DEBUG_CLIENT", "").strip().lower() in _TRUTHY
        return cls(dev_port=dev_port, debug_client=debug_client)


class Bootstrap:
    """
    Connects the editor to the MEDFORD language server.

    Owns the LifecycleController of the current activation; a new
    activation builds a new session and controller.
    """

    def __init__(self, config: Optional[BootstrapConfig] = None) -> None:
        self.config = config or BootstrapConfig()
        self._controller: Optional[LifecycleController] = None

    async def activate(self, context: ExtensionContext) -> LifecycleController:
        """
        Activate the client for a host context.

        Args:
            context: Host activation context

        Returns:
            The controller owning the session (check ``is_running``)

        Raises:
            ConfigurationError: If a required setting is missing or invalid
            InstallationError: If the server dependency could not be installed
        """
        if not isinstance(context.extension_path, (str, os.PathLike)):
            raise ConfigurationError(
                f"extension_path must be a path, got {type(context.extension_path).__name__}"
            )
        logger.debug(f"Extension path: {context.extension_path}")

        try:
            mode = resolve_mode(context.extension_mode, self.config.debug_client)
            logger.info(f"Running in {mode.value} mode")

            if mode is Mode.DEVELOPMENT:
                transport = select_transport(mode, dev_port=self.config.dev_port)
            else:
                python_path = context.get_configuration("python").get("pythonPath")
                logger.debug(f"Python path: {python_path}")
                transport = select_transport(
                    mode,
                    extension_path=context.extension_path,
                    python_path=python_path,
                    server_module=self.config.server_module,
                )
                await ensure_dependency(
                    transport.command,
                    context.notifier,
                    module=self.config.dependency_module,
                )
                logger.info("Dependencies checked/installed successfully")
        except (ConfigurationError, InstallationError) as e:
            logger.error(f"Failed to start the language server: {e}")
            raise

        if self._controller is not None:
            logger.warning("Client already activated, stopping the previous session")
            await self.deactivate()

        session = build_session(transport, self.config.session_options)
        controller = LifecycleController(context.notifier)
        self._controller = controller
        await controller.start(session, context.subscriptions)
        return controller

    async def deactivate(self) -> None:
        """Stop the session of the current activation, if any."""
        if self._controller is None:
            return
        controller, self._controller = self._controller, None
        await controller.stop()

    @property
    def controller(self) -> Optional[LifecycleController]:
        return self._controller
