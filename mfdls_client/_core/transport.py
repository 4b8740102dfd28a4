"""
Transport selection for the MEDFORD language server.

Supports two ways to reach the server:
- Development: Connect to a server already listening on the loopback port
- Production: Spawn ``<python> -m mfdls`` in the server package directory

Exactly one transport is chosen per activation, from the run mode alone.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from mfdls_client._core.version import (
    DEV_PORT,
    LOOPBACK_HOST,
    SERVER_MODULE,
    SERVER_PACKAGE_RELPATH,
)
from mfdls_client.errors import ConfigurationError, TransportConnectError
from mfdls_client.types import Mode

logger = logging.getLogger(__name__)


_HOST_MODES = {
    "development": Mode.DEVELOPMENT,
    "production": Mode.PRODUCTION,
    "test": Mode.PRODUCTION,
}


def resolve_mode(host_mode: Union[str, Mode], debug_client: bool = False) -> Mode:
    """
    Map the host's run mode onto a client Mode.

    Args:
        host_mode: "development", "production" or "test" (or a Mode)
        debug_client: Spawn the server even when the host is in development

    Returns:
        The Mode used for the whole activation

    Raises:
        ConfigurationError: If the host mode is unknown
    """
    key = host_mode.value if isinstance(host_mode, Mode) else str(host_mode).lower()
    mode = _HOST_MODES.get(key)
    if mode is None:
        raise ConfigurationError(f"Unknown extension mode: {host_mode!r}")

    if mode is Mode.DEVELOPMENT and debug_client:
        logger.info("Client debugging enabled, spawning the server locally")
        return Mode.PRODUCTION
    return mode


def server_working_directory(extension_path: Union[str, "os.PathLike[str]"]) -> Path:
    """
    Get the server package directory, a sibling of the client install.

    The path is structural and is not checked for existence; a missing
    directory surfaces as a spawn failure when the session starts.
    """
    return Path(extension_path).joinpath(*SERVER_PACKAGE_RELPATH)


@dataclass(frozen=True)
class SocketTransport:
    """
    Connection to a language server already listening on loopback.

    Each call to ``connect`` opens a new connection; the one socket carries
    both directions.
    """
    host: str
    port: int

    kind = "socket"

    async def connect(self) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """
        Open a connection to the server.

        Returns:
            (reader, writer) over the same socket

        Raises:
            TransportConnectError: If the connection cannot be opened
        """
        try:
            reader, writer = await asyncio.open_connection(self.host, self.port)
        except OSError as e:
            logger.error(f"Error connecting to language server at {self.host}:{self.port}: {e}")
            raise TransportConnectError(
                f"Could not connect to language server at {self.host}:{self.port}: {e}"
            ) from e

        logger.info(f"Connected to language server at port {self.port}")
        return reader, writer


@dataclass(frozen=True)
class SpawnTransport:
    """Language server process to spawn, talking over stdio pipes."""
    command: str
    args: Tuple[str, ...]
    cwd: Path

    kind = "spawn"


TransportSpec = Union[SocketTransport, SpawnTransport]


def select_transport(
    mode: Mode,
    dev_port: int = DEV_PORT,
    extension_path: Optional[Union[str, "os.PathLike[str]"]] = None,
    python_path: Optional[str] = None,
    server_module: str = SERVER_MODULE,
) -> TransportSpec:
    """
    Pick the transport for an activation.

    Args:
        mode: Activation mode
        dev_port: Loopback port of the development server
        extension_path: Client install location (production only)
        python_path: Interpreter to run the server with (production only)
        server_module: Module run with ``python -m`` (production only)

    Returns:
        SocketTransport in development, SpawnTransport in production

    Raises:
        ConfigurationError: If production mode has no interpreter configured
    """
    if mode is Mode.DEVELOPMENT:
        logger.info(f"Development mode: connecting to {LOOPBACK_HOST}:{dev_port}")
        return SocketTransport(LOOPBACK_HOST, dev_port)

    if not python_path:
        raise ConfigurationError("`python.pythonPath` is not set in the editor settings.")
    if extension_path is None:
        raise ConfigurationError("Extension path is required to locate the language server")

    cwd = server_working_directory(extension_path)
    logger.info(f"Production mode: spawning {python_path} -m {server_module}")
    logger.debug(f"Language server working directory: {cwd}")
    return SpawnTransport(python_path, ("-m", server_module), cwd)
