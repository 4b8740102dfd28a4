"""
Language client sessions for the MEDFORD language server.

A Session wraps a pygls LanguageClient together with the transport that
reaches the server and the options every session carries (document
selector, watched files, output channel). Sessions are built unstarted;
the LifecycleController starts and stops them.

Usage:
    session = build_session(SocketTransport("127.0.0.1", 2087))
    await session.start()
    ...
    await session.stop()
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path, PurePath
from typing import Any, Optional, Union

from lsprotocol import types
from pygls.io_ import run_async
from pygls.lsp.client import LanguageClient

from mfdls_client._core.output import get_output_channel
from mfdls_client._core.transport import SocketTransport, SpawnTransport, TransportSpec
from mfdls_client._core.version import CLIENT_NAME, CLIENT_VERSION, LANGUAGE_ID
from mfdls_client.errors import SessionStartError, TransportConnectError
from mfdls_client.types import DocumentFilter, SessionOptions

logger = logging.getLogger(__name__)


DEFAULT_SESSION_OPTIONS = SessionOptions(
    document_selector=(
        DocumentFilter(scheme="file", language=LANGUAGE_ID),
        DocumentFilter(scheme="untitled", language=LANGUAGE_ID),
    ),
    output_channel_name="[pygls] MEDFORDLanguageServer",
    watch_globs=("**/.clientrc",),
)

_MESSAGE_LEVELS = {
    types.MessageType.Error: logging.ERROR,
    types.MessageType.Warning: logging.WARNING,
    types.MessageType.Info: logging.INFO,
    types.MessageType.Log: logging.DEBUG,
}


class MedfordLanguageClient(LanguageClient):
    """pygls client that reports server events to an output channel."""

    def __init__(self, output: logging.Logger) -> None:
        super().__init__(CLIENT_NAME, CLIENT_VERSION)
        self.output = output

        @self.feature(types.WINDOW_LOG_MESSAGE)
        def log_message(params: types.LogMessageParams) -> None:
            self.output.log(_MESSAGE_LEVELS.get(params.type, logging.INFO), params.message)

        @self.feature(types.WINDOW_SHOW_MESSAGE)
        def show_message(params: types.ShowMessageParams) -> None:
            self.output.log(_MESSAGE_LEVELS.get(params.type, logging.INFO), params.message)

    async def server_exit(self, server: asyncio.subprocess.Process) -> None:
        self.output.info(f"Server process {server.pid} exited with code {server.returncode}")

    def report_server_error(self, error: Exception, source: Any) -> None:
        self.output.error(f"Language server error ({getattr(source, '__name__', source)}): {error}")


def _matches_glob(path: PurePath, glob: str) -> bool:
    # Relative patterns match from the right, so a leading "**/" adds nothing
    if glob.startswith("**/"):
        glob = glob[3:]
    return path.match(glob)


class Session:
    """
    One client-to-server connection and its message exchange.

    Built unstarted by ``build_session``. A session is started at most once
    and never restarted after ``stop``.

    Attributes:
        name: Display label of the session
        transport: How the server is reached
        options: Document selector, watch globs and output channel name
        client: The underlying pygls LanguageClient
    """

    def __init__(
        self,
        name: str,
        transport: TransportSpec,
        options: SessionOptions,
        client: Optional[LanguageClient] = None,
    ) -> None:
        self.name = name
        self.transport = transport
        self.options = options
        self.output = get_output_channel(options.output_channel_name)
        self.client = client if client is not None else MedfordLanguageClient(self.output)

        self._writer: Optional[asyncio.StreamWriter] = None
        self._started = False
        self._initialized = False
        self._stopped = False

    async def start(self) -> None:
        """
        Open the transport and perform the initialize handshake.

        Raises:
            SessionStartError: If the session was started before, or the
                transport or handshake fails
            TransportConnectError: If the loopback connection is refused
        """
        if self._started or self._stopped:
            raise SessionStartError(f"Session {self.name!r} cannot be started twice")
        self._started = True

        if isinstance(self.transport, SocketTransport):
            await self._start_socket(self.transport)
        else:
            await self._start_spawn(self.transport)

        try:
            await self.client.initialize_async(self._initialize_params())
            self.client.initialized(types.InitializedParams())
        except Exception as e:
            raise SessionStartError(f"Initialize handshake with {self.name!r} failed: {e}") from e

        self._initialized = True
        self.output.info(f"Session {self.name!r} started")

    async def _start_socket(self, transport: SocketTransport) -> None:
        reader, writer = await transport.connect()
        self._writer = writer
        self.client.protocol.set_writer(writer)
        connection = asyncio.create_task(
            run_async(
                stop_event=self.client._stop_event,
                reader=reader,
                protocol=self.client.protocol,
                logger=logger,
                error_handler=self.client.report_server_error,
            )
        )
        self.client._async_tasks.append(connection)

    async def _start_spawn(self, transport: SpawnTransport) -> None:
        try:
            await self.client.start_io(transport.command, *transport.args, cwd=str(transport.cwd))
        except OSError as e:
            raise TransportConnectError(
                f"Could not spawn {transport.command} in {transport.cwd}: {e}"
            ) from e

    def _initialize_params(self) -> types.InitializeParams:
        return types.InitializeParams(
            process_id=os.getpid(),
            client_info=types.ClientInfo(name=CLIENT_NAME, version=CLIENT_VERSION),
            capabilities=types.ClientCapabilities(
                workspace=types.WorkspaceClientCapabilities(
                    did_change_watched_files=types.DidChangeWatchedFilesClientCapabilities(
                        dynamic_registration=False,
                    ),
                ),
            ),
        )

    async def stop(self) -> None:
        """Shut the server down and release the transport. Safe to call twice."""
        if self._stopped:
            return
        self._stopped = True

        if self._initialized:
            try:
                await self.client.shutdown_async(None)
                self.client.exit(None)
            except Exception as e:
                logger.warning(f"Clean shutdown of {self.name!r} failed: {e}")

        if self._writer is not None:
            self._writer.close()
            self._writer = None

        await self.client.stop()
        self.output.info(f"Session {self.name!r} stopped")

    def handles(self, uri: str, language_id: str) -> bool:
        """Whether a document is routed to this session's server."""
        return any(f.matches(uri, language_id) for f in self.options.document_selector)

    def notify_file_changed(
        self,
        path: Union[str, "os.PathLike[str]"],
        change: types.FileChangeType = types.FileChangeType.Changed,
    ) -> bool:
        """
        Report a workspace file change to the server if the file is watched.

        Args:
            path: Changed file
            change: Created, Changed or Deleted

        Returns:
            True if a notification was sent
        """
        watched = PurePath(path)
        posix = watched.as_posix()
        if not any(_matches_glob(watched, glob) for glob in self.options.watch_globs):
            return False
        if not self._initialized or self._stopped:
            logger.debug(f"Session {self.name!r} not running, dropping change to {posix}")
            return False

        uri = Path(path).absolute().as_uri()
        self.client.workspace_did_change_watched_files(
            types.DidChangeWatchedFilesParams(changes=[types.FileEvent(uri=uri, type=change)])
        )
        return True

    @property
    def is_running(self) -> bool:
        return self._initialized and not self._stopped


def build_session(
    transport: TransportSpec,
    options: SessionOptions = DEFAULT_SESSION_OPTIONS,
) -> Session:
    """
    Build an unstarted session for a transport.

    Args:
        transport: SocketTransport or SpawnTransport
        options: Options attached to the session, whatever the transport

    Returns:
        Session, not started
    """
    if isinstance(transport, SocketTransport):
        name = f"tcp lang server (port {transport.port})"
    elif isinstance(transport, SpawnTransport):
        name = transport.command
    else:
        raise TypeError(f"Unsupported transport: {transport!r}")

    logger.debug(f"Building session {name!r} over {transport.kind} transport")
    return Session(name, transport, options)
