"""
mfdls-client: Editor-side bootstrap for the MEDFORD language server.

This package provides:
- Transport selection: loopback TCP in development, spawned ``python -m mfdls``
  in production
- Dependency preflight: installs pygls into the configured interpreter
- Session lifecycle: start, failure reporting and cleanup on shutdown

Installation:
    pip install mfdls-client

Quickstart:
    from mfdls_client import Bootstrap, ExtensionContext

    context = ExtensionContext(
        extension_path="/opt/medford/client",
        extension_mode="production",
        settings={"python": {"pythonPath": "/usr/bin/python3"}},
    )
    bootstrap = Bootstrap()
    controller = await bootstrap.activate(context)
    if controller.is_running:
        print(f"Connected: {controller.session.name}")

    await bootstrap.deactivate()
"""

from mfdls_client.types import (
    Mode,
    LifecycleState,
    PreflightStatus,
    PreflightResult,
    DocumentFilter,
    SessionOptions,
)
from mfdls_client.errors import (
    MfdlsClientError,
    ConfigurationError,
    InstallationError,
    TransportConnectError,
    SessionStartError,
)
from mfdls_client.host import (
    ExtensionContext,
    Notifier,
    LoggingNotifier,
    Disposable,
)
from mfdls_client._core.transport import (
    SocketTransport,
    SpawnTransport,
    select_transport,
)
from mfdls_client._core.preflight import ensure_dependency
from mfdls_client._core.session import (
    DEFAULT_SESSION_OPTIONS,
    Session,
    build_session,
)
from mfdls_client._core.lifecycle import LifecycleController
from mfdls_client.extension import Bootstrap, BootstrapConfig
from mfdls_client._core.version import CLIENT_VERSION

__version__ = CLIENT_VERSION

__all__ = [
    # Version
    "__version__",
    # Types
    "Mode",
    "LifecycleState",
    "PreflightStatus",
    "PreflightResult",
    "DocumentFilter",
    "SessionOptions",
    # Errors
    "MfdlsClientError",
    "ConfigurationError",
    "InstallationError",
    "TransportConnectError",
    "SessionStartError",
    # Host
    "ExtensionContext",
    "Notifier",
    "LoggingNotifier",
    "Disposable",
    # Transport
    "SocketTransport",
    "SpawnTransport",
    "select_transport",
    # Preflight
    "ensure_dependency",
    # Session
    "DEFAULT_SESSION_OPTIONS",
    "Session",
    "build_session",
    # Lifecycle / bootstrap
    "LifecycleController",
    "Bootstrap",
    "BootstrapConfig",
]
