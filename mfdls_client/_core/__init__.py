"""
Core connection management for mfdls-client.

This module handles:
- Transport selection (loopback socket or spawned process)
- Dependency preflight before spawning the server
- Session construction and lifecycle
"""

from mfdls_client._core.version import (
    CLIENT_VERSION,
    DEV_PORT,
    LOOPBACK_HOST,
    SERVER_MODULE,
    DEPENDENCY_MODULE,
)
from mfdls_client._core.transport import (
    SocketTransport,
    SpawnTransport,
    TransportSpec,
    resolve_mode,
    select_transport,
    server_working_directory,
)
from mfdls_client._core.preflight import (
    ensure_dependency,
    is_module_importable,
    install_module,
)
from mfdls_client._core.session import (
    DEFAULT_SESSION_OPTIONS,
    Session,
    build_session,
)
from mfdls_client._core.lifecycle import LifecycleController

__all__ = [
    # Version
    "CLIENT_VERSION",
    "DEV_PORT",
    "LOOPBACK_HOST",
    "SERVER_MODULE",
    "DEPENDENCY_MODULE",
    # Transport
    "SocketTransport",
    "SpawnTransport",
    "TransportSpec",
    "resolve_mode",
    "select_transport",
    "server_working_directory",
    # Preflight
    "ensure_dependency",
    "is_module_importable",
    "install_module",
    # Session
    "DEFAULT_SESSION_OPTIONS",
    "Session",
    "build_session",
    # Lifecycle
    "LifecycleController",
]
