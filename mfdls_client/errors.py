"""
Exception types for mfdls-client.

Provides typed exceptions for:
- Configuration errors (missing or invalid settings)
- Dependency installation errors
- Transport and session start errors
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from mfdls_client.types import PreflightResult


class MfdlsClientError(Exception):
    """Base exception for all mfdls-client errors."""
    pass


# =============================================================================
# Bootstrap Errors (fatal)
# =============================================================================


class ConfigurationError(MfdlsClientError):
    """
    Raised when a required setting is missing or invalid.

    This includes:
    - ``python.pythonPath`` not set in production mode
    - Unknown host run mode
    - Invalid development port

    Raised before any process is spawned or socket opened.
    """
    pass


class InstallationError(MfdlsClientError):
    """
    Raised when the server dependency is absent and could not be installed.

    Aborts the bootstrap: a session must never be started against an
    interpreter that cannot import the server's dependency.

    Example:
        try:
            await ensure_dependency(python_path, notifier)
        except InstallationError as e:
            logger.error(f"Cannot run mfdls with {e.result.interpreter}")
    """

    def __init__(self, message: str, result: Optional["PreflightResult"] = None):
        self.result = result
        super().__init__(message)

    def __repr__(self) -> str:
        return f"InstallationError({str(self)!r}, result={self.result!r})"


# =============================================================================
# Session Errors (reported, not fatal to the host)
# =============================================================================


class TransportConnectError(MfdlsClientError):
    """
    Raised when the transport to the language server cannot be opened.

    This includes:
    - Loopback socket connection refused or unreachable
    - Server process could not be spawned
    """
    pass


class SessionStartError(MfdlsClientError):
    """
    Raised when a session cannot be started.

    This includes:
    - Transport failures surfaced during start
    - Handshake failures
    - Starting a session that was already started or stopped
    """
    pass
