"""
Type definitions for mfdls-client.

Defines enums and dataclasses used across the package for:
- Run modes and session lifecycle states
- Dependency preflight outcomes
- Session options (document selector, watch globs, output channel)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
from urllib.parse import urlsplit


# =============================================================================
# Modes and States
# =============================================================================


class Mode(str, Enum):
    """
    How the client reaches the language server.

    - DEVELOPMENT: Connect to an already-running server on the loopback port
    - PRODUCTION: Spawn the server with the configured interpreter
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class LifecycleState(str, Enum):
    """
    Lifecycle of a session owned by the LifecycleController.

    UNSTARTED -> STARTING -> RUNNING -> STOPPED, or STARTING -> FAILED.
    STOPPED and FAILED are terminal.
    """
    UNSTARTED = "unstarted"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


# =============================================================================
# Dependency Preflight
# =============================================================================


class PreflightStatus(str, Enum):
    """Outcome of a dependency preflight check."""
    PRESENT = "present"                 # Importable, nothing done
    INSTALLED = "installed"             # Was absent, install succeeded
    INSTALL_FAILED = "install_failed"   # Was absent, install failed


@dataclass(frozen=True)
class PreflightResult:
    """
    Result of ensuring a module is importable in an interpreter.

    Attributes:
        status: What the preflight found or did
        interpreter: Interpreter the check ran against
        module: Module that was checked
        reason: Failure description (INSTALL_FAILED only)
    """
    status: PreflightStatus
    interpreter: str
    module: str
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when the module is importable after the preflight."""
        return self.status != PreflightStatus.INSTALL_FAILED


# =============================================================================
# Session Options
# =============================================================================


@dataclass(frozen=True)
class DocumentFilter:
    """A document the session handles, by URI scheme and language id."""
    scheme: str
    language: str

    def matches(self, uri: str, language_id: str) -> bool:
        scheme = urlsplit(uri).scheme
        # No scheme, or a Windows drive letter
        if len(scheme) < 2:
            scheme = "file"
        return scheme == self.scheme and language_id == self.language


@dataclass(frozen=True)
class SessionOptions:
    """
    Options attached to every session, whatever the transport.

    Attributes:
        document_selector: Documents routed to the language server
        output_channel_name: Display label of the session's output channel
        watch_globs: Workspace files whose changes are reported to the server
    """
    document_selector: Tuple[DocumentFilter, ...]
    output_channel_name: str
    watch_globs: Tuple[str, ...] = ()
