"""
Version constants and fixed wiring for mfdls-client.

The client is versioned independently of the language server:
- CLIENT_VERSION: User-facing package version
- SERVER_MODULE: Module executed with ``python -m`` to run the server
- DEPENDENCY_MODULE: Module that must be importable before spawning
"""

from __future__ import annotations

from typing import Tuple

# mfdls-client version (user-facing, independent semver)
CLIENT_VERSION = "0.1.0"
CLIENT_NAME = "mfdls-client"

# Language server entry point and its runtime dependency
SERVER_MODULE = "mfdls"
DEPENDENCY_MODULE = "pygls"

# Server package directory, relative to the client's install location
SERVER_PACKAGE_RELPATH: Tuple[str, ...] = ("..", "medford-language-server")

# Development mode talks to an already-running server over TCP
LOOPBACK_HOST = "127.0.0.1"
DEV_PORT = 2087

# Document type served by mfdls
LANGUAGE_ID = "medford"
