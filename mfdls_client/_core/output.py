"""
Output channels for language server sessions.

Each session writes server log messages, protocol errors and process exits
to a named logger backed by a file in the user log directory.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from platformdirs import user_log_dir

from mfdls_client._core.version import CLIENT_NAME

logger = logging.getLogger(__name__)

OUTPUT_LOGGER_PREFIX = "mfdls_client.output"
OUTPUT_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def get_log_dir() -> Path:
    """Get the directory where output channel logs are written."""
    log_dir = Path(user_log_dir(CLIENT_NAME, "medford"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def channel_slug(name: str) -> str:
    """
    Turn an output channel display name into a file/logger-safe slug.

    "[pygls] MEDFORDLanguageServer" -> "pygls-medfordlanguageserver"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "default"


def get_output_channel(name: str) -> logging.Logger:
    """
    Get the output channel logger for a display name.

    The file handler is attached on first use only, so repeated sessions
    with the same name share one log file.

    Args:
        name: Output channel display name

    Returns:
        Logger writing to ``<log dir>/<slug>.log``
    """
    slug = channel_slug(name)
    channel = logging.getLogger(f"{OUTPUT_LOGGER_PREFIX}.{slug}")

    if not any(getattr(h, "_mfdls_channel", False) for h in channel.handlers):
        try:
            path = get_log_dir() / f"{slug}.log"
        except OSError as e:
            logger.warning(f"Output channel {name!r} has no log file: {e}")
            return channel
        handler = logging.FileHandler(path, encoding="utf-8", delay=True)
        handler.setFormatter(logging.Formatter(OUTPUT_FORMAT))
        handler._mfdls_channel = True  # type: ignore[attr-defined]
        channel.addHandler(handler)
        channel.setLevel(logging.DEBUG)
        logger.debug(f"Output channel {name!r} logging to {path}")

    return channel

