"""
Pytest configuration for mfdls-client tests.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mfdls_client.host import ExtensionContext

# Note: With pytest-asyncio in auto mode, no event_loop fixture needed


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path):
    """Keep output channel logs out of the user's log directory."""
    log_dir = tmp_path / "logs"
    with patch("mfdls_client._core.output.user_log_dir", return_value=str(log_dir)):
        yield log_dir


@pytest.fixture
def notifier():
    """Mock host notifier."""
    return MagicMock()


@pytest.fixture
def extension_path(tmp_path):
    """Client install directory with a sibling server package."""
    client_dir = tmp_path / "client"
    client_dir.mkdir()
    (tmp_path / "medford-language-server").mkdir()
    return client_dir


@pytest.fixture
def make_context(extension_path, notifier):
    """Factory for host contexts."""

    def _make(mode="production", python_path=None, **kwargs):
        settings = {}
        if python_path is not None:
            settings["python"] = {"pythonPath": python_path}
        return ExtensionContext(
            extension_path=str(extension_path),
            extension_mode=mode,
            settings=settings,
            notifier=notifier,
            **kwargs,
        )

    return _make


@pytest.fixture
def mock_language_client():
    """Mock pygls LanguageClient."""
    client = MagicMock()
    client._async_tasks = []
    client.initialize_async = AsyncMock()
    client.shutdown_async = AsyncMock()
    client.start_io = AsyncMock()
    client.stop = AsyncMock()
    return client


@pytest.fixture
def mock_session():
    """Mock session as built by build_session."""
    session = MagicMock()
    session.name = "mock session"
    session.start = AsyncMock()
    session.stop = AsyncMock()
    return session

