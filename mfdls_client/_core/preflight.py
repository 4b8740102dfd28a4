"""
Dependency preflight for the spawned language server.

Before the server is spawned with an interpreter, the server's runtime
dependency must be importable there. If it is not, one install attempt is
made with that interpreter's pip. Only exit codes are consulted.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from mfdls_client._core.version import DEPENDENCY_MODULE
from mfdls_client.errors import InstallationError
from mfdls_client.types import PreflightResult, PreflightStatus

if TYPE_CHECKING:
    from mfdls_client.host import Notifier

logger = logging.getLogger(__name__)


async def run_command(*cmd: str) -> int:
    """
    Run a command to completion and return its exit code.

    Output is captured and logged at debug level only.

    Raises:
        OSError: If the executable cannot be launched
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    output, _ = await process.communicate()
    if output:
        logger.debug(output.decode(errors="replace").rstrip())
    logger.debug(f"{cmd[0]} exited with code {process.returncode}")
    return process.returncode


async def is_module_importable(python_path: str, module: str = DEPENDENCY_MODULE) -> bool:
    """
    Check whether ``module`` can be imported by ``python_path``.

    A missing module and an interpreter that cannot run at all both count
    as "not importable".
    """
    try:
        return await run_command(python_path, "-c", f"import {module}") == 0
    except OSError as e:
        logger.debug(f"Could not run {python_path}: {e}")
        return False


async def install_module(python_path: str, module: str = DEPENDENCY_MODULE) -> bool:
    """Install ``module`` with ``python_path -m pip``. Returns True on success."""
    try:
        return await run_command(python_path, "-m", "pip", "install", module) == 0
    except OSError as e:
        logger.debug(f"Could not run {python_path}: {e}")
        return False


async def ensure_dependency(
    python_path: str,
    notifier: "Notifier",
    module: str = DEPENDENCY_MODULE,
) -> PreflightResult:
    """
    Ensure ``module`` is importable in ``python_path``, installing it if not.

    Args:
        python_path: Interpreter the server will be spawned with
        notifier: Where warning/info/error messages are shown
        module: Module that must be importable

    Returns:
        PreflightResult with status PRESENT or INSTALLED

    Raises:
        InstallationError: If the module is absent and installing it failed
    """
    if await is_module_importable(python_path, module):
        logger.debug(f"{module} is importable in {python_path}")
        return PreflightResult(PreflightStatus.PRESENT, python_path, module)

    logger.warning(f"{module} not found in {python_path}, installing")
    notifier.show_warning_message(
        f"Could not find {module} in {python_path}, attempting to install now"
    )

    if not await install_module(python_path, module):
        result = PreflightResult(
            PreflightStatus.INSTALL_FAILED,
            python_path,
            module,
            reason=f"`{python_path} -m pip install {module}` failed",
        )
        logger.error(f"Failed to install {module} in {python_path}")
        notifier.show_error_message(f"Could not install {module}")
        raise InstallationError(f"could not install {module}", result=result)

    logger.info(f"Successfully installed {module} in {python_path}")
    notifier.show_information_message(f"Successfully installed {module}")
    return PreflightResult(PreflightStatus.INSTALLED, python_path, module)
