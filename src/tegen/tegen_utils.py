"""
Platform detection and external command helpers shared across tegen.
"""

import logging
import platform
import shlex
import subprocess
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Sequence

from tegen.tegen_logger import TegenLogger

# Exit status reported when the executable itself cannot be found.
COMMAND_NOT_FOUND = 127


class PlatformFamily(str, Enum):
    """
    Host families that carry their own default branch and link behavior.
    """

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


class PlatformUtils:
    """
    Utilities for querying the running platform.
    """

    @staticmethod
    def get_platform_family() -> PlatformFamily:
        """
        Map the running host to a PlatformFamily.

        Hosts that are neither Windows nor macOS are treated as Linux-class.
        """
        system = platform.system()
        if system == "Windows" or system.startswith(("CYGWIN", "MSYS", "MINGW")):
            return PlatformFamily.WINDOWS
        if system == "Darwin":
            return PlatformFamily.MACOS
        return PlatformFamily.LINUX


class CommandUtils:
    """
    Runs external commands and reports their exit status.
    """

    @staticmethod
    def run(
        logger: TegenLogger,
        cmd: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        quiet: bool = False,
    ) -> int:
        """
        Run a command to completion, inheriting stdout and stderr.

        Args:
            logger: Logger for the command line and its outcome
            cmd: The command and its arguments
            cwd: Working directory for the command
            env: Environment for the command, inherited when None
            quiet: Discard stdout and log a non-zero exit at DEBUG, for
                checks whose exit status is the answer

        Returns:
            The exit status, or COMMAND_NOT_FOUND if the executable is missing
        """
        pretty = " ".join(shlex.quote(str(part)) for part in cmd)
        logger.log(f"Running: {pretty}", logging.INFO)
        try:
            completed = subprocess.run(
                [str(part) for part in cmd],
                cwd=str(cwd) if cwd else None,
                env=env,
                stdout=subprocess.DEVNULL if quiet else None,
            )
        except FileNotFoundError:
            logger.log(f"Executable not found: {cmd[0]}", logging.ERROR)
            return COMMAND_NOT_FOUND

        if completed.returncode != 0:
            logger.log(
                f"Command failed with exit code {completed.returncode}: {pretty}",
                logging.DEBUG if quiet else logging.ERROR,
            )
        return completed.returncode
