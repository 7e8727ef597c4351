"""
Scratch directory cleanup.
"""

import logging
import os
import pathlib
import shutil
import stat
from typing import Protocol

from tegen.tegen_logger import TegenLogger
from tegen.tegen_utils import PlatformFamily


class PermissionFixer(Protocol):
    """Grants the owner full permissions on one filesystem entry."""

    def grant_owner_permissions(self, path: pathlib.Path) -> None: ...


class ChmodPermissionFixer:
    """
    PermissionFixer backed by os.chmod. Clears the read-only attribute that
    git leaves on pack files under Windows.
    """

    def grant_owner_permissions(self, path: pathlib.Path) -> None:
        os.chmod(path, stat.S_IRWXU)


class ScratchCleaner:
    """
    Best-effort recursive removal of the modules directory.
    """

    def __init__(
        self,
        platform_family: PlatformFamily,
        permission_fixer: PermissionFixer,
        logger: TegenLogger,
    ):
        self.platform_family = platform_family
        self.permission_fixer = permission_fixer
        self.logger = logger

    def clean(self, directory: pathlib.Path) -> bool:
        """
        Remove a directory tree.

        Returns:
            True if the directory no longer exists, False if removal failed.
            Failures are logged as warnings and never raised.
        """
        directory = pathlib.Path(directory)
        if not directory.exists():
            return True

        if self.platform_family == PlatformFamily.WINDOWS:
            self._grant_permissions(directory)

        try:
            shutil.rmtree(directory)
        except OSError as e:
            self.logger.log(
                f"Could not remove {directory}: {e}", logging.WARNING
            )
            return False

        self.logger.log(f"Removed {directory}", logging.INFO)
        return True

    def _grant_permissions(self, directory: pathlib.Path) -> None:
        entries = [directory]
        for root, dirs, files in os.walk(directory):
            entries.extend(pathlib.Path(root) / name for name in dirs + files)

        for entry in entries:
            try:
                self.permission_fixer.grant_owner_permissions(entry)
            except OSError:
                continue
