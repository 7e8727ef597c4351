"""
Manifest store.

Loads and saves the project manifest at a project root.
"""

import json
import logging
import os
import pathlib
import tempfile

from pydantic import ValidationError

from tegen.manifest.models import ProjectManifest
from tegen.tegen_exceptions import ManifestReadFailed, ManifestWriteFailed
from tegen.tegen_logger import TegenLogger


class ManifestStore:
    """
    Reads and writes the manifest file of one project.

    There is no locking; the store assumes a single process owns the project
    for the duration of one command.
    """

    def __init__(
        self,
        project_root: pathlib.Path,
        manifest_file_name: str,
        logger: TegenLogger,
    ):
        """
        Initialize the manifest store.

        Args:
            project_root: Directory holding the manifest
            manifest_file_name: File name of the manifest inside project_root
            logger: Logger for load and save messages
        """
        self.path = pathlib.Path(project_root) / manifest_file_name
        self.logger = logger

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> ProjectManifest:
        """
        Load the manifest.

        Returns:
            The parsed manifest, or an empty one if the file does not exist

        Raises:
            ManifestReadFailed: If the file is not UTF-8, is not a JSON object
                or does not match the manifest model
        """
        if not self.exists():
            self.logger.log(
                f"No manifest at {self.path}, using an empty one", logging.DEBUG
            )
            return ProjectManifest()

        try:
            # Accept UTF-8 with BOM, which some Windows editors write.
            data = json.loads(self.path.read_text(encoding="utf-8-sig"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestReadFailed(f"Cannot read manifest {self.path}: {e}")

        if not isinstance(data, dict):
            raise ManifestReadFailed(f"Manifest {self.path} is not a JSON object")

        try:
            manifest = ProjectManifest(**data)
        except ValidationError as e:
            raise ManifestReadFailed(f"Invalid manifest {self.path}: {e}")

        self.logger.log(
            f"Loaded manifest with {len(manifest.dependencies)} dependencies",
            logging.DEBUG,
        )
        return manifest

    def save(self, manifest: ProjectManifest) -> None:
        """
        Serialize the manifest and replace the file atomically.

        The new content is written to a temporary file next to the manifest and
        renamed over it, so a failure leaves the previous file untouched.

        Raises:
            ManifestWriteFailed: If serialization or any file operation fails
        """
        try:
            content = json.dumps(manifest.to_dict(), indent=4, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            raise ManifestWriteFailed(f"Manifest is not serializable: {e}")

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise ManifestWriteFailed(f"Cannot write manifest {self.path}: {e}")
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)

        self.logger.log(f"Saved manifest to {self.path}", logging.INFO)
