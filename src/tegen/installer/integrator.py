"""
Artifact integrator.

Copies headers and static libraries from a working copy into the consuming
project's include and lib directories.
"""

import logging
import pathlib
import shutil
from typing import Callable, Iterable, List, Optional

from tegen.tegen_exceptions import IntegrationFailed
from tegen.tegen_logger import TegenLogger

# Called with a label ("headers" or "libraries") and the percentage copied so far.
ProgressCallback = Callable[[str, float], None]


def is_static_library(path: pathlib.Path, extensions: Iterable[str]) -> bool:
    suffix = path.suffix.lower()
    return any(suffix == ext.lower() for ext in extensions)


def flatten_single_directory(directory: pathlib.Path) -> pathlib.Path:
    """
    Descend while the directory holds exactly one entry and that entry is a
    directory. Archives often nest a single platform or arch folder.
    """
    current = directory
    while True:
        entries = list(current.iterdir())
        if len(entries) != 1 or not entries[0].is_dir():
            return current
        current = entries[0]


class ArtifactIntegrator:
    """
    Integrates one working copy into the project layout.
    """

    def __init__(
        self,
        include_dir: pathlib.Path,
        lib_dir: pathlib.Path,
        library_extensions: List[str],
        logger: TegenLogger,
        progress: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the artifact integrator.

        Args:
            include_dir: Project directory receiving headers
            lib_dir: Project directory receiving static libraries
            library_extensions: File extensions that mark a static library
            logger: Logger for progress and error messages
            progress: Receives percentage updates; logged at DEBUG when None
        """
        self.include_dir = pathlib.Path(include_dir)
        self.lib_dir = pathlib.Path(lib_dir)
        self.library_extensions = library_extensions
        self.logger = logger
        self.progress = progress or self._log_progress

    def _log_progress(self, label: str, percent: float) -> None:
        self.logger.log(f"Copying {label}: {percent:.0f}%", logging.DEBUG)

    def integrate_headers(self, working_copy: pathlib.Path) -> List[pathlib.Path]:
        """
        Copy every file under `<working_copy>/include` to the same relative
        path under the project's include directory, overwriting.

        Returns:
            Destination paths of the copied headers

        Raises:
            IntegrationFailed: If a header cannot be read or written
        """
        source_dir = pathlib.Path(working_copy) / "include"
        if not source_dir.is_dir():
            self.logger.log(f"No include directory in {working_copy}", logging.DEBUG)
            return []

        try:
            files = sorted(p for p in source_dir.rglob("*") if p.is_file())
        except OSError as e:
            raise IntegrationFailed(f"Cannot read {source_dir}: {e}")

        copied = []
        for index, source in enumerate(files, start=1):
            target = self.include_dir / source.relative_to(source_dir)
            self._copy(source, target)
            copied.append(target)
            self.progress("headers", index * 100.0 / len(files))

        self.logger.log(
            f"Copied {len(copied)} headers into {self.include_dir}", logging.INFO
        )
        return copied

    def integrate_libraries(self, working_copy: pathlib.Path) -> List[pathlib.Path]:
        """
        Copy static libraries from `<working_copy>/lib` into the project's lib
        directory by file name, after skipping single nested directories.
        Files with other extensions are ignored.

        Returns:
            Destination paths of the copied libraries

        Raises:
            IntegrationFailed: If a library cannot be read or written
        """
        source_dir = pathlib.Path(working_copy) / "lib"
        if not source_dir.is_dir():
            self.logger.log(f"No lib directory in {working_copy}", logging.DEBUG)
            return []

        try:
            source_dir = flatten_single_directory(source_dir)
            files = sorted(
                p
                for p in source_dir.rglob("*")
                if p.is_file() and is_static_library(p, self.library_extensions)
            )
        except OSError as e:
            raise IntegrationFailed(f"Cannot read {source_dir}: {e}")

        copied = []
        for index, source in enumerate(files, start=1):
            target = self.lib_dir / source.name
            self._copy(source, target)
            copied.append(target)
            self.progress("libraries", index * 100.0 / len(files))

        self.logger.log(
            f"Copied {len(copied)} libraries into {self.lib_dir}", logging.INFO
        )
        return copied

    def _copy(self, source: pathlib.Path, target: pathlib.Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as e:
            raise IntegrationFailed(
                f"Cannot copy {source} to {target}: {e}",
                context={"source": str(source), "target": str(target)},
            )
