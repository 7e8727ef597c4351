"""
Thin wrappers around the external build tool and the built executable.
"""

import logging
import pathlib
import time
from typing import Callable, Optional, Sequence

from tegen.manifest import ManifestStore
from tegen.tegen_config import TegenConfig
from tegen.tegen_exceptions import CommandFailed, PreconditionMissing
from tegen.tegen_logger import TegenLogger
from tegen.tegen_utils import CommandUtils, PlatformFamily, PlatformUtils

CommandRunner = Callable[[Sequence[str], Optional[pathlib.Path]], int]


class BuildRunner:
    """
    Configures and builds the project with CMake, and runs the result.
    """

    def __init__(
        self,
        project_root: pathlib.Path,
        config: TegenConfig,
        logger: TegenLogger,
        runner: Optional[CommandRunner] = None,
        platform_family: Optional[PlatformFamily] = None,
    ):
        self.project_root = pathlib.Path(project_root)
        self.config = config
        self.logger = logger
        self.runner = runner or self._run
        self.platform_family = platform_family or PlatformUtils.get_platform_family()
        self.manifest_store = ManifestStore(
            self.project_root, config.manifest_file_name, logger
        )

    def _run(self, cmd: Sequence[str], cwd: Optional[pathlib.Path]) -> int:
        return CommandUtils.run(self.logger, cmd, cwd=cwd)

    def _require_manifest(self) -> None:
        if not self.manifest_store.exists():
            raise PreconditionMissing(
                f"{self.config.manifest_file_name} not found in {self.project_root}. "
                "Run 'init' first."
            )

    def _check(self, cmd: Sequence[str]) -> None:
        exit_code = self.runner(cmd, self.project_root)
        if exit_code != 0:
            raise CommandFailed(
                f"Command failed with exit code {exit_code}: {' '.join(cmd)}",
                context={"exit_code": exit_code},
            )

    def build(self) -> pathlib.Path:
        """
        Configure and build into the build directory.

        Returns:
            The build directory

        Raises:
            PreconditionMissing: If the project has no manifest
            CommandFailed: If cmake exits non-zero
        """
        self._require_manifest()
        build_dir = self.project_root / self.config.build_dir_name
        build_dir.mkdir(parents=True, exist_ok=True)

        self._check(["cmake", "-S", ".", "-B", self.config.build_dir_name])
        self._check(["cmake", "--build", self.config.build_dir_name])

        self.logger.log(f"Build completed in {build_dir}", logging.INFO)
        return build_dir

    def executable_path(self) -> pathlib.Path:
        name = self.manifest_store.load().name
        if self.platform_family == PlatformFamily.WINDOWS:
            name += ".exe"
        return self.project_root / self.config.build_dir_name / name

    def run(self) -> float:
        """
        Run the built executable from the project root.

        Returns:
            Elapsed wall time in seconds

        Raises:
            PreconditionMissing: If the project has no manifest
            CommandFailed: If the executable exits non-zero or is missing
        """
        self._require_manifest()
        executable = self.executable_path()

        start = time.perf_counter()
        self._check([str(executable)])
        elapsed = time.perf_counter() - start

        self.logger.log(f"{executable.name} finished in {elapsed:.3f}s", logging.INFO)
        return elapsed
