"""
Install orchestrator.

Sequences resolution, acquisition, integration and the build descriptor update
for one install request, and owns the single point where the manifest is
written.
"""

import logging
import pathlib
from typing import Dict, List, Optional

from tegen.installer.acquirer import Fetcher, GitFetcher, SourceAcquirer
from tegen.installer.build_descriptor import BuildDescriptorUpdater
from tegen.installer.cleanup import ChmodPermissionFixer, PermissionFixer, ScratchCleaner
from tegen.installer.integrator import ArtifactIntegrator, ProgressCallback
from tegen.installer.resolver import RevisionResolver
from tegen.manifest import ManifestStore
from tegen.tegen_config import TegenConfig
from tegen.tegen_exceptions import PreconditionMissing, TegenException
from tegen.tegen_logger import TegenLogger
from tegen.tegen_utils import PlatformFamily, PlatformUtils


class InstallState:
    """Enumeration of install pipeline states."""

    IDLE = "idle"
    RESOLVING = "resolving"
    ACQUIRING = "acquiring"
    INTEGRATING_HEADERS = "integrating_headers"
    INTEGRATING_LIBS = "integrating_libs"
    UPDATING_BUILD_DESCRIPTOR = "updating_build_descriptor"
    COMMITTING = "committing"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


class InstallStatus:
    """Enumeration of install outcomes."""

    INSTALLED = "installed"
    ALREADY_INSTALLED = "already_installed"
    FAILED = "failed"


class InstallResult:
    """
    Outcome of one install request.
    """

    def __init__(
        self,
        package: str,
        revision: Optional[str] = None,
        status: str = InstallStatus.FAILED,
        states: Optional[List[str]] = None,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cleanup_succeeded: Optional[bool] = None,
    ):
        self.package = package
        self.revision = revision
        self.status = status
        self.states = states if states is not None else [InstallState.IDLE]
        self.error_code = error_code
        self.error_message = error_message
        self.cleanup_succeeded = cleanup_succeeded

    @property
    def state(self) -> str:
        return self.states[-1]

    @property
    def succeeded(self) -> bool:
        return self.status != InstallStatus.FAILED

    def describe(self) -> str:
        """Human-readable one-line summary."""
        if self.status == InstallStatus.INSTALLED:
            return f"Package {self.package} successfully installed ({self.revision})."
        if self.status == InstallStatus.ALREADY_INSTALLED:
            return (
                f"Package {self.package} is already installed with version "
                f"{self.revision}."
            )
        return f"Failed to install package {self.package}: {self.error_message}"

    def __repr__(self) -> str:
        return (
            f"InstallResult(package={self.package}, status={self.status}, "
            f"revision={self.revision}, state={self.state})"
        )


class InstallOrchestrator:
    """
    Runs the install pipeline for a project.

    The manifest is saved only after every filesystem step has succeeded, so
    an aborted install never records a package that is not in place. Cleanup of
    the scratch modules directory runs only on the success path.
    """

    def __init__(
        self,
        project_root: pathlib.Path,
        config: Optional[TegenConfig] = None,
        logger: Optional[TegenLogger] = None,
        fetcher: Optional[Fetcher] = None,
        permission_fixer: Optional[PermissionFixer] = None,
        platform_family: Optional[PlatformFamily] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the install orchestrator.

        Args:
            project_root: Root directory of the consuming project
            config: Names and tables used by the pipeline, defaults when None
            logger: Logger for progress and error messages
            fetcher: Version-control operations, git when None
            permission_fixer: Used by cleanup on Windows, os.chmod when None
            platform_family: Host family, detected when None
            progress: Receives copy progress percentages
        """
        self.project_root = pathlib.Path(project_root)
        self.config = config or TegenConfig()
        self.logger = logger or TegenLogger()
        self.platform_family = platform_family or PlatformUtils.get_platform_family()

        self.modules_dir = self.project_root / self.config.modules_dir_name
        self.include_dir = self.project_root / self.config.include_dir_name
        self.lib_dir = self.project_root / self.config.lib_dir_name

        self.manifest_store = ManifestStore(
            self.project_root, self.config.manifest_file_name, self.logger
        )
        self.resolver = RevisionResolver(self.config.default_branches, self.platform_family)
        self.acquirer = SourceAcquirer(
            self.modules_dir, fetcher or GitFetcher(self.logger), self.logger
        )
        self.integrator = ArtifactIntegrator(
            self.include_dir,
            self.lib_dir,
            self.config.library_extensions,
            self.logger,
            progress=progress,
        )
        self.descriptor_updater = BuildDescriptorUpdater(
            self.project_root / self.config.build_descriptor_name,
            self.config.include_dir_name,
            self.lib_dir,
            self.config.library_extensions,
            self.platform_family,
            self.config.windows_system_libraries,
            self.logger,
            dedupe_system_libraries=self.config.dedupe_system_libraries,
        )
        self.cleaner = ScratchCleaner(
            self.platform_family, permission_fixer or ChmodPermissionFixer(), self.logger
        )

    def install(self, package: str, revision: Optional[str] = None) -> InstallResult:
        """
        Install a package into the project.

        Args:
            package: Remote repository name of the package
            revision: Explicit branch, tag or commit-ish; platform default when None

        Returns:
            InstallResult describing the outcome. Errors are reported in the
            result, never raised.
        """
        result = InstallResult(package=package)

        if not self.manifest_store.exists():
            error = PreconditionMissing(
                f"{self.config.manifest_file_name} not found in {self.project_root}. "
                "Run 'init' first."
            )
            return self._fail(result, error)

        try:
            manifest = self.manifest_store.load()

            self._enter(result, InstallState.RESOLVING)
            result.revision = self.resolver.resolve(package, revision)

            if manifest.has_dependency(package):
                result.revision = manifest.get_revision(package)
                result.status = InstallStatus.ALREADY_INSTALLED
                self._enter(result, InstallState.DONE)
                self.logger.log(result.describe(), logging.INFO)
                return result

            self.logger.log(
                f"Installing package: {package} (version: {result.revision})",
                logging.INFO,
            )

            self._enter(result, InstallState.ACQUIRING)
            working_copy = self.acquirer.acquire(
                package, result.revision, self.config.repository_url(package)
            )

            self._enter(result, InstallState.INTEGRATING_HEADERS)
            self.integrator.integrate_headers(working_copy)

            self._enter(result, InstallState.INTEGRATING_LIBS)
            self.integrator.integrate_libraries(working_copy)

            self._enter(result, InstallState.UPDATING_BUILD_DESCRIPTOR)
            self.descriptor_updater.update(package, result.revision, manifest.name)

            self._enter(result, InstallState.COMMITTING)
            manifest.add_dependency(package, result.revision)
            self.manifest_store.save(manifest)
        except TegenException as e:
            return self._fail(result, e)

        result.status = InstallStatus.INSTALLED
        self._enter(result, InstallState.CLEANING_UP)
        result.cleanup_succeeded = self.cleaner.clean(self.modules_dir)

        self._enter(result, InstallState.DONE)
        self.logger.log(result.describe(), logging.INFO)
        return result

    def list_dependencies(self) -> Dict[str, str]:
        """
        Get the dependencies recorded in the manifest.

        Raises:
            PreconditionMissing: If the project has no manifest
        """
        if not self.manifest_store.exists():
            raise PreconditionMissing(
                f"{self.config.manifest_file_name} not found in {self.project_root}."
            )
        return dict(self.manifest_store.load().dependencies)

    def _enter(self, result: InstallResult, state: str) -> None:
        self.logger.log(f"{result.package}: {result.state} -> {state}", logging.DEBUG)
        result.states.append(state)

    def _fail(self, result: InstallResult, error: TegenException) -> InstallResult:
        result.status = InstallStatus.FAILED
        result.error_code = error.code
        result.error_message = error.message
        self._enter(result, InstallState.FAILED)
        self.logger.log(result.describe(), logging.ERROR)
        return result
