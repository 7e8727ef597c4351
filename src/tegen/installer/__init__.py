"""
Dependency installation pipeline.

This package handles:
1. Resolving a package request to a revision
2. Cloning or updating the package's working copy
3. Copying its headers and static libraries into the project
4. Appending build directives to CMakeLists.txt
5. Recording the install in the manifest and removing the scratch directory
"""

from .acquirer import Fetcher, GitFetcher, SourceAcquirer
from .build_descriptor import BuildDescriptorUpdater
from .cleanup import ChmodPermissionFixer, PermissionFixer, ScratchCleaner
from .integrator import ArtifactIntegrator
from .orchestrator import InstallOrchestrator, InstallResult, InstallState, InstallStatus
from .resolver import RevisionResolver

__all__ = [
    "ArtifactIntegrator",
    "BuildDescriptorUpdater",
    "ChmodPermissionFixer",
    "Fetcher",
    "GitFetcher",
    "InstallOrchestrator",
    "InstallResult",
    "InstallState",
    "InstallStatus",
    "PermissionFixer",
    "RevisionResolver",
    "ScratchCleaner",
    "SourceAcquirer",
]
