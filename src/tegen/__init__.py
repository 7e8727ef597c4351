"""
tegen: a project-local dependency manager for CMake-based C and C++ projects.
"""

from tegen.installer import InstallOrchestrator, InstallResult, InstallStatus
from tegen.tegen_config import TegenConfig
from tegen.tegen_logger import TegenLogger

__version__ = "0.1.0"

__all__ = [
    "InstallOrchestrator",
    "InstallResult",
    "InstallStatus",
    "TegenConfig",
    "TegenLogger",
]
