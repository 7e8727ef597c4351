"""
Project-level commands around the install pipeline: scaffolding a new project,
building it with CMake and running the result.
"""

from .build_runner import BuildRunner
from .scaffold import ProjectScaffolder

__all__ = ["BuildRunner", "ProjectScaffolder"]
