"""
Project scaffolding for `tegen init`.
"""

import logging
import pathlib
from typing import Callable, Optional

from tegen.manifest import ManifestStore, ProjectManifest
from tegen.tegen_config import TegenConfig
from tegen.tegen_logger import TegenLogger

# Called with a message and a default; returns the answer or the default.
PromptFunction = Callable[[str, str], str]

MAIN_CPP = """#include <iostream>

int main() {
    std::cout << "Hello, World!" << std::endl;
    return 0;
}
"""

CMAKE_TEMPLATE = """cmake_minimum_required(VERSION 3.10)
project({name} VERSION {version})

set(CMAKE_CXX_STANDARD 17)

include_directories({include_dir})
add_executable({name} src/main.cpp)
"""


def console_prompt(message: str, default: str) -> str:
    answer = input(f"{message} [{default}]: " if default else f"{message}: ")
    return answer.strip() or default


def defaults_prompt(message: str, default: str) -> str:
    return default


class ProjectScaffolder:
    """
    Creates the manifest and a minimal CMake project in a directory.
    """

    def __init__(
        self,
        project_root: pathlib.Path,
        config: TegenConfig,
        logger: TegenLogger,
        prompt: Optional[PromptFunction] = None,
    ):
        self.project_root = pathlib.Path(project_root)
        self.config = config
        self.logger = logger
        self.prompt = prompt or console_prompt
        self.manifest_store = ManifestStore(
            self.project_root, config.manifest_file_name, logger
        )

    def init(self) -> Optional[ProjectManifest]:
        """
        Initialize the project.

        Returns:
            The new manifest, or None if the project already has one
        """
        if self.manifest_store.exists():
            self.logger.log(
                f"{self.config.manifest_file_name} already exists in {self.project_root}",
                logging.WARNING,
            )
            return None

        manifest = ProjectManifest(
            name=self.prompt("Enter project name", "my-package"),
            version=self.prompt("Enter project version", "1.0.0"),
            author=self.prompt("Enter author name", "Anonymous"),
            license=self.prompt("Enter license type", "MIT"),
            description=self.prompt("Enter project description", "A C++ project"),
        )
        self.manifest_store.save(manifest)

        (self.project_root / "src").mkdir(parents=True, exist_ok=True)
        (self.project_root / self.config.include_dir_name).mkdir(parents=True, exist_ok=True)

        self._write_if_missing(self.project_root / "src" / "main.cpp", MAIN_CPP)
        self._write_if_missing(
            self.project_root / self.config.build_descriptor_name,
            CMAKE_TEMPLATE.format(
                name=manifest.name,
                version=manifest.version,
                include_dir=self.config.include_dir_name,
            ),
        )

        self.logger.log(f"Initialized project {manifest.name} in {self.project_root}", logging.INFO)
        return manifest

    def _write_if_missing(self, path: pathlib.Path, content: str) -> None:
        if path.exists():
            self.logger.log(f"Keeping existing {path}", logging.INFO)
            return
        path.write_text(content, encoding="utf-8")
