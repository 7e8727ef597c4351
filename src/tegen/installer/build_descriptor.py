"""
Build descriptor updater.

Appends include and link directives for an installed package to the project's
CMakeLists.txt. The file is only ever appended to.
"""

import logging
import pathlib
from typing import List

from tegen.installer.integrator import is_static_library
from tegen.tegen_exceptions import BuildDescriptorUpdateFailed
from tegen.tegen_logger import TegenLogger
from tegen.tegen_utils import PlatformFamily

SYSTEM_LIBRARIES_MARKER = "# tegen: windows system libraries"


class BuildDescriptorUpdater:
    """
    Writes the build directives contributed by one install.
    """

    def __init__(
        self,
        descriptor_path: pathlib.Path,
        include_dir_name: str,
        lib_dir: pathlib.Path,
        library_extensions: List[str],
        platform_family: PlatformFamily,
        system_libraries: List[str],
        logger: TegenLogger,
        dedupe_system_libraries: bool = True,
    ):
        self.descriptor_path = pathlib.Path(descriptor_path)
        self.include_dir_name = include_dir_name
        self.lib_dir = pathlib.Path(lib_dir)
        self.library_extensions = library_extensions
        self.platform_family = platform_family
        self.system_libraries = system_libraries
        self.logger = logger
        self.dedupe_system_libraries = dedupe_system_libraries

    def project_libraries(self) -> List[str]:
        """File names of the static libraries currently in the project's lib directory."""
        if not self.lib_dir.is_dir():
            return []
        return sorted(
            p.name
            for p in self.lib_dir.iterdir()
            if p.is_file() and is_static_library(p, self.library_extensions)
        )

    def render(self, package: str, revision: str, target: str) -> str:
        lines = [
            "",
            f"# tegen: {package} ({revision})",
            f"include_directories(${{CMAKE_CURRENT_SOURCE_DIR}}/{self.include_dir_name})",
        ]
        for library in self.project_libraries():
            lines.append(
                f"target_link_libraries({target} "
                f"${{CMAKE_CURRENT_SOURCE_DIR}}/{self.lib_dir.name}/{library})"
            )

        if self.platform_family == PlatformFamily.WINDOWS and self.system_libraries:
            if not (self.dedupe_system_libraries and self._has_system_libraries()):
                lines.append(SYSTEM_LIBRARIES_MARKER)
                for library in self.system_libraries:
                    lines.append(f"target_link_libraries({target} {library})")

        return "\n".join(lines) + "\n"

    def update(self, package: str, revision: str, target: str) -> None:
        """
        Append the directives for a package.

        Args:
            package: Installed package name, used in the section comment
            revision: Revision the package was installed at
            target: Build target the libraries are linked into

        Raises:
            BuildDescriptorUpdateFailed: If the descriptor cannot be written
        """
        try:
            text = self.render(package, revision, target)
            with open(self.descriptor_path, "a", encoding="utf-8") as f:
                f.write(text)
        except (OSError, ValueError) as e:
            raise BuildDescriptorUpdateFailed(
                f"Cannot update {self.descriptor_path}: {e}"
            )

        self.logger.log(
            f"Appended build directives for {package} to {self.descriptor_path}",
            logging.INFO,
        )

    def _has_system_libraries(self) -> bool:
        if not self.descriptor_path.is_file():
            return False
        # The descriptor may be in any encoding; the marker is ASCII.
        return SYSTEM_LIBRARIES_MARKER.encode("ascii") in self.descriptor_path.read_bytes()
