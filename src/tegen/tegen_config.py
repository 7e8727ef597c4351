"""
Configuration for tegen.

Everything the install pipeline treats as a fixed name or table lives here so
that callers (and tests) can redirect it. Values can be overridden per project
from an optional `tegen.toml`:

```toml
[tegen]
modules_dir_name = "TegenModules"
repository_url_template = "https://github.com/TegenPackages/{package}.git"
dedupe_system_libraries = true

[tegen.default_branches]
windows = "windows"
macos = "macos"
linux = "linux"
```
"""

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List

from tegen.tegen_exceptions import ConfigurationError
from tegen.tegen_utils import PlatformFamily

CONFIG_FILE_NAME = "tegen.toml"


def default_branch_table() -> Dict[PlatformFamily, str]:
    """The built-in default branch name for each platform family."""
    return {
        PlatformFamily.WINDOWS: "windows",
        PlatformFamily.MACOS: "macos",
        PlatformFamily.LINUX: "linux",
    }


@dataclass
class TegenConfig:
    """
    Configuration parameters for the install pipeline and project commands.
    """

    manifest_file_name: str = "TegenConfig.json"
    modules_dir_name: str = "TegenModules"
    include_dir_name: str = "include"
    lib_dir_name: str = "lib"
    build_descriptor_name: str = "CMakeLists.txt"
    build_dir_name: str = "build"
    repository_url_template: str = "https://github.com/TegenPackages/{package}.git"
    default_branches: Dict[PlatformFamily, str] = field(default_factory=default_branch_table)
    library_extensions: List[str] = field(default_factory=lambda: [".a", ".lib"])
    windows_system_libraries: List[str] = field(
        default_factory=lambda: ["ws2_32", "wsock32", "iphlpapi"]
    )
    dedupe_system_libraries: bool = True

    def repository_url(self, package: str) -> str:
        return self.repository_url_template.format(package=package)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "TegenConfig":
        """
        Create a TegenConfig from a dictionary (the `[tegen]` table of tegen.toml).

        Raises:
            ConfigurationError: If a key is unknown or a value has the wrong type
        """
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in config_dict.items():
            if key not in known:
                raise ConfigurationError(f"Unknown configuration key: {key}")

            if key == "default_branches":
                kwargs[key] = cls._parse_default_branches(value)
            elif key in ("library_extensions", "windows_system_libraries"):
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigurationError(f"'{key}' must be a list of strings")
                kwargs[key] = list(value)
            elif key == "dedupe_system_libraries":
                if not isinstance(value, bool):
                    raise ConfigurationError(f"'{key}' must be a boolean")
                kwargs[key] = value
            else:
                if not isinstance(value, str) or not value:
                    raise ConfigurationError(f"'{key}' must be a non-empty string")
                kwargs[key] = value

        return cls(**kwargs)

    @staticmethod
    def _parse_default_branches(value: Any) -> Dict[PlatformFamily, str]:
        if not isinstance(value, dict):
            raise ConfigurationError("'default_branches' must be a table")

        table = default_branch_table()
        for family_name, branch in value.items():
            try:
                family = PlatformFamily(family_name.lower())
            except ValueError:
                raise ConfigurationError(f"Unsupported platform: {family_name}")
            if not isinstance(branch, str) or not branch:
                raise ConfigurationError(
                    f"Default branch for {family_name} must be a non-empty string"
                )
            table[family] = branch
        return table

    @classmethod
    def load(cls, project_root: Path) -> "TegenConfig":
        """
        Load tegen.toml from the project root, or the defaults if it is absent.
        """
        config_path = Path(project_root) / CONFIG_FILE_NAME
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "rb") as f:
                toml_dict = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid {CONFIG_FILE_NAME}: {e}")

        return cls.from_dict(toml_dict.get("tegen", {}))
