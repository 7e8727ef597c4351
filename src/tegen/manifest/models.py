"""
Pydantic data model for the project manifest (TegenConfig.json).
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ProjectManifest(BaseModel):
    """
    The persisted project descriptor.

    Identity fields are free-form and never validated. `dependencies` maps a
    package name to the revision it was installed at; a key means the package
    was installed successfully once, not that it is still on disk.
    """

    name: str = Field("", description="Project name, also the build target")
    version: str = Field("", description="Project version")
    author: str = Field("", description="Project author")
    license: str = Field("", description="License identifier")
    description: str = Field("", description="Free-form description")
    dependencies: Dict[str, str] = Field(
        default_factory=dict, description="Package name to resolved revision"
    )

    class Config:
        extra = "allow"

    @field_validator("name", "version", "author", "license", "description", mode="before")
    @classmethod
    def coerce_identity(cls, v: Any) -> Any:
        """Accept hand-edited numbers and nulls as text."""
        if v is None:
            return ""
        if isinstance(v, (bool, int, float)):
            return str(v)
        return v

    @field_validator("dependencies", mode="before")
    @classmethod
    def coerce_revisions(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {
                name: str(rev) if isinstance(rev, (bool, int, float)) else rev
                for name, rev in v.items()
            }
        return v

    def has_dependency(self, package: str) -> bool:
        return package in self.dependencies

    def get_revision(self, package: str) -> Optional[str]:
        return self.dependencies.get(package)

    def add_dependency(self, package: str, revision: str) -> None:
        """Record a package at the revision it was installed at."""
        self.dependencies[package] = revision

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializable form with declared fields first, extras after, and
        dependencies sorted by package name.
        """
        data = self.model_dump()
        data["dependencies"] = dict(sorted(self.dependencies.items()))
        return data
