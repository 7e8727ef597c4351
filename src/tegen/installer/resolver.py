"""
Revision resolver.

Turns an install request into the revision that will be fetched.
"""

from typing import Dict, Optional

from tegen.tegen_utils import PlatformFamily


class RevisionResolver:
    """
    Picks the revision for a package request.

    The platform family is resolved once by the caller and passed in, together
    with the table of default branches, so resolution itself is pure.
    """

    def __init__(
        self,
        default_branches: Dict[PlatformFamily, str],
        platform_family: PlatformFamily,
    ):
        if platform_family not in default_branches:
            raise ValueError(f"No default branch configured for {platform_family.value}")
        self.default_branches = default_branches
        self.platform_family = platform_family

    @property
    def default_branch(self) -> str:
        return self.default_branches[self.platform_family]

    def resolve(self, package: str, revision: Optional[str] = None) -> str:
        """
        Resolve the revision for a package.

        Args:
            package: Name of the requested package
            revision: Explicit branch, tag or commit-ish, used verbatim when given

        Returns:
            The explicit revision, or the platform's default branch
        """
        if revision:
            return revision
        return self.default_branch
