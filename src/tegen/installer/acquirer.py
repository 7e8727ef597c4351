"""
Source acquirer.

Materializes one revision of a package into a scratch working copy, cloning it
the first time and updating it in place afterwards.
"""

import logging
import pathlib
from typing import Protocol

from tegen.tegen_exceptions import AcquisitionFailed
from tegen.tegen_logger import TegenLogger
from tegen.tegen_utils import CommandUtils

# Exit status of `git symbolic-ref -q HEAD` when HEAD is not a branch.
DETACHED_HEAD = 1


class Fetcher(Protocol):
    """
    Version-control operations used by the acquirer.

    Every method returns the exit status of the underlying operation.
    """

    def clone(self, url: str, revision: str, destination: pathlib.Path) -> int: ...

    def fetch(self, working_copy: pathlib.Path) -> int: ...

    def checkout(self, working_copy: pathlib.Path, revision: str) -> int: ...

    def pull(self, working_copy: pathlib.Path) -> int: ...


class GitFetcher:
    """
    Fetcher backed by the git command line.

    Clones carry full history so that a revision may be a branch, a tag or a
    commit, and a later install may switch the working copy to another one.
    """

    def __init__(self, logger: TegenLogger, git_executable: str = "git"):
        self.logger = logger
        self.git = git_executable

    def clone(self, url: str, revision: str, destination: pathlib.Path) -> int:
        code = CommandUtils.run(self.logger, [self.git, "clone", url, str(destination)])
        if code != 0:
            return code
        return self.checkout(destination, revision)

    def fetch(self, working_copy: pathlib.Path) -> int:
        return CommandUtils.run(
            self.logger, [self.git, "fetch", "--all", "--tags"], cwd=working_copy
        )

    def checkout(self, working_copy: pathlib.Path, revision: str) -> int:
        return CommandUtils.run(
            self.logger, [self.git, "checkout", revision], cwd=working_copy
        )

    def pull(self, working_copy: pathlib.Path) -> int:
        # A tag or commit leaves HEAD detached; there is nothing to fast-forward.
        on_branch = CommandUtils.run(
            self.logger,
            [self.git, "symbolic-ref", "-q", "HEAD"],
            cwd=working_copy,
            quiet=True,
        )
        if on_branch == DETACHED_HEAD:
            self.logger.log(
                f"{working_copy} is not on a branch, skipping pull", logging.DEBUG
            )
            return 0
        if on_branch != 0:
            return on_branch
        return CommandUtils.run(
            self.logger, [self.git, "pull", "--ff-only"], cwd=working_copy
        )


class SourceAcquirer:
    """
    Ensures a working copy of a package revision exists under the modules
    directory.
    """

    def __init__(
        self,
        modules_dir: pathlib.Path,
        fetcher: Fetcher,
        logger: TegenLogger,
    ):
        """
        Initialize the source acquirer.

        Args:
            modules_dir: Scratch directory holding one working copy per package
            fetcher: Version-control operations
            logger: Logger for progress and error messages
        """
        self.modules_dir = pathlib.Path(modules_dir)
        self.fetcher = fetcher
        self.logger = logger

    def working_copy_path(self, package: str) -> pathlib.Path:
        return self.modules_dir / package

    def acquire(self, package: str, revision: str, url: str) -> pathlib.Path:
        """
        Clone or update the working copy of a package.

        Args:
            package: Package name, also the working copy directory name
            revision: Resolved revision to materialize
            url: Remote repository URL

        Returns:
            Path of the working copy

        Raises:
            AcquisitionFailed: If any version-control step exits non-zero
        """
        working_copy = self.working_copy_path(package)

        if not working_copy.exists():
            self.logger.log(
                f"Cloning {package} ({revision}) from {url}", logging.INFO
            )
            try:
                self.modules_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise AcquisitionFailed(
                    f"Cannot create modules directory {self.modules_dir}: {e}"
                )
            self._check(self.fetcher.clone(url, revision, working_copy), "clone", package)
            return working_copy

        self.logger.log(
            f"Updating existing working copy of {package} to {revision}", logging.INFO
        )
        self._check(self.fetcher.fetch(working_copy), "fetch", package)
        self._check(self.fetcher.checkout(working_copy, revision), "checkout", package)
        self._check(self.fetcher.pull(working_copy), "pull", package)
        return working_copy

    @staticmethod
    def _check(exit_code: int, step: str, package: str) -> None:
        if exit_code != 0:
            raise AcquisitionFailed(
                f"{step} of {package} failed with exit code {exit_code}",
                context={"step": step, "exit_code": exit_code},
            )
