"""
Tests for the source acquirer and the git-backed fetcher.
"""

import shutil
import subprocess

import pytest

from tegen.installer import GitFetcher, SourceAcquirer
from tegen.installer.acquirer import DETACHED_HEAD
from tegen.tegen_exceptions import AcquisitionFailed
from tegen.tegen_logger import TegenLogger
from tegen.tegen_utils import COMMAND_NOT_FOUND
from tests.test_utils import FakeFetcher

URL = "https://example.invalid/widgets.git"


class TestSourceAcquirer:
    """Tests for SourceAcquirer."""

    @pytest.fixture
    def modules_dir(self, tmp_path):
        return tmp_path / "TegenModules"

    def test_fresh_clone(self, modules_dir):
        fetcher = FakeFetcher(files={"include/widgets.h": "// widgets"})
        acquirer = SourceAcquirer(modules_dir, fetcher, TegenLogger())

        working_copy = acquirer.acquire("widgets", "linux", URL)

        assert working_copy == modules_dir / "widgets"
        assert (working_copy / "include" / "widgets.h").exists()
        assert fetcher.calls == [("clone", URL, "linux", working_copy)]

    def test_existing_working_copy_is_updated(self, modules_dir):
        """An existing working copy is fetched, switched and fast-forwarded."""
        (modules_dir / "widgets").mkdir(parents=True)
        fetcher = FakeFetcher()
        acquirer = SourceAcquirer(modules_dir, fetcher, TegenLogger())

        acquirer.acquire("widgets", "v2", URL)

        assert fetcher.steps == ["fetch", "checkout", "pull"]
        assert fetcher.calls[1] == ("checkout", modules_dir / "widgets", "v2")

    def test_clone_failure_raises(self, modules_dir):
        fetcher = FakeFetcher(exit_codes={"clone": 128})
        acquirer = SourceAcquirer(modules_dir, fetcher, TegenLogger())

        with pytest.raises(AcquisitionFailed) as exc_info:
            acquirer.acquire("widgets", "linux", URL)
        assert exc_info.value.context["exit_code"] == 128
        assert exc_info.value.code == "ACQUISITION_FAILED"

    @pytest.mark.parametrize("failing_step", ["fetch", "checkout", "pull"])
    def test_update_failure_stops_remaining_steps(self, modules_dir, failing_step):
        (modules_dir / "widgets").mkdir(parents=True)
        fetcher = FakeFetcher(exit_codes={failing_step: 1})
        acquirer = SourceAcquirer(modules_dir, fetcher, TegenLogger())

        with pytest.raises(AcquisitionFailed):
            acquirer.acquire("widgets", "linux", URL)
        assert fetcher.steps[-1] == failing_step


class TestGitFetcher:
    """Tests for GitFetcher command construction."""

    @pytest.fixture
    def exit_codes(self):
        return {}

    @pytest.fixture
    def recorded(self, monkeypatch, exit_codes):
        calls = []

        def fake_run(logger, cmd, cwd=None, env=None, quiet=False):
            calls.append((list(cmd), cwd))
            return exit_codes.get(cmd[1], 0)

        monkeypatch.setattr("tegen.installer.acquirer.CommandUtils.run", fake_run)
        return calls

    def test_clone_then_checks_out_revision(self, recorded, tmp_path):
        """Any commit-ish is checked out after a full clone."""
        destination = tmp_path / "widgets"
        assert GitFetcher(TegenLogger()).clone(URL, "9334e63", destination) == 0
        assert recorded == [
            (["git", "clone", URL, str(destination)], None),
            (["git", "checkout", "9334e63"], destination),
        ]

    def test_clone_failure_skips_checkout(self, recorded, exit_codes, tmp_path):
        exit_codes["clone"] = 128
        assert GitFetcher(TegenLogger()).clone(URL, "linux", tmp_path / "widgets") == 128
        assert [cmd[1] for cmd, _ in recorded] == ["clone"]

    def test_update_commands_run_in_working_copy(self, recorded, tmp_path):
        fetcher = GitFetcher(TegenLogger())
        fetcher.fetch(tmp_path)
        fetcher.checkout(tmp_path, "v2")
        fetcher.pull(tmp_path)
        assert recorded == [
            (["git", "fetch", "--all", "--tags"], tmp_path),
            (["git", "checkout", "v2"], tmp_path),
            (["git", "symbolic-ref", "-q", "HEAD"], tmp_path),
            (["git", "pull", "--ff-only"], tmp_path),
        ]

    def test_pull_is_skipped_on_detached_head(self, recorded, exit_codes, tmp_path):
        exit_codes["symbolic-ref"] = DETACHED_HEAD
        assert GitFetcher(TegenLogger()).pull(tmp_path) == 0
        assert [cmd[1] for cmd, _ in recorded] == ["symbolic-ref"]

    def test_pull_reports_branch_check_failures(self, recorded, exit_codes, tmp_path):
        exit_codes["symbolic-ref"] = 128
        assert GitFetcher(TegenLogger()).pull(tmp_path) == 128

    def test_missing_git_reports_not_found(self, tmp_path):
        fetcher = GitFetcher(TegenLogger(), git_executable="tegen-no-such-git")
        assert fetcher.fetch(tmp_path) == COMMAND_NOT_FOUND


def git(cwd, *args):
    completed = subprocess.run(
        [
            "git",
            "-c", "user.name=Tegen Tests",
            "-c", "user.email=tests@example.invalid",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout.strip()


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestGitFetcherWithRepository:
    """Tests for GitFetcher against a local repository."""

    @pytest.fixture
    def source(self, tmp_path):
        """
        Repository with two commits on `main` and a branch `other` that adds
        include/other.h. Returns the URL and the first commit's hash.
        """
        repo = tmp_path / "source"
        (repo / "include").mkdir(parents=True)
        git(repo, "init", "-q")
        git(repo, "symbolic-ref", "HEAD", "refs/heads/main")

        (repo / "include" / "widgets.h").write_text("v1\n")
        git(repo, "add", "-A")
        git(repo, "commit", "-q", "-m", "one")
        first = git(repo, "rev-parse", "HEAD")

        (repo / "include" / "widgets.h").write_text("v2\n")
        git(repo, "commit", "-q", "-a", "-m", "two")

        git(repo, "checkout", "-q", "-b", "other")
        (repo / "include" / "other.h").write_text("other\n")
        git(repo, "add", "-A")
        git(repo, "commit", "-q", "-m", "three")
        git(repo, "checkout", "-q", "main")
        return repo.as_uri(), first

    @pytest.fixture
    def acquirer(self, tmp_path):
        logger = TegenLogger()
        return SourceAcquirer(tmp_path / "TegenModules", GitFetcher(logger), logger)

    def test_acquire_commit_hash(self, source, acquirer):
        url, first = source
        working_copy = acquirer.acquire("widgets", first, url)
        assert (working_copy / "include" / "widgets.h").read_text() == "v1\n"

    def test_acquire_branch(self, source, acquirer):
        url, _ = source
        working_copy = acquirer.acquire("widgets", "main", url)
        assert (working_copy / "include" / "widgets.h").read_text() == "v2\n"
        assert not (working_copy / "include" / "other.h").exists()

    def test_leftover_working_copy_switches_branch(self, source, acquirer):
        """A working copy left at a commit is moved to another branch and updated."""
        url, first = source
        acquirer.acquire("widgets", first, url)

        working_copy = acquirer.acquire("widgets", "other", url)

        assert (working_copy / "include" / "other.h").read_text() == "other\n"
        assert (working_copy / "include" / "widgets.h").read_text() == "v2\n"
