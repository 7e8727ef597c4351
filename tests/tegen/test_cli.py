"""
Tests for the command line front end.
"""

import json
import logging

import pytest

from tegen import cli
from tegen.tegen_logger import LOGGER_NAME
from tests.test_utils import FakeFetcher

WIDGETS_FILES = {
    "include/widgets.h": "#pragma once\n",
    "lib/libwidgets.a": "!<arch>\n",
}


@pytest.fixture(autouse=True)
def reset_tegen_logger():
    """Drop the stderr handler each CLI run installs."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_git(monkeypatch):
    """Replace the git-backed fetcher the CLI builds with a fake."""
    fetcher = FakeFetcher(files=WIDGETS_FILES)
    monkeypatch.setattr("tegen.installer.orchestrator.GitFetcher", lambda logger: fetcher)
    return fetcher


class TestCli:
    """Tests for tegen.cli.main."""

    def test_init_install_list(self, tmp_path, capsys, fake_git):
        root = str(tmp_path)

        assert cli.main(["-C", root, "init", "--defaults"]) == 0
        assert (tmp_path / "TegenConfig.json").exists()

        assert cli.main(["-C", root, "install", "widgets", "v1"]) == 0
        out = capsys.readouterr().out
        assert "Copying headers: 100%" in out
        assert "Package widgets successfully installed (v1)." in out

        assert cli.main(["-C", root, "install", "widgets"]) == 0
        assert "already installed with version v1" in capsys.readouterr().out

        assert cli.main(["-C", root, "list"]) == 0
        assert capsys.readouterr().out == "Dependencies:\n  - widgets: v1\n"

        manifest = json.loads((tmp_path / "TegenConfig.json").read_text())
        assert manifest["dependencies"] == {"widgets": "v1"}
        assert not (tmp_path / "TegenModules").exists()

    def test_init_twice_reports_existing(self, tmp_path, capsys):
        assert cli.main(["-C", str(tmp_path), "init", "--defaults"]) == 0
        capsys.readouterr()
        assert cli.main(["-C", str(tmp_path), "init", "--defaults"]) == 0
        assert "already exists" in capsys.readouterr().out

    def test_install_without_manifest_fails(self, tmp_path, capsys, fake_git):
        assert cli.main(["-C", str(tmp_path), "install", "widgets"]) == 1
        err = capsys.readouterr().err
        assert "Run 'init' first" in err
        assert fake_git.calls == []

    def test_install_acquisition_failure_exit_code(self, tmp_path, capsys, fake_git):
        fake_git.exit_codes["clone"] = 128
        cli.main(["-C", str(tmp_path), "init", "--defaults"])
        assert cli.main(["-C", str(tmp_path), "install", "widgets"]) == 1
        assert "Failed to install package widgets" in capsys.readouterr().err

    def test_list_without_manifest_fails(self, tmp_path, capsys):
        assert cli.main(["-C", str(tmp_path), "list"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_config_is_reported(self, tmp_path, capsys):
        (tmp_path / "tegen.toml").write_text("[tegen]\nbogus = 1\n")
        assert cli.main(["-C", str(tmp_path), "list"]) == 1
        assert "Unknown configuration key" in capsys.readouterr().err

    def test_undecodable_manifest_is_reported(self, tmp_path, capsys, fake_git):
        (tmp_path / "TegenConfig.json").write_bytes(b'{"name": "Jos\xe9", "dependencies": {}}')
        assert cli.main(["-C", str(tmp_path), "list"]) == 1
        assert cli.main(["-C", str(tmp_path), "install", "widgets"]) == 1
        assert "Cannot read manifest" in capsys.readouterr().err
        assert fake_git.calls == []

    def test_unknown_command_is_rejected(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["frobnicate"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_install_requires_package(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["install"])
        assert exc_info.value.code == 2

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["-h"])
        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        for command in ("init", "install", "list", "build", "run"):
            assert command in out
