"""Tests for CLI commands - deploy, status."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
from click.testing import CliRunner

from revdeploy import __version__
from revdeploy.cli import cli

if TYPE_CHECKING:
    from conftest import GitRepoBuilder


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def webroot(tmp_path: Path) -> Path:
    """Directory used as the deployment target."""
    return tmp_path / "www"


@pytest.fixture
def project(git_repo: GitRepoBuilder, webroot: Path) -> GitRepoBuilder:
    """Repository with one commit and a local-backend configuration."""
    git_repo.commit({"index.php": "<?php echo 1;", "docs/readme.txt": "docs"}, "initial")
    write_config(git_repo.path, {"scheme": "local", "path": str(webroot)})
    return git_repo


def write_config(repo_path: Path, config: dict[str, Any]) -> None:
    (repo_path / "revdeploy.json").write_text(json.dumps(config), encoding="utf-8")


def invoke(runner: CliRunner, repo: GitRepoBuilder, *args: str):
    return runner.invoke(cli, ["--repo", str(repo.path), *args])


class TestCliGroup:
    """Tests for global options."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "deploy" in result.output
        assert "status" in result.output


class TestDeployCommand:
    """Tests for 'revdeploy deploy' command."""

    def test_first_deploy_uploads_everything(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        """Without a remote revision every tracked file is uploaded."""
        result = invoke(runner, project, "deploy")

        assert result.exit_code == 0, result.output
        assert (webroot / "index.php").read_text() == "<?php echo 1;"
        assert (webroot / "docs" / "readme.txt").exists()
        head = project.git("rev-parse", "HEAD")
        assert (webroot / ".revision").read_text() == head
        assert f"Remote revision set to {head}" in result.output

    def test_second_deploy_is_incremental(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        """Only the changes since the recorded revision are applied."""
        assert invoke(runner, project, "deploy").exit_code == 0
        head = project.commit({"style.css": "body{}", "docs/readme.txt": None}, "second")

        result = invoke(runner, project, "deploy")

        assert result.exit_code == 0, result.output
        assert (webroot / "style.css").read_text() == "body{}"
        assert not (webroot / "docs").exists()
        assert (webroot / ".revision").read_text() == head
        assert "1 uploaded, 1 deleted" in result.output

    def test_deploy_up_to_date(
        self, runner: CliRunner, project: GitRepoBuilder
    ) -> None:
        assert invoke(runner, project, "deploy").exit_code == 0

        result = invoke(runner, project, "deploy")

        assert result.exit_code == 0
        assert "Everything is up to date." in result.output

    def test_dry_run_changes_nothing(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        """--dry-run reports the plan without touching the target."""
        result = invoke(runner, project, "deploy", "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert "index.php" in result.output
        assert not (webroot / "index.php").exists()
        assert not (webroot / ".revision").exists()

    def test_exclude_option(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        """Excluded prefixes are not uploaded."""
        result = invoke(runner, project, "deploy", "--exclude", "docs/")

        assert result.exit_code == 0, result.output
        assert (webroot / "index.php").exists()
        assert not (webroot / "docs").exists()
        assert "1 skipped" in result.output

    def test_exclude_from_config(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        write_config(
            project.path, {"scheme": "local", "path": str(webroot), "exclude": ["docs/"]}
        )

        result = invoke(runner, project, "deploy")

        assert result.exit_code == 0, result.output
        assert not (webroot / "docs").exists()

    def test_additional_file(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        """Untracked files given with --additional are uploaded on every run."""
        (project.path / "secrets.php").write_text("<?php $key = 1;")

        result = invoke(runner, project, "deploy", "--additional", "secrets.php")

        assert result.exit_code == 0, result.output
        assert (webroot / "secrets.php").read_text() == "<?php $key = 1;"
        assert "+ secrets.php" in result.output

    def test_older_revision(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        """A revision argument deploys that commit instead of HEAD."""
        first = project.git("rev-parse", "HEAD")
        project.commit({"new.txt": "new"}, "second")

        result = invoke(runner, project, "deploy", first)

        assert result.exit_code == 0, result.output
        assert not (webroot / "new.txt").exists()
        assert (webroot / ".revision").read_text() == first

    def test_custom_revision_file(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        result = invoke(runner, project, "deploy", "--revision-file", "REVISION")

        assert result.exit_code == 0, result.output
        assert (webroot / "REVISION").exists()
        assert not (webroot / ".revision").exists()

    def test_missing_config(self, runner: CliRunner, git_repo: GitRepoBuilder) -> None:
        """A missing configuration file is reported with exit status 1."""
        git_repo.commit({"a.txt": "a"})

        result = invoke(runner, git_repo, "deploy")

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_unknown_scheme(self, runner: CliRunner, project: GitRepoBuilder) -> None:
        write_config(project.path, {"scheme": "gopher"})

        result = invoke(runner, project, "deploy")

        assert result.exit_code == 1
        assert "Unknown backend scheme: gopher" in result.output

    def test_unknown_revision(self, runner: CliRunner, project: GitRepoBuilder) -> None:
        result = invoke(runner, project, "deploy", "no-such-branch")

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unknown_remote_revision(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        """A recorded revision the repository does not know is fatal."""
        webroot.mkdir()
        (webroot / ".revision").write_text("0" * 40)

        result = invoke(runner, project, "deploy")

        assert result.exit_code == 1
        assert not (webroot / "index.php").exists()


class TestStatusCommand:
    """Tests for 'revdeploy status' command."""

    def test_status_not_deployed(self, runner: CliRunner, project: GitRepoBuilder) -> None:
        result = invoke(runner, project, "status")

        assert result.exit_code == 0, result.output
        assert "Remote revision: ---" in result.output
        assert "Up to date." not in result.output

    def test_status_after_deploy(self, runner: CliRunner, project: GitRepoBuilder) -> None:
        """After a deploy the remote revision matches HEAD."""
        assert invoke(runner, project, "deploy").exit_code == 0
        head = project.git("rev-parse", "HEAD")

        result = invoke(runner, project, "status")

        assert result.exit_code == 0, result.output
        assert f"Remote revision: {head}" in result.output
        assert "Up to date." in result.output

    def test_status_does_not_write(
        self, runner: CliRunner, project: GitRepoBuilder, webroot: Path
    ) -> None:
        invoke(runner, project, "status")
        assert not (webroot / ".revision").exists()
