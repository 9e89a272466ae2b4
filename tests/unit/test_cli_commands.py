from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from octo_cmdlets.cli import _log_level, app
from octo_cmdlets.client import OctopusApiError
from octo_cmdlets.config import Config, ServerConfig
from octo_cmdlets.config.loader import ConfigError
from octo_cmdlets.resources import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from conftest import FakeOctopusServer

runner = CliRunner()

_CONFIG = Config(server=ServerConfig(host="https://octopus.example.com", api_key="API-TEST"))


@pytest.fixture
def connected(server: FakeOctopusServer) -> Iterator[FakeOctopusServer]:
    """Seeded fake server standing in for the HTTP client of a real session."""
    server.add(ResourceKind.PROJECT_GROUP, "Frontend")
    server.add(ResourceKind.PROJECT, "Web", ProjectGroupId="ProjectGroups-1")
    server.add(ResourceKind.PROJECT, "Api", ProjectGroupId="ProjectGroups-1")
    server.add(ResourceKind.ENVIRONMENT, "Dev")
    server.add(ResourceKind.ENVIRONMENT, "Prod")
    server.add(ResourceKind.MACHINE, "web-01")
    server.add(ResourceKind.LIBRARY_VARIABLE_SET, "Shared")
    server.add_variable("Projects-1", "Conn", "Server=db")
    server.add_variable("Projects-1", "Password", "hunter2", IsSensitive=True)

    with (
        patch("octo_cmdlets.config.load", return_value=_CONFIG),
        patch("octo_cmdlets.core.provider.OctopusClient", return_value=server),
    ):
        yield server


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "octo-cmdlets" in result.stdout

    def test_short_version_flag(self) -> None:
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert "octo-cmdlets" in result.stdout


class TestLogLevel:
    def test_unconfigured_by_default(self) -> None:
        assert _log_level(0) is None

    @pytest.mark.parametrize(("verbose", "level"), [(1, logging.INFO), (2, logging.DEBUG)])
    def test_verbose_flags(self, verbose: int, level: int) -> None:
        assert _log_level(verbose) == level

    def test_env_overrides_flags(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCTO_LOG", "warning")
        assert _log_level(2) == logging.WARNING

    def test_invalid_env_falls_back_to_info(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("OCTO_LOG", "loud")
        assert _log_level(0) == logging.INFO
        assert "OCTO_LOG='LOUD' is not a log level" in capsys.readouterr().err


class TestGetProject:
    def test_lists_all(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-project", "--no-color"])
        assert result.exit_code == 0
        assert "Web" in result.stdout
        assert "Api" in result.stdout
        assert "ProjectGroups-1" in result.stdout

    def test_unknown_name_warns(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-project", "Web", "Ghost", "--no-color"])
        assert result.exit_code == 0
        assert "WARNING: No project 'Ghost' was found." in result.output
        assert "Api" not in result.stdout

    def test_exclude(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-project", "-g", "frontend", "-x", "web", "--no-color"])
        assert result.exit_code == 0
        assert "Api" in result.stdout
        assert "Web" not in result.stdout

    def test_by_id(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-project", "--id", "Projects-2", "--no-color"])
        assert result.exit_code == 0
        assert "Api" in result.stdout

    def test_id_with_names_is_error(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-project", "Web", "--id", "Projects-2", "--no-color"])
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_nothing_matched(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-project", "-g", "Nope", "--no-color"])
        assert result.exit_code == 0
        assert "No matching resources." in result.stdout

    def test_cache_flag_reuses_listing_across_invocations(
        self, connected: FakeOctopusServer
    ) -> None:
        first = runner.invoke(app, ["get-project", "--cache", "--no-color"])
        second = runner.invoke(app, ["get-project", "--cache", "--no-color"])

        assert first.exit_code == second.exit_code == 0
        assert "Api" in second.stdout
        assert connected.count("GET", "projects/all") == 1

    def test_without_cache_flag_always_fetches(self, connected: FakeOctopusServer) -> None:
        runner.invoke(app, ["get-project", "--cache", "--no-color"])
        runner.invoke(app, ["get-project", "--no-color"])
        assert connected.count("GET", "projects/all") == 2


class TestGetEnvironmentAndMachine:
    def test_environments(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-environment", "--exclude", "prod", "--no-color"])
        assert result.exit_code == 0
        assert "Dev" in result.stdout
        assert "Prod" not in result.stdout

    def test_machines_by_name(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-machine", "WEB-01", "db-01", "--no-color"])
        assert result.exit_code == 0
        assert "Machines-1" in result.stdout
        assert "No machine 'db-01' was found." in result.output


class TestGetVariable:
    def test_lists_with_sensitive_masked(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-variable", "--project", "Web", "--no-color"])
        assert result.exit_code == 0
        assert "Server=db" in result.stdout
        assert "hunter2" not in result.output
        assert "********" in result.stdout

    def test_requires_exactly_one_owner(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(
            app, ["get-variable", "--project", "Web", "--library-set", "Shared", "--no-color"]
        )
        assert result.exit_code == 1
        assert "exactly one" in result.output

    def test_unknown_project(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["get-variable", "-p", "Ghost", "--no-color"])
        assert result.exit_code == 1
        assert "Not found: Project 'Ghost' was not found." in result.output


class TestAddVariable:
    def test_add_scoped(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(
            app,
            ["add-variable", "Api", "Conn", "Server=prod", "-e", "Prod", "-r", "web", "--no-color"],
        )
        assert result.exit_code == 0
        assert "Added variable 'Conn' to project 'Api'." in result.stdout
        (stored,) = connected.variable_set("Projects-2")["Variables"]
        assert stored["Scope"] == {"Environment": ["Environments-2"], "Role": ["web"]}

    def test_sensitive_value_not_echoed(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(
            app, ["add-variable", "Api", "Pw", "s3cret", "--sensitive", "--no-color"]
        )
        assert result.exit_code == 0
        assert "s3cret" not in result.output
        assert connected.variable_set("Projects-2")["Variables"][0]["IsSensitive"] is True

    def test_unknown_environment_warns(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(
            app, ["add-variable", "Api", "Conn", "x", "-e", "Staging", "--no-color"]
        )
        assert result.exit_code == 0
        assert "WARNING: No environment 'Staging' was found." in result.output

    def test_add_library_variable(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["add-library-variable", "shared", "Region", "eu"])
        assert result.exit_code == 0
        assert connected.variable_set("LibraryVariableSets-1")["Variables"][0]["Name"] == "Region"


class TestCopyVariable:
    def test_copy_with_conflict(self, connected: FakeOctopusServer) -> None:
        connected.add_variable("Projects-2", "Conn", "existing")
        result = runner.invoke(
            app, ["copy-variable", "--from-project", "Web", "--to-project", "Api", "--no-color"]
        )
        assert result.exit_code == 0
        assert "WARNING: Variable 'Conn' already exists." in result.output
        assert "Copied 1 variable to project 'Api'." in result.stdout

    def test_copy_named_to_library_set(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(
            app,
            [
                "copy-variable",
                "--from-project",
                "Web",
                "--to-library-set",
                "Shared",
                "--name",
                "conn",
                "--no-color",
            ],
        )
        assert result.exit_code == 0
        variables = connected.variable_set("LibraryVariableSets-1")["Variables"]
        assert [v["Name"] for v in variables] == ["Conn"]

    def test_requires_target(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["copy-variable", "--from-project", "Web", "--no-color"])
        assert result.exit_code == 1
        assert "--to-project" in result.output


class TestRemoveVariable:
    def test_removes(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["remove-variable", "Web", "Conn", "--no-color"])
        assert result.exit_code == 0
        assert "Removed variable 'Conn' from project 'Web'." in result.stdout
        assert [v["Name"] for v in connected.variable_set("Projects-1")["Variables"]] == [
            "Password"
        ]

    def test_missing_variable_is_warning(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["remove-variable", "Web", "Nope", "--no-color"])
        assert result.exit_code == 0
        assert "WARNING: No variable with the name 'Nope'" in result.output

    def test_library_set_owner(self, connected: FakeOctopusServer) -> None:
        connected.add_variable("LibraryVariableSets-1", "Region", "eu")
        result = runner.invoke(
            app, ["remove-variable", "Shared", "Region", "--library-set", "--no-color"]
        )
        assert result.exit_code == 0
        assert connected.variable_set("LibraryVariableSets-1")["Variables"] == []


class TestRemoveProject:
    def test_by_name(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["remove-project", "Web", "Ghost", "--no-color"])
        assert result.exit_code == 0
        assert "WARNING: No project 'Ghost' was found." in result.output
        assert "Deleting project: Web" in result.stdout
        assert "Deleted 1 project." in result.stdout
        assert [p["Name"] for p in connected.collections["projects"]] == ["Api"]

    def test_by_id_in_given_order(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(
            app, ["remove-project", "--id", "Projects-2", "--id", "Projects-1", "--no-color"]
        )
        assert result.exit_code == 0
        assert "Deleted 2 projects." in result.stdout
        api = result.stdout.index("Deleting project: Api")
        web = result.stdout.index("Deleting project: Web")
        assert api < web
        assert [path for method, path in connected.calls if method == "DELETE"] == [
            "/api/projects/Projects-2",
            "/api/projects/Projects-1",
        ]

    def test_needs_names_or_ids(self, connected: FakeOctopusServer) -> None:
        result = runner.invoke(app, ["remove-project", "--no-color"])
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_server_error(self, connected: FakeOctopusServer) -> None:
        connected.fail(
            "DELETE", "/api/projects/Projects-1", OctopusApiError(500, "locked", url="/x")
        )
        result = runner.invoke(app, ["remove-project", "Web", "--no-color"])
        assert result.exit_code == 1
        assert "Server error: HTTP 500: locked" in result.output


class TestErrors:
    @patch("octo_cmdlets.config.load")
    def test_config_error_exits_1(self, mock_load: MagicMock) -> None:
        mock_load.side_effect = ConfigError("bad config")

        result = runner.invoke(app, ["get-environment", "--no-color"])
        assert result.exit_code == 1
        assert "Configuration error: bad config" in result.output

    def test_missing_credentials(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["get-project", "--config", str(tmp_path / "none.yaml"), "--no-color"]
        )
        assert result.exit_code == 1
        assert "Configuration error" in result.output
