"""Tests for CLI main module."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from src.cli.main import apply_overrides, main, scan
from src.core.config.settings import Settings
from src.models.project import Coordinates, ProjectInfo, ProjectsDetails, StatusCode


@pytest.fixture
def quiet_config(temp_dir: Path) -> Path:
    """Config file that keeps log output off the captured stdout."""
    config = temp_dir / "depresolve.yaml"
    config.write_text(
        "logging:\n"
        "  level: CRITICAL\n"
        "  use_rich: false\n"
        f"workspace:\n  base_dir: {temp_dir / 'workspaces'}\n"
    )
    return config


class TestMainCommand:
    """Test main CLI command."""

    def test_version_flag(self) -> None:
        """Test version flag."""
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "depresolve version 0.1.0" in result.output

    def test_help_without_command(self) -> None:
        """Test that a bare invocation prints help."""
        runner = CliRunner()
        result = runner.invoke(main, [])
        assert result.exit_code == 0
        assert "scan" in result.output


class TestScanCommand:
    """Test scan subcommand."""

    def test_json_output(self, quiet_config: Path, npm_project: Path) -> None:
        """Test scanning a local directory prints JSON and exits 0."""
        runner = CliRunner()
        result = runner.invoke(
            scan,
            ["-c", str(quiet_config), "-d", str(npm_project), "--project-name", "web", "--json"],
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "SUCCESS"
        assert payload["status_code"] == 0
        [project] = payload["projects"]
        assert project["coordinates"] == {"namespace": None, "name": "web", "version": None}
        assert sorted(d["name"] for d in project["dependencies"]) == ["jest", "react"]

    def test_missing_identity_exits_with_error(self, quiet_config: Path, npm_project: Path) -> None:
        """Test a configuration problem becomes exit code 1."""
        runner = CliRunner()
        result = runner.invoke(scan, ["-c", str(quiet_config), "-d", str(npm_project), "--json"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["status"] == "ERROR"
        assert "Missing project identity" in payload["details"]
        assert payload["projects"] == []

    def test_project_per_folder(self, quiet_config: Path, temp_dir: Path) -> None:
        """Test one project per sub-folder named after it."""
        root = temp_dir / "services"
        for name in ("api", "web"):
            (root / name).mkdir(parents=True)
            (root / name / "requirements.txt").write_text("flask==2.3.0\n")

        runner = CliRunner()
        result = runner.invoke(
            scan,
            [
                "-c",
                str(quiet_config),
                "-d",
                str(root),
                "--project-per-folder",
                "--project-version",
                "2.0",
                "--json",
            ],
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [p["name"] for p in payload["projects"]] == ["api:2.0", "web:2.0"]

    def test_nothing_to_scan(self, quiet_config: Path) -> None:
        """Test that no source at all is a usage error."""
        runner = CliRunner()
        result = runner.invoke(scan, ["-c", str(quiet_config), "--project-name", "x"])

        assert result.exit_code == 2
        assert "Nothing to scan" in result.output

    def test_invalid_config(self, temp_dir: Path) -> None:
        """Test a broken config file exits with -1."""
        config = temp_dir / "broken.yaml"
        config.write_text("logging: [unclosed\n")

        runner = CliRunner()
        result = runner.invoke(scan, ["-c", str(config), "-d", str(temp_dir)])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output

    def test_invalid_config_value(self, temp_dir: Path) -> None:
        """Test a config value failing validation exits with -1."""
        config = temp_dir / "bad.yaml"
        config.write_text("logging:\n  level: LOUD\n")

        runner = CliRunner()
        result = runner.invoke(scan, ["-c", str(config), "-d", str(temp_dir)])

        assert result.exit_code == 1

    @patch("src.cli.main.FileSystemAgent")
    def test_prep_step_failure_table(
        self, mock_agent_cls: MagicMock, quiet_config: Path, npm_project: Path
    ) -> None:
        """Test the table output and exit code 6."""
        mock_agent_cls.return_value.create_projects.return_value = ProjectsDetails.success_result(
            [ProjectInfo(coordinates=Coordinates(name="web", version="1.0"))],
            status_code=StatusCode.PREP_STEP_FAILURE,
        )

        runner = CliRunner()
        result = runner.invoke(
            scan,
            ["-c", str(quiet_config), "-d", str(npm_project), "--project-name", "web"],
        )

        assert result.exit_code == 6
        assert "PREP_STEP_FAILURE" in result.output
        assert "web:1.0" in result.output

    @patch("src.cli.main.FileSystemAgent")
    def test_scm_flags_reach_agent(
        self, mock_agent_cls: MagicMock, quiet_config: Path
    ) -> None:
        """Test SCM options are passed into the agent settings."""
        mock_agent_cls.return_value.create_projects.return_value = ProjectsDetails.success_result([])

        runner = CliRunner()
        result = runner.invoke(
            scan,
            [
                "-c",
                str(quiet_config),
                "--scm-type",
                "GitHub",
                "--scm-url",
                "https://github.com/org/app.git",
                "--tag",
                "v1.2",
                "--no-npm-install",
                "--npm-timeout",
                "5",
                "--project-token",
                "TKN",
                "--json",
            ],
        )

        assert result.exit_code == 0
        settings, dirs = mock_agent_cls.call_args.args
        assert dirs == []
        assert settings.scm.type == "github"
        assert settings.scm.url == "https://github.com/org/app.git"
        assert settings.scm.tag == "v1.2"
        assert settings.scm.npm_install is False
        assert settings.scm.npm_install_timeout_minutes == 5
        assert settings.agent.error is None


class TestApplyOverrides:
    """Tests for apply_overrides."""

    def test_none_values_ignored(self) -> None:
        """Test options not given keep the loaded values."""
        settings = Settings()
        base = settings.model_copy(
            update={"request": settings.request.model_copy(update={"project_name": "from-file"})}
        )

        updated = apply_overrides(
            base,
            request={"project_name": None, "project_version": "9"},
            scm={},
            agent={},
        )

        assert updated.request.project_name == "from-file"
        assert updated.request.project_version == "9"
        assert base.request.project_version is None

    def test_validation_errors_folded(self) -> None:
        """Test configuration problems end up in agent.error."""
        updated = apply_overrides(
            Settings(),
            request={},
            scm={"url": "https://host/repo.git"},
            agent={"error": "earlier problem"},
        )

        errors = updated.agent.error.split("; ")
        assert errors[0] == "earlier problem"
        assert any("Missing project identity" in e for e in errors)
        assert any("SCM type is required" in e for e in errors)

    def test_valid_settings_untouched(self) -> None:
        """Test usable settings leave agent.error empty."""
        updated = apply_overrides(
            Settings(), request={"project_token": "TKN"}, scm={}, agent={}
        )

        assert updated.agent.error is None


@pytest.mark.parametrize(
    ("status_code", "exit_code"),
    [
        (StatusCode.SUCCESS, 0),
        (StatusCode.ERROR, 1),
        (StatusCode.PREP_STEP_FAILURE, 6),
    ],
)
def test_status_exit_codes_are_unsigned(status_code: StatusCode, exit_code: int) -> None:
    """Test status codes map to exit statuses a shell reports unchanged."""
    assert status_code.exit_code == exit_code
