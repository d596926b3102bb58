"""Tests for the golo command line."""

from pathlib import Path
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from golo_cli.errors import RepositoryNotFoundError
from golo_cli.main import cli
from golo_cli.resolution import cache_path
from golo_cli.resolution import scope_key


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def in_project(project_root, monkeypatch):
    monkeypatch.chdir(project_root)
    return project_root.resolve()


def test_help(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "build" in result.output
    assert "list" in result.output
    assert "cache" in result.output


class TestCachePath:
    def test_prints_derived_directory(self, runner, in_project):
        result = runner.invoke(cli, ["cache", "path", "github.com/acme/lib", "rev", "4f2a9c1"])

        expected = cache_path(in_project, scope_key("github.com/acme/lib", "rev", "4f2a9c1"))
        assert result.exit_code == 0
        # Long paths may be folded across lines.
        assert str(expected) in "".join(result.output.split())
        assert "not populated yet" in result.output

    def test_existing_directory(self, runner, in_project):
        cache_path(in_project, scope_key("github.com/acme/lib", "rev", "4f2a9c1")).mkdir(parents=True)

        result = runner.invoke(cli, ["cache", "path", "github.com/acme/lib", "rev", "4f2a9c1"])

        assert result.exit_code == 0
        assert "Status: exists" in result.output

    def test_outside_repository(self, runner, tmp_path):
        with patch("golo_cli.commands.cache.detect", side_effect=RepositoryNotFoundError(tmp_path)):
            result = runner.invoke(cli, ["cache", "path", "a", "rev", "b"])

        assert result.exit_code == 1
        assert "fatal:" in result.output


class TestCacheList:
    def test_no_pins(self, runner, in_project):
        result = runner.invoke(cli, ["cache", "list"])
        assert result.exit_code == 0
        assert "No pins configured" in result.output

    def test_lists_pins(self, runner, in_project):
        settings = in_project / ".golo" / "settings.yaml"
        settings.parent.mkdir(parents=True)
        settings.write_text(yaml.safe_dump({"pins": [{"prefix": "github.com/acme/lib", "arg": "4f2a9c1"}]}))

        result = runner.invoke(cli, ["cache", "list"])

        assert result.exit_code == 0
        assert "github.com/acme/lib" in result.output
        assert "missing" in result.output

    def test_invalid_settings(self, runner, in_project):
        settings = in_project / ".golo" / "settings.yaml"
        settings.parent.mkdir(parents=True)
        settings.write_text("pins: [{prefix: ''}]\n")

        result = runner.invoke(cli, ["cache", "list"])

        assert result.exit_code == 1
        assert "fatal:" in result.output


class TestList:
    def test_lists_project_packages(self, runner, in_project, context, go_file, monkeypatch):
        monkeypatch.setenv("GOROOT", str(context.goroot))
        go_file(in_project, "main.go", "main", imports=["fmt"])
        go_file(in_project / "util", "util.go", "util")

        result = runner.invoke(cli, ["list", "--package", "example.com/app"])

        assert result.exit_code == 0, result.output
        assert "example.com/app/util" in result.output
        assert "std" not in result.output
        assert "2 packages" in result.output

    def test_lists_dependencies(self, runner, in_project, context, go_file, monkeypatch):
        monkeypatch.setenv("GOROOT", str(context.goroot))
        go_file(in_project, "main.go", "main", imports=["fmt"])

        result = runner.invoke(cli, ["list", "--package", "example.com/app", "--deps"])

        assert result.exit_code == 0, result.output
        assert "errors" in result.output
        assert "std" in result.output
        assert "4 packages" in result.output

    def test_unresolvable_import_is_fatal(self, runner, in_project, context, go_file, monkeypatch):
        monkeypatch.setenv("GOROOT", str(context.goroot))
        go_file(in_project, "main.go", "main", imports=["github.com/missing/pkg"])

        result = runner.invoke(cli, ["list", "--package", "example.com/app", "--deps"])

        assert result.exit_code == 1
        assert "fatal:" in result.output
        assert "github.com/missing/pkg" in result.output

    def test_group_options_apply_to_subcommand(self, runner, in_project, context, go_file, monkeypatch):
        monkeypatch.setenv("GOROOT", str(context.goroot))
        go_file(in_project, "main.go", "main", imports=["fmt"])

        result = runner.invoke(cli, ["--package", "example.com/app", "list"])

        assert result.exit_code == 0, result.output
        assert "example.com/app" in result.output
        assert "1 packages" in result.output

    def test_subcommand_option_wins_over_group(self, runner):
        with patch("golo_cli.commands.list.open_project", side_effect=RepositoryNotFoundError(Path("/x"))) as mock:
            runner.invoke(cli, ["--package", "example.com/outer", "list", "--package", "example.com/inner"])

        assert mock.call_args.kwargs["package"] == "example.com/inner"


class TestBuild:
    def test_no_repository_is_fatal(self, runner, tmp_path):
        with patch("golo_cli.project.detect", side_effect=RepositoryNotFoundError(tmp_path)):
            result = runner.invoke(cli, ["build"])

        assert result.exit_code == 1
        assert "fatal:" in result.output

    def test_default_command_is_build(self, runner):
        with patch("golo_cli.commands.build.open_project", side_effect=RepositoryNotFoundError(Path("/x"))) as mock:
            result = runner.invoke(cli, ["--package", "example.com/app"])

        assert result.exit_code == 1
        assert mock.call_args.kwargs["package"] == "example.com/app"

    def test_builds_commands(self, runner, in_project, context, go_file, monkeypatch):
        monkeypatch.setenv("GOROOT", str(context.goroot))
        go_file(in_project, "main.go", "main", imports=["fmt"])

        with patch("golo_cli.commands.build.ToolchainBuilder") as mock_builder:
            mock_builder.return_value.build_packages.return_value = MagicMock()
            result = runner.invoke(cli, ["build", "--package", "example.com/app"])

        assert result.exit_code == 0, result.output
        plan = mock_builder.return_value.build_packages.call_args.args[0]
        assert [bp.import_path for bp in plan] == ["errors", "io", "fmt", "example.com/app"]
        mock_builder.return_value.build_packages.return_value.assert_called_once_with()
        assert "example.com/app" in result.output

    def test_group_options_apply_to_build(self, runner):
        with (
            patch("golo_cli.commands.build.open_project", side_effect=RepositoryNotFoundError(Path("/x"))) as mock,
            patch("golo_cli.commands.build.init_logging") as mock_logging,
        ):
            result = runner.invoke(cli, ["--package", "example.com/app", "-v", "build"])

        assert result.exit_code == 1
        assert mock.call_args.kwargs["package"] == "example.com/app"
        mock_logging.assert_called_once_with(verbose=True)
