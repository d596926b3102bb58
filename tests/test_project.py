"""Tests for project setup: prefix choice, pins and package origins."""

from unittest.mock import patch

import pytest
import yaml

from golo_cli.errors import RemoteURLError
from golo_cli.errors import RepositoryNotFoundError
from golo_cli.packages import Package
from golo_cli.project import choose_prefix
from golo_cli.project import open_project
from golo_cli.resolution import PinnedCacheResolver
from golo_cli.resolution import cache_path
from golo_cli.resolution import scope_key
from golo_cli.settings import ProjectSettings
from golo_cli.vcs import Repository


def write_settings(root, data):
    path = root / ".golo" / "settings.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data))


class TestChoosePrefix:
    def test_override_wins(self, tmp_path):
        repo = Repository(root=tmp_path, kind="git")
        settings = ProjectSettings(package="example.com/configured")
        assert choose_prefix(repo, settings, "example.com/override") == "example.com/override"

    def test_settings_before_remote(self, tmp_path):
        repo = Repository(root=tmp_path, kind="git")
        with patch.object(Repository, "remote") as mock_remote:
            assert choose_prefix(repo, ProjectSettings(package="example.com/configured"), None) == (
                "example.com/configured"
            )
        mock_remote.assert_not_called()

    def test_guessed_from_remote(self, tmp_path):
        repo = Repository(root=tmp_path, kind="git")
        with patch.object(Repository, "remote", return_value="git@github.com:acme/widget.git"):
            assert choose_prefix(repo, ProjectSettings(), None) == "github.com/acme/widget"

    def test_no_remote(self, tmp_path):
        repo = Repository(root=tmp_path, kind="bzr")
        with pytest.raises(RemoteURLError):
            choose_prefix(repo, ProjectSettings(), None)


class TestOpenProject:
    def test_defaults_output_directories(self, project_root, context):
        project = open_project(project_root, package="example.com/app", context=context)

        assert project.root == project_root.resolve()
        assert project.prefix == "example.com/app"
        assert project.context.pkgdir == project.root / ".golo" / "pkg"
        assert project.context.bindir == project.root

    def test_from_subdirectory(self, project_root, context):
        nested = project_root / "cmd" / "tool"
        nested.mkdir(parents=True)
        project = open_project(nested, package="example.com/app", context=context)
        assert project.root == project_root.resolve()

    def test_package_from_settings(self, project_root, context):
        write_settings(project_root, {"package": "example.com/configured"})
        project = open_project(project_root, context=context)
        assert project.prefix == "example.com/configured"

    def test_tags_from_settings_feed_the_context(self, project_root, goroot, monkeypatch):
        monkeypatch.setenv("GOROOT", str(goroot))
        write_settings(project_root, {"package": "example.com/app", "tags": ["netgo", "integration"]})
        project = open_project(project_root)
        assert project.context.build_tags == ("netgo", "integration")
        assert project.context.goroot == goroot

    def test_outside_repository(self, tmp_path, context):
        with patch("golo_cli.project.detect", side_effect=RepositoryNotFoundError(tmp_path)):
            with pytest.raises(RepositoryNotFoundError):
                open_project(tmp_path, package="example.com/app", context=context)


class TestProjectResolution:
    def test_pins_are_checked_in_listed_order(self, project_root, context):
        write_settings(
            project_root,
            {
                "package": "example.com/app",
                "pins": [
                    {"prefix": "github.com/acme/lib/v2", "arg": "bbb"},
                    {"prefix": "github.com/acme/lib", "arg": "aaa"},
                ],
            },
        )
        project = open_project(project_root, context=context)

        outer = project.resolver()
        first = outer.resolvers[0]
        inner = outer.resolvers[1]
        assert isinstance(first, PinnedCacheResolver)
        assert first.prefix == "github.com/acme/lib/v2"
        assert isinstance(inner.resolvers[0], PinnedCacheResolver)
        assert inner.resolvers[0].prefix == "github.com/acme/lib"

    def test_full_load(self, project_root, context, go_file):
        go_file(project_root, "main.go", "main", imports=["fmt", "example.com/app/util", "github.com/acme/log"])
        go_file(project_root / "util", "util.go", "util", imports=["errors"])
        go_file(project_root / "vendor" / "github.com" / "acme" / "log", "log.go", "log", imports=["io"])

        project = open_project(project_root, package="example.com/app", context=context)
        srcs = project.load_sources()
        assert [p.import_path for p in srcs] == ["example.com/app/util", "example.com/app"]

        pkgs = project.load_dependencies(srcs)
        assert [p.import_path for p in pkgs] == [
            "example.com/app/util",
            "example.com/app",
            "errors",
            "fmt",
            "io",
            "github.com/acme/log",
        ]
        origins = {p.import_path: project.origin(p) for p in pkgs}
        assert origins == {
            "example.com/app/util": "project",
            "example.com/app": "project",
            "errors": "std",
            "fmt": "std",
            "io": "std",
            "github.com/acme/log": "vendor",
        }

    def test_pinned_origin(self, project_root, context, go_file):
        write_settings(
            project_root,
            {"package": "example.com/app", "pins": [{"prefix": "github.com/acme/lib", "kind": "tag", "arg": "v1"}]},
        )
        go_file(project_root, "main.go", "main", imports=["github.com/acme/lib"])
        snapshot = cache_path(project_root.resolve(), scope_key("github.com/acme/lib", "tag", "v1"))
        go_file(snapshot / "github.com" / "acme" / "lib", "lib.go", "lib")

        project = open_project(project_root, context=context)
        pkgs = project.load_dependencies(project.load_sources())

        assert pkgs[-1].import_path == "github.com/acme/lib"
        assert pkgs[-1].dir == snapshot / "github.com" / "acme" / "lib"
        assert project.origin(pkgs[-1]) == "pinned"

    def test_origin_of_root_package(self, project_root, context):
        project = open_project(project_root, package="example.com/app", context=context)
        pkg = Package(import_path="example.com/app", dir=project.root, name="main")
        assert project.origin(pkg) == "project"
