"""Tests for prowl._cli — argument parsing and command dispatch."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from prowl._cli import _build_parser, main

from .conftest import write_files


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_routes_default_args(self) -> None:
        args = _build_parser().parse_args(["routes"])
        assert args.command == "routes"
        assert args.root == "."
        assert args.app_dir is None
        assert args.base_path is None
        assert args.json is False

    def test_routes_json(self) -> None:
        args = _build_parser().parse_args(["routes", "--json"])
        assert args.json is True

    def test_check_with_root(self) -> None:
        args = _build_parser().parse_args(["check", "my-app/", "--app-dir", "src/app"])
        assert args.command == "check"
        assert args.root == "my-app/"
        assert args.app_dir == "src/app"

    def test_watch_base_path(self) -> None:
        args = _build_parser().parse_args(["watch", "--base-path", "/api"])
        assert args.command == "watch"
        assert args.base_path == "/api"

    def test_no_command(self) -> None:
        args = _build_parser().parse_args([])
        assert args.command is None

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "prowl" in capsys.readouterr().out


class TestMain:
    """main() — exit codes and output streams."""

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "usage: prowl" in capsys.readouterr().out

    def test_check_clean(self, project: Path, app_dir: Path) -> None:
        write_files(app_dir, "page.tsx", "users/[id]/page.tsx")
        assert main(["check", str(project)]) == 0

    def test_check_with_errors(
        self,
        project: Path,
        app_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        write_files(app_dir, "users/page.tsx", "users/route.ts")
        assert main(["check", str(project)]) == 1
        err = capsys.readouterr().err
        assert "[conflict]" in err
        assert "users/page.tsx" in err

    def test_routes_table(
        self,
        project: Path,
        app_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        write_files(app_dir, "page.tsx", "shop/[[...cat]]/page.tsx")
        assert main(["routes", str(project), "--base-path", "/v1"]) == 0
        err = capsys.readouterr().err
        assert "/v1/shop/:cat{.*}" in err
        assert "/v1/shop " in err

    def test_routes_json(
        self,
        project: Path,
        app_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        write_files(app_dir, "users/[id]/page.tsx")
        assert main(["routes", str(project), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [r["url_pattern"] for r in data["routes"]] == ["/users/:id"]

    def test_app_dir_option(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        write_files(tmp_path / "pages", "about/page.tsx")
        assert main(["routes", str(tmp_path), "--app-dir", "pages", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["routes"][0]["url_pattern"] == "/about"

    def test_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        write_files(tmp_path / "routes", "contact/page.tsx")
        (tmp_path / "prowl.toml").write_text('[prowl]\napp_dir = "routes"\n')
        assert main(["routes", str(tmp_path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["routes"][0]["url_pattern"] == "/contact"

    def test_missing_app_dir(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["check", str(tmp_path)]) == 2
        assert "prowl: App directory does not exist" in capsys.readouterr().err

    def test_bad_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "prowl.yaml").write_text("base_path: api\n")
        assert main(["check", str(tmp_path)]) == 2
        assert "base_path" in capsys.readouterr().err
