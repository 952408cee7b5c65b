"""Tests for NPM dependency scanner."""

import json
from pathlib import Path

import pytest

from src.layers.dependency_scanner.npm_scanner import NpmScanner
from src.models.dependency import Ecosystem


class TestNpmScanner:
    """Tests for NpmScanner."""

    @pytest.fixture
    def scanner(self):
        """Create scanner instance."""
        return NpmScanner()

    def test_ecosystem(self, scanner):
        """Test scanner ecosystem."""
        assert scanner.ecosystem == Ecosystem.NPM

    def test_can_scan(self, scanner):
        """Test can_scan for supported and other files."""
        assert scanner.can_scan(Path("package.json")) is True
        assert scanner.can_scan(Path("package-lock.json")) is True
        assert scanner.can_scan(Path("other.txt")) is False

    def test_scan_empty_directory(self, scanner, temp_dir: Path):
        """Test scanning empty directory."""
        assert scanner.scan(temp_dir) == []

    def test_scan_package_json_sections(self, scanner, temp_dir: Path):
        """Test dependencies, devDependencies and optionalDependencies."""
        (temp_dir / "package.json").write_text(
            json.dumps(
                {
                    "dependencies": {"express": "^4.18.0", "lodash": "4.17.21"},
                    "devDependencies": {"jest": "~29.7.0"},
                    "optionalDependencies": {"fsevents": ">=2.3.0"},
                }
            )
        )

        deps = {d.name: d for d in scanner.scan(temp_dir)}

        assert deps["express"].version == "4.18.0"
        assert deps["express"].is_direct is True
        assert deps["lodash"].version == "4.17.21"
        assert deps["jest"].version == "29.7.0"
        assert deps["jest"].is_dev is True
        assert deps["fsevents"].is_optional is True

    def test_local_references_skipped(self, scanner, temp_dir: Path):
        """Test file: and link: dependencies are ignored."""
        (temp_dir / "package.json").write_text(
            json.dumps({"dependencies": {"shared": "file:../shared", "ui": "link:./ui", "a": "1.0.0"}})
        )

        assert [d.name for d in scanner.scan(temp_dir)] == ["a"]

    @pytest.mark.parametrize(
        ("declared", "expected"),
        [
            ("^1.2.3", "1.2.3"),
            ("~1.2.3", "1.2.3"),
            (">=1.0.0 <2.0.0", "1.0.0"),
            ("1.x || 2.x", "1.x"),
            ("*", "*"),
            ("", "*"),
        ],
    )
    def test_clean_version(self, scanner, declared: str, expected: str):
        """Test version range reduction."""
        assert scanner._clean_version(declared) == expected

    def test_package_lock_v2(self, scanner, temp_dir: Path):
        """Test lockfile v2 packages section."""
        (temp_dir / "package-lock.json").write_text(
            json.dumps(
                {
                    "lockfileVersion": 3,
                    "packages": {
                        "": {"name": "root", "version": "1.0.0"},
                        "node_modules/express": {"version": "4.18.2"},
                        "node_modules/express/node_modules/debug": {"version": "2.6.9"},
                        "node_modules/@types/node": {"version": "20.1.0", "dev": True},
                        "node_modules/local": {"link": True, "resolved": "../local"},
                    },
                }
            )
        )

        deps = {d.name: d for d in scanner.scan(temp_dir)}

        assert set(deps) == {"express", "debug", "@types/node"}
        assert deps["debug"].version == "2.6.9"
        assert deps["@types/node"].is_dev is True
        assert all(not d.is_direct for d in deps.values())

    def test_package_lock_v1(self, scanner, temp_dir: Path):
        """Test lockfile v1 nested dependencies."""
        (temp_dir / "package-lock.json").write_text(
            json.dumps(
                {
                    "lockfileVersion": 1,
                    "dependencies": {
                        "express": {
                            "version": "4.17.1",
                            "dependencies": {"qs": {"version": "6.7.0"}},
                        }
                    },
                }
            )
        )

        deps = {d.name: d.version for d in scanner.scan(temp_dir)}

        assert deps == {"express": "4.17.1", "qs": "6.7.0"}

    def test_installed_node_modules_without_lock(self, scanner, temp_dir: Path):
        """Test that node_modules is read when there is no lock file."""
        (temp_dir / "package.json").write_text(json.dumps({"dependencies": {"react": "^18.0.0"}}))
        react = temp_dir / "node_modules" / "react"
        react.mkdir(parents=True)
        (react / "package.json").write_text(json.dumps({"name": "react", "version": "18.2.0"}))
        scoped = temp_dir / "node_modules" / "@babel" / "core"
        scoped.mkdir(parents=True)
        (scoped / "package.json").write_text(json.dumps({"name": "@babel/core", "version": "7.22.0"}))

        deps = {(d.name, d.version, d.is_direct) for d in scanner.scan(temp_dir)}

        assert ("react", "18.0.0", True) in deps
        assert ("react", "18.2.0", False) in deps
        assert ("@babel/core", "7.22.0", False) in deps

    def test_node_modules_manifests_not_scanned_as_projects(self, scanner, temp_dir: Path):
        """Test that package.json files inside node_modules are not projects."""
        nested = temp_dir / "node_modules" / "left-pad"
        nested.mkdir(parents=True)
        (nested / "package.json").write_text(
            json.dumps({"name": "left-pad", "version": "1.3.0", "dependencies": {"x": "1.0.0"}})
        )

        assert scanner.find_files(temp_dir) == []

    def test_invalid_json_ignored(self, scanner, temp_dir: Path):
        """Test that malformed package.json yields nothing."""
        (temp_dir / "package.json").write_text("{invalid")

        assert scanner.scan(temp_dir) == []
