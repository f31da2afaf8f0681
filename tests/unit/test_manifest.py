"""Tests for frankenstyle.toml loading."""

from pathlib import Path

import pytest

from frankenstyle.core.errors import ConfigError
from frankenstyle.core.manifest import BuildConfig, load_manifest, load_project_manifest
from frankenstyle.core.models import UrlStyle


def _write_manifest(root: Path, content: str) -> Path:
    path = root / "frankenstyle.toml"
    path.write_text(content)
    return path


class TestLoadManifest:
    def test_full_manifest(self, tmp_path: Path) -> None:
        path = _write_manifest(
            tmp_path,
            """
[project]
name = "myApp"
packages = "./node_packages"

[build]
output = "public"
stylesheet = "bundle.css"
whitelist = ["timeTravel", "delorean", "focus"]
cached = true
url_style = "helper"
workers = 4
cache_dir = ".frankenstyle/cache"
""",
        )

        manifest = load_manifest(path)

        assert manifest.name == "myApp"
        assert manifest.root == tmp_path
        assert manifest.packages_path == (tmp_path / "node_packages").resolve()
        assert manifest.output_path == (tmp_path / "public").resolve()
        assert manifest.build.stylesheet == "bundle.css"

        config = manifest.to_config()
        assert config.cached is True
        assert config.url_style is UrlStyle.HELPER
        assert config.whitelist == frozenset({"timeTravel", "delorean", "focus"})
        assert config.workers == 4
        assert config.cache_dir == (tmp_path / ".frankenstyle" / "cache").resolve()

    def test_defaults(self, tmp_path: Path) -> None:
        manifest = load_manifest(_write_manifest(tmp_path, ""))

        assert manifest.name == tmp_path.name
        assert manifest.build == BuildConfig()
        assert manifest.output_path is None

        config = manifest.to_config()
        assert config.cached is False
        assert config.url_style is UrlStyle.LITERAL
        assert config.whitelist is None
        assert config.workers == 1
        assert config.cache_dir is None

    def test_malformed_toml(self, tmp_path: Path) -> None:
        path = _write_manifest(tmp_path, "[build\n")

        with pytest.raises(ConfigError) as exc_info:
            load_manifest(path)

        assert str(path) in str(exc_info.value)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_manifest(tmp_path / "frankenstyle.toml")

    def test_undecodable_manifest(self, tmp_path: Path) -> None:
        path = tmp_path / "frankenstyle.toml"
        path.write_bytes(b'[project]\nname = "my\xffApp"\n')

        with pytest.raises(ConfigError, match="Failed to load manifest"):
            load_manifest(path)

    @pytest.mark.parametrize("value", ['"delorean"', '["delorean", 1]'])
    def test_whitelist_must_be_a_list_of_names(self, tmp_path: Path, value: str) -> None:
        path = _write_manifest(tmp_path, f"[build]\nwhitelist = {value}\n")

        with pytest.raises(ConfigError, match="whitelist must be a list of package names"):
            load_manifest(path)

    def test_unknown_url_style(self, tmp_path: Path) -> None:
        manifest = load_manifest(_write_manifest(tmp_path, '[build]\nurl_style = "inline"\n'))

        with pytest.raises(ConfigError, match="Invalid build configuration"):
            manifest.to_config()

    def test_non_positive_workers(self, tmp_path: Path) -> None:
        manifest = load_manifest(_write_manifest(tmp_path, "[build]\nworkers = 0\n"))

        with pytest.raises(ConfigError):
            manifest.to_config()


class TestLoadProjectManifest:
    def test_without_manifest_uses_defaults(self, tmp_path: Path) -> None:
        manifest = load_project_manifest(tmp_path)

        assert manifest.root == tmp_path
        assert manifest.packages_path == (tmp_path / "packages").resolve()

    def test_finds_manifest_in_project_root(self, tmp_path: Path) -> None:
        _write_manifest(tmp_path, '[project]\nname = "myApp"\n')
        assert load_project_manifest(tmp_path).name == "myApp"

    def test_explicit_path(self, tmp_path: Path) -> None:
        other = tmp_path / "config"
        other.mkdir()
        path = _write_manifest(other, '[project]\nname = "other"\n')

        manifest = load_project_manifest(tmp_path, path)

        assert manifest.name == "other"
        assert manifest.root == other
