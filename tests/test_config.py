"""
Tests for configuration — settings file loading and path resolution.
"""

import textwrap
from pathlib import Path

import pytest

from zedext.core.config.loader import ConfigError, Settings, find_config_file, load_settings
from zedext.core.config.paths import ExtensionPaths, UnsupportedPlatformError, resolve_paths
from zedext.core.errors import InvalidExtensionIdError


# ── Settings ───────────────────────────────────────────────────────


class TestLoadSettings:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("ZEDEXT_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        settings = load_settings()
        assert settings == Settings()
        assert settings.api_base == "https://api.zed.dev"
        assert settings.max_schema_version == 1
        assert settings.retry.max_retries == 5

    def test_full_file(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text(textwrap.dedent("""\
            api_base: http://localhost:8080
            max_schema_version: 2
            timeout: 5
            extensions_dir: /opt/zed/extensions
            retry:
              max_retries: 2
              base_delay: 0.5
              max_delay: 4
        """))
        settings = load_settings(path)
        assert settings.api_base == "http://localhost:8080"
        assert settings.timeout == 5
        assert settings.extensions_dir == "/opt/zed/extensions"
        assert settings.retry.max_retries == 2
        assert settings.retry.base_delay == 0.5

    def test_empty_file_is_defaults(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("api_base: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_schema_violation(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("timeout: -1\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)


class TestFindConfigFile:
    def test_env_var_wins(self, tmp_path: Path):
        found = find_config_file({"ZEDEXT_CONFIG": str(tmp_path / "x.yml"), "XDG_CONFIG_HOME": str(tmp_path)})
        assert found == tmp_path / "x.yml"

    def test_xdg_location(self, tmp_path: Path):
        target = tmp_path / "zedext" / "config.yml"
        target.parent.mkdir()
        target.write_text("timeout: 3\n")
        assert find_config_file({"XDG_CONFIG_HOME": str(tmp_path)}) == target

    def test_nothing_found(self, tmp_path: Path):
        assert find_config_file({"XDG_CONFIG_HOME": str(tmp_path)}) is None


# ── Paths ──────────────────────────────────────────────────────────


class TestResolvePaths:
    def test_macos(self):
        paths = resolve_paths(env={"HOME": "/Users/jane"}, system="Darwin")
        assert paths.base == Path("/Users/jane/Library/Application Support/Zed/extensions")
        assert paths.installed == paths.base / "installed"
        assert paths.index == paths.base / "index.json"

    def test_linux_xdg(self):
        paths = resolve_paths(env={"HOME": "/home/jane", "XDG_DATA_HOME": "/data"}, system="Linux")
        assert paths.base == Path("/data/zed/extensions")

    def test_linux_default(self):
        paths = resolve_paths(env={"HOME": "/home/jane"}, system="Linux")
        assert paths.base == Path("/home/jane/.local/share/zed/extensions")

    def test_unsupported_platform(self):
        with pytest.raises(UnsupportedPlatformError, match="unsupported platform: Windows"):
            resolve_paths(env={"HOME": "C:/Users/jane"}, system="Windows")

    def test_unsupported_platform_is_config_error(self):
        with pytest.raises(ConfigError):
            resolve_paths(env={}, system="Plan9")

    def test_override(self, tmp_path: Path):
        paths = resolve_paths(override=tmp_path, system="Windows")
        assert paths == ExtensionPaths.from_base(tmp_path)

    def test_extension_dir(self, tmp_path: Path):
        paths = ExtensionPaths.from_base(tmp_path)
        assert paths.extension_dir("html") == tmp_path / "installed" / "html"

    @pytest.mark.parametrize("bad_id", ["", ".", "..", "/etc", "../html", "a\\b"])
    def test_extension_dir_rejects_unsafe_ids(self, tmp_path: Path, bad_id):
        paths = ExtensionPaths.from_base(tmp_path)
        with pytest.raises(InvalidExtensionIdError, match="invalid extension id"):
            paths.extension_dir(bad_id)
