"""Tests for configuration loading and validation"""
import json
from pathlib import Path

import pytest

from git_pj.config import Config, ConfigService, get_app_dir
from git_pj.constants import APP_DIR_NAME, APP_HOME_ENV, CONFIG_FILE_NAME
from git_pj.exceptions import ConfigError


class TestConfig:
    """Test Config validation."""

    def test_defaults(self):
        config = Config()
        assert len(config.roots) == 1
        assert config.layout == "host"
        assert config.with_host
        assert config.shell is None

    def test_roots_normalised_to_paths(self):
        config = Config(roots=["~/code", "/srv/src"])
        assert config.roots[0] == (Path.home() / "code").resolve()
        assert config.root == config.roots[0]
        assert config.roots[1] == Path("/srv/src").resolve()

    def test_relative_roots_made_absolute(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        config = Config(roots=["ws", "./nested/../other"])

        assert config.roots == [temp_dir / "ws", temp_dir / "other"]
        assert all(root.is_absolute() for root in config.roots)

    def test_empty_roots_rejected(self):
        with pytest.raises(ValueError):
            Config(roots=[])

    def test_invalid_layout_rejected(self):
        with pytest.raises(ValueError):
            Config(layout="nested")

    def test_flat_layout(self):
        assert not Config(layout="flat").with_host

    def test_get(self):
        config = Config(shell="/bin/zsh")
        assert config.get("shell") == "/bin/zsh"
        assert config.get("missing", "fallback") == "fallback"

    def test_from_dict_upgrades_single_root(self):
        config = Config.from_dict({"root": "/srv/src", "with_host": True})
        assert config.roots == [Path("/srv/src").resolve()]

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"roots": ["/a"], "colour": "blue"})
        assert config.roots == [Path("/a").resolve()]


class TestAppDir:
    """Test app directory resolution."""

    def test_env_override(self, monkeypatch, temp_dir):
        monkeypatch.setenv(APP_HOME_ENV, str(temp_dir))
        assert get_app_dir() == temp_dir

    def test_default(self, monkeypatch):
        monkeypatch.delenv(APP_HOME_ENV, raising=False)
        assert get_app_dir() == Path.home() / APP_DIR_NAME


class TestConfigService:
    """Test reading and writing the config file."""

    def test_first_load_writes_defaults(self, temp_dir):
        service = ConfigService(temp_dir)
        assert not service.exists()

        config = service.load()

        assert service.exists()
        assert config == Config()

    def test_save_and_load(self, temp_dir):
        service = ConfigService(temp_dir)
        service.save(Config(roots=[temp_dir / "a", temp_dir / "b"], layout="flat", shell="/bin/fish"))

        config = service.load()

        assert config.roots == [temp_dir / "a", temp_dir / "b"]
        assert config.layout == "flat"
        assert config.shell == "/bin/fish"

    def test_legacy_shape_rewritten(self, temp_dir):
        (temp_dir / CONFIG_FILE_NAME).write_text(json.dumps({"root": "/srv/src"}))

        config = ConfigService(temp_dir).load()

        assert config.roots == [Path("/srv/src").resolve()]
        data = json.loads((temp_dir / CONFIG_FILE_NAME).read_text())
        assert data["roots"] == [str(Path("/srv/src").resolve())]

    def test_relative_root_on_disk_loads_absolute(self, temp_dir, monkeypatch):
        (temp_dir / CONFIG_FILE_NAME).write_text(json.dumps({"roots": ["ws"]}))
        monkeypatch.chdir(temp_dir)

        config = ConfigService(temp_dir).load()

        assert config.roots == [temp_dir / "ws"]

    @pytest.mark.parametrize("content", [
        "{broken",
        json.dumps(["not", "an", "object"]),
        json.dumps({"roots": []}),
        json.dumps({"roots": ["/a"], "layout": "sideways"}),
        json.dumps({"roots": "/a"}),
    ])
    def test_invalid_files(self, temp_dir, content):
        (temp_dir / CONFIG_FILE_NAME).write_text(content)
        with pytest.raises(ConfigError):
            ConfigService(temp_dir).load()
