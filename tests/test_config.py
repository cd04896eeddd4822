"""Tests for assetgraph.config — models and YAML loader."""

import os
import pytest
from unittest.mock import patch
from pydantic import ValidationError

from assetgraph.config.models import (
    AssetGraphConfig,
    IndexConfig,
    LoaderConfig,
    ProjectConfig,
    WatchConfig,
)
from assetgraph.config.loader import (
    DEFAULT_CONFIG_TEMPLATE,
    ConfigError,
    _expand_env_vars,
    load_config,
)


# ── AssetGraphConfig defaults ──────────────────────────────────────


class TestAssetGraphConfigDefaults:
    def test_default_log_level(self, sample_config):
        assert sample_config.log_level == "info"

    def test_default_log_format(self, sample_config):
        assert sample_config.log_format == "text"

    def test_default_assets_dir(self, sample_config):
        assert sample_config.project.assets_dir == "Assets"

    def test_default_load_path_is_asset_root(self, sample_config):
        assert sample_config.loader.load_path == ""

    def test_default_empty_path_policy(self, sample_config):
        assert sample_config.loader.empty_path_policy == "allow"


# ── Individual config model validations ─────────────────────────────


class TestProjectConfig:
    def test_defaults(self):
        cfg = ProjectConfig()
        assert cfg.root == "."
        assert cfg.state_dir == ".assetgraph"


class TestIndexConfig:
    def test_defaults(self):
        cfg = IndexConfig()
        assert ".meta" in cfg.config_suffixes
        assert ".assetgraph" in cfg.config_dirs
        assert ".cs" in cfg.unloadable_suffixes
        assert ".git" in cfg.ignore_patterns

    def test_lists_not_shared(self):
        a = IndexConfig()
        b = IndexConfig()
        a.config_suffixes.append(".x")
        assert ".x" not in b.config_suffixes


class TestLoaderConfig:
    def test_invalid_policy_rejected(self):
        with pytest.raises(ValidationError):
            LoaderConfig(empty_path_policy="ignore")

    def test_targets(self):
        cfg = LoaderConfig(load_path="Scene", targets={"ios": "Scene/Mobile"})
        assert cfg.targets["ios"] == "Scene/Mobile"


class TestWatchConfig:
    def test_debounce_must_be_positive(self):
        with pytest.raises(ValidationError):
            WatchConfig(debounce_seconds=0)

    def test_poll_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            WatchConfig(poll_interval=-1)


class TestInvalidLevels:
    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            AssetGraphConfig(log_level="verbose")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            AssetGraphConfig(log_format="xml")


# ── Env var expansion ───────────────────────────────────────────────


class TestExpandEnvVars:
    def test_expands_string(self):
        with patch.dict(os.environ, {"ASSET_ROOT": "/work/game"}):
            assert _expand_env_vars("${ASSET_ROOT}/Assets") == "/work/game/Assets"

    def test_missing_var_becomes_empty(self):
        with patch.dict(os.environ, {}, clear=True):
            assert _expand_env_vars("${NOPE}") == ""

    def test_nested(self):
        with patch.dict(os.environ, {"SUB": "Scene"}):
            result = _expand_env_vars({"loader": {"load_path": "${SUB}", "x": ["${SUB}", 1]}})
        assert result == {"loader": {"load_path": "Scene", "x": ["Scene", 1]}}

    def test_non_strings_untouched(self):
        assert _expand_env_vars(42) == 42


# ── load_config ─────────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_when_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        config = load_config()
        assert config.log_level == "info"

    def test_cli_path(self, tmp_path):
        cfg_file = tmp_path / "custom.yaml"
        cfg_file.write_text("loader:\n  load_path: Scene\nlog_level: debug\n")
        config = load_config(str(cfg_file))
        assert config.loader.load_path == "Scene"
        assert config.log_level == "debug"

    def test_project_local(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "assetgraph.yaml").write_text("project:\n  assets_dir: Content\n")
        config = load_config()
        assert config.project.assets_dir == "Content"

    def test_env_expansion_in_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOAD_DIR", "Textures")
        cfg_file = tmp_path / "c.yaml"
        cfg_file.write_text('loader:\n  load_path: "${LOAD_DIR}"\n')
        assert load_config(str(cfg_file)).loader.load_path == "Textures"

    def test_empty_file_falls_through(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        cfg_file = tmp_path / "empty.yaml"
        cfg_file.write_text("")
        assert load_config(str(cfg_file)) == AssetGraphConfig()

    def test_invalid_yaml(self, tmp_path):
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text("loader: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(cfg_file))

    def test_invalid_values(self, tmp_path):
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text("log_level: loud\n")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(str(cfg_file))

    def test_non_mapping_rejected(self, tmp_path):
        cfg_file = tmp_path / "list.yaml"
        cfg_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(str(cfg_file))

    def test_config_error_is_value_error(self, tmp_path):
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text("log_level: loud\n")
        with pytest.raises(ValueError):
            load_config(str(cfg_file))

    def test_default_template_is_valid(self, tmp_path):
        cfg_file = tmp_path / "assetgraph.yaml"
        cfg_file.write_text(DEFAULT_CONFIG_TEMPLATE)
        config = load_config(str(cfg_file))
        assert config == AssetGraphConfig()
