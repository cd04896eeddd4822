"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import AssetGraphConfig


class ConfigError(ValueError):
    """Raised when a config file exists but cannot be parsed or validated."""


def load_config(cli_path: str | None = None) -> AssetGraphConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./assetgraph.yaml"),
        Path.home() / ".assetgraph" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ConfigError(f"Invalid config in {path}: expected a mapping")
                raw = _expand_env_vars(raw)
                return AssetGraphConfig(**raw)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ConfigError(f"Invalid config in {path}: {e}") from e

    return AssetGraphConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `assetgraph config init`
DEFAULT_CONFIG_TEMPLATE = """\
# assetgraph.yaml

# Project layout
project:
  root: "."
  assets_dir: "Assets"         # asset root, all asset paths start with this name
  state_dir: ".assetgraph"     # guid index and loader state

# Content index
index:
  config_dirs: [".assetgraph", "AssetGraphSettings"]
  config_suffixes: [".meta", ".config", ".graph.yaml"]
  unloadable_suffixes: [".cs", ".js", ".dll", ".asmdef", ".py"]
  # ignore_patterns: [.git, __pycache__, .DS_Store, Thumbs.db]

# Load From Directory
loader:
  load_path: ""                # relative to the asset root, empty loads everything
  # targets:
  #   ios: "Textures/Mobile"
  #   android: "Textures/Mobile"
  empty_path_policy: "allow"   # allow | error

# File watching
watch:
  debounce_seconds: 0.5
  poll_interval: 2.0

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
