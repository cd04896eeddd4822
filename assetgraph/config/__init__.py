from .loader import ConfigError, load_config
from .models import (
    AssetGraphConfig,
    IndexConfig,
    LoaderConfig,
    ProjectConfig,
    WatchConfig,
)

__all__ = [
    "AssetGraphConfig",
    "ConfigError",
    "IndexConfig",
    "LoaderConfig",
    "ProjectConfig",
    "WatchConfig",
    "load_config",
]
