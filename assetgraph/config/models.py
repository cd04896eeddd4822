from pydantic import BaseModel, Field
from typing import Literal


class ProjectConfig(BaseModel):
    root: str = "."
    assets_dir: str = "Assets"
    state_dir: str = ".assetgraph"


class IndexConfig(BaseModel):
    config_dirs: list[str] = Field(default_factory=lambda: [".assetgraph", "AssetGraphSettings"])
    config_suffixes: list[str] = Field(default_factory=lambda: [".meta", ".config", ".graph.yaml"])
    unloadable_suffixes: list[str] = Field(default_factory=lambda: [
        ".cs", ".js", ".dll", ".asmdef", ".py"
    ])
    ignore_patterns: list[str] = Field(default_factory=lambda: [
        ".git", "__pycache__", ".DS_Store", "Thumbs.db"
    ])


class LoaderConfig(BaseModel):
    load_path: str = ""
    targets: dict[str, str] = Field(default_factory=dict)
    empty_path_policy: Literal["allow", "error"] = "allow"


class WatchConfig(BaseModel):
    debounce_seconds: float = Field(default=0.5, gt=0)
    poll_interval: float = Field(default=2.0, gt=0)


class AssetGraphConfig(BaseModel):
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
