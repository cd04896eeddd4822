"""Path-based classification rules for the asset index."""

from __future__ import annotations

from pathlib import PurePosixPath

from assetgraph.config.models import IndexConfig


def _matches_any(path: PurePosixPath, patterns: set[str] | list[str]) -> bool:
    """Check whether any component of *path* matches one of *patterns*."""
    return any(part in patterns for part in path.parts)


def is_config_artifact(path: str, config: IndexConfig) -> bool:
    """True for files that belong to the build system's own metadata.

    A path is a configuration artifact when it lives under one of the
    configured settings directories or ends with a configuration suffix.
    """
    p = PurePosixPath(path)
    if _matches_any(p, config.config_dirs):
        return True
    return any(p.name.endswith(suffix) for suffix in config.config_suffixes)


def is_loadable(path: str, config: IndexConfig) -> bool:
    name = PurePosixPath(path).name.lower()
    return not any(name.endswith(suffix.lower()) for suffix in config.unloadable_suffixes)


def asset_type_for(path: str, is_folder: bool = False) -> str:
    """Short type label derived from the file extension."""
    if is_folder:
        return "folder"
    suffix = PurePosixPath(path).suffix.lower()
    return suffix[1:] if suffix else "asset"
