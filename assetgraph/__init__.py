"""assetgraph - directory loader node for incremental asset build graphs."""

from assetgraph.config import AssetGraphConfig, load_config
from assetgraph.freshness import ChangeWatcher
from assetgraph.graph import (
    AssetReference,
    AssetReferenceStreamManager,
    ChangeBatch,
    NodeData,
    NodeError,
)
from assetgraph.index import AssetDatabase
from assetgraph.interfaces import ContentIndex
from assetgraph.loader import DEFAULT_TARGET, LoaderNode, MultiTargetString

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_TARGET",
    "AssetDatabase",
    "AssetGraphConfig",
    "AssetReference",
    "AssetReferenceStreamManager",
    "ChangeBatch",
    "ChangeWatcher",
    "ContentIndex",
    "LoaderNode",
    "MultiTargetString",
    "NodeData",
    "NodeError",
    "load_config",
]
