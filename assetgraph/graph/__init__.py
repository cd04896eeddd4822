"""Graph-side models: node records, connections, asset references and change batches."""

from assetgraph.graph.models import (
    DEFAULT_GROUP_KEY,
    AssetClassification,
    AssetGroups,
    AssetReference,
    ChangeBatch,
    ConnectionData,
    ConnectionPointData,
    DirectoryNotFoundError,
    EmptyLoadPathError,
    NodeData,
    NodeError,
)
from assetgraph.graph.streams import AssetReferenceStreamManager

__all__ = [
    "DEFAULT_GROUP_KEY",
    "AssetClassification",
    "AssetGroups",
    "AssetReference",
    "AssetReferenceStreamManager",
    "ChangeBatch",
    "ConnectionData",
    "ConnectionPointData",
    "DirectoryNotFoundError",
    "EmptyLoadPathError",
    "NodeData",
    "NodeError",
]
