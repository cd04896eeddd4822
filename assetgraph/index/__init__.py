"""Reference content index backed by the local filesystem."""

from assetgraph.index.classify import asset_type_for, is_config_artifact, is_loadable
from assetgraph.index.database import AssetDatabase

__all__ = [
    "AssetDatabase",
    "asset_type_for",
    "is_config_artifact",
    "is_loadable",
]
