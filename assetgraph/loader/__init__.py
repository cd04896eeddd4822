"""Load From Directory node: path/GUID tracking, revisit decisions and scanning."""

from assetgraph.loader.node import LoaderNode, LoaderState
from assetgraph.loader.paths import (
    get_full_load_path,
    get_load_path,
    normalize_load_path,
    path_combine,
)
from assetgraph.loader.reconcile import reconcile_identity
from assetgraph.loader.scanner import scan_directory
from assetgraph.loader.staleness import RevisitDecision, decide_revisit
from assetgraph.loader.targets import DEFAULT_TARGET, MultiTargetString
from assetgraph.loader.validation import validate_load_path

__all__ = [
    "DEFAULT_TARGET",
    "LoaderNode",
    "LoaderState",
    "MultiTargetString",
    "RevisitDecision",
    "decide_revisit",
    "get_full_load_path",
    "get_load_path",
    "normalize_load_path",
    "path_combine",
    "reconcile_identity",
    "scan_directory",
    "validate_load_path",
]
