"""Load From Directory: the graph node that feeds assets into a build graph."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from assetgraph.config.models import AssetGraphConfig, LoaderConfig
from assetgraph.graph.models import (
    DEFAULT_GROUP_KEY,
    AssetGroups,
    ChangeBatch,
    ConnectionData,
    DirectoryNotFoundError,
    EmptyLoadPathError,
    NodeData,
)
from assetgraph.graph.streams import AssetReferenceStreamManager
from assetgraph.interfaces.index import ContentIndex
from assetgraph.loader.paths import (
    ASSETS_DIR,
    get_full_load_path,
    get_load_path,
    normalize_load_path,
)
from assetgraph.loader.reconcile import reconcile_identity
from assetgraph.loader.scanner import scan_directory
from assetgraph.loader.staleness import decide_revisit
from assetgraph.loader.targets import DEFAULT_TARGET, MultiTargetString
from assetgraph.loader.validation import validate_load_path

logger = logging.getLogger(__name__)

OutputCallback = Callable[[ConnectionData | None, AssetGroups], None]


class LoaderState(BaseModel):
    """Persisted configuration of a loader: the folder by path and by GUID."""

    load_path: MultiTargetString = Field(default_factory=MultiTargetString)
    load_path_guid: MultiTargetString = Field(default_factory=MultiTargetString)


class LoaderNode:
    """Loads every asset under a configured directory.

    The directory is tracked both by path and by GUID so that it survives
    renames, and may be overridden per build target.
    """

    menu_name = "Load Assets/Load From Directory"
    category = "Load"

    def __init__(
        self,
        index: ContentIndex,
        data_path: str | Path,
        *,
        assets_dir: str = ASSETS_DIR,
        config: LoaderConfig | None = None,
        state: LoaderState | None = None,
    ) -> None:
        self.index = index
        self.data_path = Path(data_path)
        self.assets_dir = assets_dir
        self.config = config or LoaderConfig()
        self.state = state or LoaderState()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_path(
        cls,
        path: str,
        index: ContentIndex,
        data_path: str | Path,
        **kwargs: Any,
    ) -> LoaderNode:
        """Create a loader bound to *path* (absolute, asset-rooted or relative)."""
        node = cls(index, data_path, **kwargs)
        node.import_legacy(path)
        return node

    @classmethod
    def from_config(cls, cfg: AssetGraphConfig, index: ContentIndex) -> LoaderNode:
        data_path = Path(cfg.project.root).resolve() / cfg.project.assets_dir
        node = cls(index, data_path, assets_dir=cfg.project.assets_dir, config=cfg.loader)
        node.import_legacy({DEFAULT_TARGET: cfg.loader.load_path, **cfg.loader.targets})
        return node

    def import_legacy(self, legacy_path: str | Mapping[str, str]) -> None:
        """Replace both stores from a legacy path setting.

        Accepts a single path or a target -> path mapping; GUIDs are resolved
        through the content index.
        """
        if isinstance(legacy_path, str):
            legacy_path = {DEFAULT_TARGET: legacy_path}

        paths = MultiTargetString()
        for target, value in legacy_path.items():
            paths[target] = self._normalize(value)

        guids = MultiTargetString()
        for target, value in paths.values():
            guids[target] = self.index.path_to_guid(get_load_path(value, self.assets_dir))

        self.state = LoaderState(load_path=paths, load_path_guid=guids)

    def initialize(self, node_data: NodeData) -> None:
        node_data.add_default_output_point()

    def clone(self, new_data: NodeData) -> LoaderNode:
        node = LoaderNode(
            self.index,
            self.data_path,
            assets_dir=self.assets_dir,
            config=self.config.model_copy(),
            state=LoaderState(
                load_path=self.state.load_path.copy(),
                load_path_guid=self.state.load_path_guid.copy(),
            ),
        )
        new_data.add_default_output_point()
        return node

    # ------------------------------------------------------------------
    # Configuration edits
    # ------------------------------------------------------------------

    def _normalize(self, path: str) -> str:
        return normalize_load_path(path, self.data_path, self.assets_dir)

    def set_load_path(self, target: str, path: str) -> None:
        """Point *target* at a new folder, updating path and GUID together."""
        normalized = self._normalize(path)
        self.state.load_path[target] = normalized
        self.state.load_path_guid[target] = self.index.path_to_guid(
            get_load_path(normalized, self.assets_dir)
        )

    def enable_override(self, target: str) -> None:
        self.state.load_path[target] = self.state.load_path.default
        self.state.load_path_guid[target] = self.state.load_path_guid.default

    def remove_override(self, target: str) -> None:
        self.state.load_path.remove(target)
        self.state.load_path_guid.remove(target)

    def get_load_path(self, target: str) -> str:
        return get_load_path(self.state.load_path[target], self.assets_dir)

    def get_full_load_path(self, target: str) -> Path:
        return get_full_load_path(self.state.load_path[target], self.data_path)

    def reconcile(self, target: str) -> None:
        """Repair whichever of path or GUID has drifted for *target*."""
        self.state.load_path, self.state.load_path_guid = reconcile_identity(
            self.state.load_path,
            self.state.load_path_guid,
            target,
            self.index,
            self.data_path,
            self.assets_dir,
        )

    # ------------------------------------------------------------------
    # Graph engine contract
    # ------------------------------------------------------------------

    def should_revisit(
        self,
        node_data: NodeData,
        stream_manager: AssetReferenceStreamManager | None,
        target: str,
        changes: ChangeBatch,
    ) -> bool:
        """Return True when the previous output for *target* is stale."""
        if stream_manager is None:
            logger.info("%s is marked to revisit (no stream manager)", node_data.name)
            return True

        self.reconcile(target)

        previous = None
        if node_data.output_points:
            previous = stream_manager.find_asset_group(node_data.output_points[0])

        decision = decide_revisit(
            changes,
            previous,
            self.state.load_path[target],
            is_config_artifact=self.index.is_config_artifact,
            assets_dir=self.assets_dir,
            node_name=node_data.name,
        )
        return decision.revisit

    def prepare(
        self,
        target: str,
        node_data: NodeData,
        incoming: Iterable[AssetGroups] | None,
        connections_to_output: Iterable[ConnectionData] | None,
        output: OutputCallback | None,
    ) -> None:
        """Validate the load directory and emit its assets on output slot "0".

        Raises DirectoryNotFoundError when the directory is gone, and
        EmptyLoadPathError for an empty path under the ``error`` policy.
        """
        self.reconcile(target)
        full_path = self.get_full_load_path(target)

        def on_empty() -> None:
            if self.config.empty_path_policy == "error":
                raise EmptyLoadPathError(node_data.name, node_data.id)

        def on_missing() -> None:
            raise DirectoryNotFoundError(node_data.name, node_data.id, str(full_path))

        validate_load_path(self.state.load_path[target], full_path, on_empty, on_missing)

        if connections_to_output is None or output is None:
            return

        refs = scan_directory(self.index, self.state.load_path[target], self.assets_dir)
        connections = list(connections_to_output)
        destination = connections[0] if connections else None
        output(destination, {DEFAULT_GROUP_KEY: refs})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return self.state.model_dump()

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        index: ContentIndex,
        data_path: str | Path,
        **kwargs: Any,
    ) -> LoaderNode:
        return cls(index, data_path, state=LoaderState(**data), **kwargs)
