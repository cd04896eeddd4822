"""Per-connection-point record of the asset groups each node last produced."""

from __future__ import annotations

from typing import Any

from assetgraph.graph.models import (
    AssetGroups,
    ConnectionPointData,
    dump_groups,
    load_groups,
)


class AssetReferenceStreamManager:
    """Keeps the most recent output of every node, keyed by output point id.

    Assigning a point replaces its groups wholesale; nothing is merged.
    """

    def __init__(self) -> None:
        self._groups: dict[str, AssetGroups] = {}

    def find_asset_group(self, point: ConnectionPointData) -> AssetGroups | None:
        """Return the recorded groups for *point*, or None if it never produced output."""
        return self._groups.get(point.id)

    def assign(self, point: ConnectionPointData, groups: AssetGroups) -> None:
        self._groups[point.id] = {key: list(refs) for key, refs in groups.items()}

    def clear(self, point: ConnectionPointData) -> None:
        self._groups.pop(point.id, None)

    def to_dict(self) -> dict[str, Any]:
        return {point_id: dump_groups(groups) for point_id, groups in self._groups.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssetReferenceStreamManager:
        manager = cls()
        for point_id, groups in data.items():
            manager._groups[point_id] = load_groups(groups)
        return manager
