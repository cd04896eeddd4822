"""Data models shared between graph nodes and the content index."""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_OUTPUT_LABEL = "-"
DEFAULT_GROUP_KEY = "0"


class NodeError(Exception):
    """Raised when a node cannot complete an evaluation."""

    def __init__(self, message: str, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(message)


class EmptyLoadPathError(NodeError):
    """The configured load path is empty and the policy forbids it."""

    def __init__(self, node_name: str, node_id: str) -> None:
        self.node_name = node_name
        super().__init__(f"{node_name}: Load Path is empty.", node_id)


class DirectoryNotFoundError(NodeError):
    """The resolved load directory does not exist."""

    def __init__(self, node_name: str, node_id: str, path: str) -> None:
        self.node_name = node_name
        self.path = path
        super().__init__(f"{node_name}: Directory not found: {path}", node_id)


class AssetClassification(BaseModel):
    """What the content index knows about a path."""

    model_config = ConfigDict(frozen=True)

    is_config_artifact: bool = False
    is_folder: bool = False
    is_loadable: bool = True


class AssetReference(BaseModel):
    """Identity and classification of a single asset.

    Two references are equal when their guids match, regardless of the path
    they were loaded from.
    """

    model_config = ConfigDict(frozen=True)

    guid: str
    import_from: str
    asset_type: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssetReference):
            return NotImplemented
        return self.guid == other.guid

    def __hash__(self) -> int:
        return hash(self.guid)


class ChangeBatch(BaseModel):
    """Filesystem mutations observed since the last successful evaluation."""

    model_config = ConfigDict(frozen=True)

    created: frozenset[str] = frozenset()
    deleted: frozenset[str] = frozenset()
    moved_to: frozenset[str] = frozenset()
    moved_from: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not (self.created or self.deleted or self.moved_to or self.moved_from)

    def merge(self, other: ChangeBatch) -> ChangeBatch:
        return ChangeBatch(
            created=self.created | other.created,
            deleted=self.deleted | other.deleted,
            moved_to=self.moved_to | other.moved_to,
            moved_from=self.moved_from | other.moved_from,
        )


class ConnectionPointData(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    label: str = DEFAULT_OUTPUT_LABEL


class ConnectionData(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    label: str = DEFAULT_OUTPUT_LABEL
    from_node_id: str
    from_point_id: str
    to_node_id: str
    to_point_id: str


class NodeData(BaseModel):
    """Graph-side record of a node: identity, name and connection points."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = "Loader"
    output_points: list[ConnectionPointData] = Field(default_factory=list)

    def add_default_output_point(self) -> ConnectionPointData:
        """Add the single default output point unless one already exists."""
        if not self.output_points:
            self.output_points.append(ConnectionPointData())
        return self.output_points[0]


# Output slot name -> references, as emitted by a node for one connection.
AssetGroups = dict[str, list[AssetReference]]


def dump_groups(groups: AssetGroups) -> dict[str, list[dict[str, Any]]]:
    return {key: [ref.model_dump() for ref in refs] for key, refs in groups.items()}


def load_groups(data: dict[str, list[dict[str, Any]]]) -> AssetGroups:
    return {key: [AssetReference(**item) for item in items] for key, items in data.items()}
