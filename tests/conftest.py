"""Shared test fixtures for assetgraph."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetgraph.config.models import AssetGraphConfig, IndexConfig
from assetgraph.graph.models import AssetClassification, AssetReference
from assetgraph.index import AssetDatabase
from assetgraph.index.classify import is_config_artifact, is_loadable


class FakeIndex:
    """In-memory ContentIndex: a path -> guid map plus a set of folders."""

    def __init__(
        self,
        guids: dict[str, str] | None = None,
        folders: set[str] | None = None,
        references: dict[str, AssetReference] | None = None,
    ) -> None:
        self.guids = dict(guids or {})
        self.folders = set(folders or ())
        self.references = dict(references or {})
        self.config = IndexConfig()

    def path_to_guid(self, path: str) -> str:
        return self.guids.get(path, "")

    def guid_to_path(self, guid: str) -> str:
        if not guid:
            return ""
        return next((p for p, g in self.guids.items() if g == guid), "")

    def is_valid_folder(self, path: str) -> bool:
        return path in self.folders and path in self.guids

    def enumerate_under(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return [p for p in self.guids if p.startswith(prefix)]

    def classify(self, path: str) -> AssetClassification | None:
        if path not in self.guids:
            return None
        folder = path in self.folders
        return AssetClassification(
            is_config_artifact=self.is_config_artifact(path),
            is_folder=folder,
            is_loadable=not folder and is_loadable(path, self.config),
        )

    def get_reference(self, path: str) -> AssetReference | None:
        if path in self.references:
            return self.references[path]
        guid = self.guids.get(path)
        if guid is None:
            return None
        return AssetReference(guid=guid, import_from=path, asset_type="asset")

    def is_config_artifact(self, path: str) -> bool:
        return is_config_artifact(path, self.config)

    def rename(self, old: str, new: str) -> None:
        """Move an entry and its children, keeping guids."""
        for path in list(self.guids):
            if path == old or path.startswith(old + "/"):
                moved = new + path[len(old):]
                self.guids[moved] = self.guids.pop(path)
                if path in self.folders:
                    self.folders.discard(path)
                    self.folders.add(moved)


@pytest.fixture
def fake_index():
    return FakeIndex(
        guids={
            "Assets": "g-root",
            "Assets/Scene": "g-scene",
            "Assets/Scene/a.asset": "g-a",
            "Assets/Scene/sub": "g-sub",
            "Assets/Scene/a.asset.meta": "g-a-meta",
            "Assets/Textures": "g-tex",
            "Assets/Textures/t.png": "g-t",
        },
        folders={"Assets", "Assets/Scene", "Assets/Scene/sub", "Assets/Textures"},
    )


def _make_assets(root: Path) -> Path:
    """Create a small asset tree under root/Assets."""
    assets = root / "Assets"
    (assets / "Scene" / "sub").mkdir(parents=True)
    (assets / "Scene" / "a.asset").write_text("scene a")
    (assets / "Scene" / "a.asset.meta").write_text("guid: a")
    (assets / "Scene" / "sub" / "b.asset").write_text("scene b")
    (assets / "Textures").mkdir()
    (assets / "Textures" / "t.png").write_bytes(b"\x89PNG")
    (assets / "Scripts").mkdir()
    (assets / "Scripts" / "Player.cs").write_text("class Player {}")
    return root


@pytest.fixture
def project(tmp_path):
    """A project root containing an Assets/ tree."""
    return _make_assets(tmp_path)


@pytest.fixture
def db(project):
    database = AssetDatabase(project)
    database.refresh()
    return database


@pytest.fixture
def sample_config():
    return AssetGraphConfig()
