"""Filesystem-backed content index with persistent GUIDs."""

from __future__ import annotations

import json
import logging
import shutil
import uuid
from pathlib import Path, PurePosixPath

from assetgraph.config.models import AssetGraphConfig, IndexConfig
from assetgraph.graph.models import AssetClassification, AssetReference, ChangeBatch
from assetgraph.index.classify import (
    _matches_any,
    asset_type_for,
    is_config_artifact,
    is_loadable,
)

logger = logging.getLogger(__name__)

GUID_FILE = "guids.json"


class AssetDatabase:
    """Indexes every file and folder under the asset root.

    Each indexed path gets a GUID that survives moves made through
    :meth:`move_asset`. The path -> GUID map is persisted as JSON under the
    project's state directory so identities survive across runs.
    """

    def __init__(
        self,
        project_root: Path,
        config: IndexConfig | None = None,
        assets_dir: str = "Assets",
        state_dir: str = ".assetgraph",
    ) -> None:
        self.project_root = Path(project_root).resolve()
        self.assets_dir = assets_dir
        self.data_path = self.project_root / assets_dir
        self.config = config or IndexConfig()
        self.index_file = self.project_root / state_dir / GUID_FILE
        self._guids: dict[str, str] = {}
        self._mtimes: dict[str, float] = {}
        self._pending_moves: list[tuple[str, str]] = []
        self._references: dict[str, AssetReference] = {}
        self._load()

    @classmethod
    def from_config(cls, cfg: AssetGraphConfig) -> AssetDatabase:
        return cls(
            Path(cfg.project.root),
            config=cfg.index,
            assets_dir=cfg.project.assets_dir,
            state_dir=cfg.project.state_dir,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if not self.index_file.is_file():
            return
        try:
            data = json.loads(self.index_file.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(
                "Failed to read asset index %s: %s — starting empty",
                self.index_file,
                e,
            )
            return
        self._guids = dict(data.get("guids", {}))
        self._mtimes = dict(data.get("mtimes", {}))
        self._pending_moves = [tuple(m) for m in data.get("moves", [])]

    def save(self) -> None:
        self.index_file.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "guids": self._guids,
            "mtimes": self._mtimes,
            "moves": self._pending_moves,
        }
        self.index_file.write_text(json.dumps(data, indent=2))

    # ------------------------------------------------------------------
    # Import cycle
    # ------------------------------------------------------------------

    def _asset_path(self, p: Path) -> str:
        return p.relative_to(self.project_root).as_posix()

    def _walk(self) -> dict[str, float]:
        """Asset path -> mtime for everything on disk (folders report 0.0)."""
        if not self.data_path.is_dir():
            return {}
        ignore = set(self.config.ignore_patterns)
        found: dict[str, float] = {self.assets_dir: 0.0}
        for p in sorted(self.data_path.rglob("*")):
            rel = p.relative_to(self.project_root)
            if _matches_any(PurePosixPath(rel.as_posix()), ignore):
                continue
            found[rel.as_posix()] = 0.0 if p.is_dir() else p.stat().st_mtime
        return found

    def refresh(self) -> ChangeBatch:
        """Sync the index with the disk and report what changed since last time.

        New paths and files whose mtime changed are reported as created
        (imported), vanished paths as deleted, and moves made through
        :meth:`move_asset` as moved_to / moved_from.
        """
        on_disk = self._walk()
        moved_to = {new for _, new in self._pending_moves if new in on_disk}
        moved_from = {old for old, new in self._pending_moves if new in on_disk}

        created: set[str] = set()
        for path, mtime in on_disk.items():
            if path not in self._guids:
                self._guids[path] = uuid.uuid4().hex
                created.add(path)
            elif path not in moved_to and self._mtimes.get(path, mtime) != mtime:
                created.add(path)

        deleted = {p for p in self._guids if p not in on_disk}
        for path in deleted:
            guid = self._guids.pop(path)
            self._references.pop(guid, None)

        self._mtimes = on_disk
        self._pending_moves.clear()
        self.save()

        batch = ChangeBatch(
            created=created,
            deleted=deleted,
            moved_to=moved_to,
            moved_from=moved_from,
        )
        logger.debug(
            "Refreshed %s: %d created, %d deleted, %d moved",
            self.data_path,
            len(created),
            len(deleted),
            len(moved_to),
        )
        return batch

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def move_asset(self, old_path: str, new_path: str) -> None:
        """Rename an asset (or folder) on disk, keeping its GUID and its children's."""
        if old_path not in self._guids:
            raise KeyError(f"Asset not indexed: {old_path}")
        src = self.project_root / old_path
        dst = self.project_root / new_path
        if dst.exists():
            raise FileExistsError(f"Destination already exists: {new_path}")
        dst.parent.mkdir(parents=True, exist_ok=True)
        src.rename(dst)

        prefix = old_path + "/"
        for path in list(self._guids):
            if path != old_path and not path.startswith(prefix):
                continue
            moved = new_path + path[len(old_path):]
            guid = self._guids.pop(path)
            self._guids[moved] = guid
            if path in self._mtimes:
                self._mtimes[moved] = self._mtimes.pop(path)
            self._references.pop(guid, None)
            self._pending_moves.append((path, moved))
        self.save()
        logger.info("Moved %s -> %s", old_path, new_path)

    def delete_asset(self, path: str) -> None:
        """Remove an asset from disk; the next refresh reports it as deleted."""
        target = self.project_root / path
        if target.is_dir():
            shutil.rmtree(target)
        elif target.exists():
            target.unlink()

    # ------------------------------------------------------------------
    # ContentIndex
    # ------------------------------------------------------------------

    def path_to_guid(self, path: str) -> str:
        return self._guids.get(path, "")

    def guid_to_path(self, guid: str) -> str:
        if not guid:
            return ""
        for path, g in self._guids.items():
            if g == guid:
                return path
        return ""

    def is_valid_folder(self, path: str) -> bool:
        return path in self._guids and (self.project_root / path).is_dir()

    def enumerate_under(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return [p for p in self._guids if p.startswith(prefix)]

    def classify(self, path: str) -> AssetClassification | None:
        if path not in self._guids:
            return None
        is_folder = (self.project_root / path).is_dir()
        return AssetClassification(
            is_config_artifact=self.is_config_artifact(path),
            is_folder=is_folder,
            is_loadable=not is_folder and is_loadable(path, self.config),
        )

    def get_reference(self, path: str) -> AssetReference | None:
        guid = self._guids.get(path)
        if guid is None or not (self.project_root / path).exists():
            return None
        ref = self._references.get(guid)
        if ref is None or ref.import_from != path:
            is_folder = (self.project_root / path).is_dir()
            ref = AssetReference(
                guid=guid,
                import_from=path,
                asset_type=asset_type_for(path, is_folder),
            )
            self._references[guid] = ref
        return ref

    def is_config_artifact(self, path: str) -> bool:
        return is_config_artifact(path, self.config)
