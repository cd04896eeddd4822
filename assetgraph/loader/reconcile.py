"""Keeps a loader's configured path and its stable identifier in agreement."""

from __future__ import annotations

import logging
from pathlib import Path

from assetgraph.interfaces.index import ContentIndex
from assetgraph.loader.paths import ASSETS_DIR, get_load_path, normalize_load_path
from assetgraph.loader.targets import MultiTargetString

logger = logging.getLogger(__name__)


def reconcile_identity(
    load_path: MultiTargetString,
    load_path_guid: MultiTargetString,
    target: str,
    index: ContentIndex,
    data_path: str | Path,
    assets_dir: str = ASSETS_DIR,
) -> tuple[MultiTargetString, MultiTargetString]:
    """Return corrected copies of (load_path, load_path_guid) for *target*.

    When the configured folder no longer exists but its GUID still resolves,
    the folder was renamed or moved: the path follows the GUID. When the
    folder exists but the GUID resolves to nothing, the GUID is recomputed
    from the path. The repair lands in the target's override slot if it has
    one, otherwise in the default. If both sides are broken nothing changes;
    validation reports it later.
    """
    paths = load_path.copy()
    guids = load_path_guid.copy()

    resolved = get_load_path(paths[target], assets_dir)
    path_from_guid = index.guid_to_path(guids[target])

    if not index.is_valid_folder(resolved):
        if path_from_guid:
            fixed = normalize_load_path(path_from_guid, data_path, assets_dir)
            slot = target if paths.has_override(target) else None
            _store(paths, slot, fixed)
            logger.info("Load path for %s followed rename: %s -> %s", target, resolved, path_from_guid)
    elif not path_from_guid:
        guid = index.path_to_guid(resolved)
        slot = target if paths.has_override(target) else None
        _store(guids, slot, guid)
        logger.info("Recomputed identifier for %s from %s", target, resolved)

    return paths, guids


def _store(values: MultiTargetString, target: str | None, value: str) -> None:
    if target is None:
        values.default = value
    else:
        values[target] = value
