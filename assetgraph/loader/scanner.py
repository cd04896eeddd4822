"""Enumerates a load directory into a duplicate-free list of asset references."""

from __future__ import annotations

import logging

from assetgraph.graph.models import AssetReference
from assetgraph.interfaces.index import ContentIndex
from assetgraph.loader.paths import ASSETS_DIR, get_load_path

logger = logging.getLogger(__name__)


def scan_directory(
    index: ContentIndex,
    load_path: str,
    assets_dir: str = ASSETS_DIR,
) -> list[AssetReference]:
    """Collect every loadable asset under *load_path*, recursively.

    Configuration artifacts, folders, paths the index can no longer resolve,
    and non-loadable assets are skipped. References are deduplicated by
    identity and returned in enumeration order.
    """
    directory = get_load_path(load_path, assets_dir)
    found: list[AssetReference] = []
    seen: set[str] = set()

    for path in index.enumerate_under(directory):
        if index.is_config_artifact(path):
            continue

        classification = index.classify(path)
        if classification is None:
            logger.info("Skipping %s: no longer in the content index", path)
            continue
        if classification.is_folder:
            continue

        ref = index.get_reference(path)
        if ref is None:
            logger.info("Skipping %s: no asset reference", path)
            continue
        if not classification.is_loadable:
            continue
        if ref.guid in seen:
            continue

        seen.add(ref.guid)
        found.append(ref)

    logger.debug("Scanned %s: %d assets", directory, len(found))
    return found
