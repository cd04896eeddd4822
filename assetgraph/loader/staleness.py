"""Revisit decision for a directory loader given a batch of file changes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict

from assetgraph.graph.models import DEFAULT_GROUP_KEY, AssetGroups, ChangeBatch
from assetgraph.loader.paths import ASSETS_DIR, get_load_path

logger = logging.getLogger(__name__)


class RevisitDecision(BaseModel):
    """Whether a node's previous output must be recomputed, and why."""

    model_config = ConfigDict(frozen=True)

    revisit: bool
    reason: str = ""
    path: str | None = None

    def __bool__(self) -> bool:
        return self.revisit


_REUSE = RevisitDecision(revisit=False, reason="no relevant changes")


def _first_under(paths: Iterable[str], import_root: str) -> str | None:
    # Literal prefix test: "Assets/Foo" also contains "Assets/FooBar/x".
    for path in sorted(paths):
        if path.startswith(import_root):
            return path
    return None


def decide_revisit(
    changes: ChangeBatch,
    previous: AssetGroups | None,
    load_path: str,
    *,
    is_config_artifact: Callable[[str], bool],
    assets_dir: str = ASSETS_DIR,
    node_name: str = "Loader",
) -> RevisitDecision:
    """Decide whether a loader bound to *load_path* must run again.

    *previous* is the group the node emitted last time, or None when it has
    never produced output. *load_path* must already be reconciled. Checks run
    in order and the first hit wins:

    1. no previous output
    2. empty load path and a created path that is not a configuration artifact
    3. a created path under the load root, other than a configuration
       artifact, that the previous output did not load from (a reimport of
       an already-loaded asset is not a change)
    4. a deleted, moved-to or moved-from path under the load root
    """
    decision = _decide(changes, previous, load_path, is_config_artifact, assets_dir)
    if decision.revisit:
        logger.info("%s is marked to revisit (%s: %s)", node_name, decision.reason, decision.path)
    return decision


def _decide(
    changes: ChangeBatch,
    previous: AssetGroups | None,
    load_path: str,
    is_config_artifact: Callable[[str], bool],
    assets_dir: str,
) -> RevisitDecision:
    if previous is None:
        return RevisitDecision(revisit=True, reason="no previous output")

    # An unscoped loader reacts to any addition that isn't its own config.
    if not load_path:
        for path in sorted(changes.created):
            if not is_config_artifact(path):
                return RevisitDecision(revisit=True, reason="created", path=path)

    import_root = get_load_path(load_path, assets_dir)
    loaded_from = {ref.import_from for ref in previous.get(DEFAULT_GROUP_KEY, [])}

    # Runs for every recorded snapshot, empty or not.
    for path in sorted(changes.created):
        if not path.startswith(import_root) or path in loaded_from:
            continue
        if is_config_artifact(path):
            continue
        return RevisitDecision(revisit=True, reason="created", path=path)

    checks = (
        ("deleted", changes.deleted),
        ("moved_to", changes.moved_to),
        ("moved_from", changes.moved_from),
    )
    for reason, paths in checks:
        hit = _first_under(paths, import_root)
        if hit is not None:
            return RevisitDecision(revisit=True, reason=reason, path=hit)

    return _REUSE
