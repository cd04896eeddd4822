"""Change tracking — turns filesystem events into change batches."""

from assetgraph.freshness.watcher import ChangeWatcher

__all__ = ["ChangeWatcher"]
