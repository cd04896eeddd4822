"""Interfaces for collaborators the graph nodes depend on."""

from assetgraph.interfaces.index import ContentIndex

__all__ = ["ContentIndex"]
