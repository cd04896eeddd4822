"""Content index interface consulted by graph nodes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from assetgraph.graph.models import AssetClassification, AssetReference


@runtime_checkable
class ContentIndex(Protocol):
    """Maps asset paths to stable identities, classifications and references.

    Paths are project-relative and rooted at the asset directory
    (``Assets/Textures/a.png``). Lookups that miss return an empty string or
    None rather than raising.
    """

    def path_to_guid(self, path: str) -> str: ...

    def guid_to_path(self, guid: str) -> str: ...

    def is_valid_folder(self, path: str) -> bool: ...

    def enumerate_under(self, path: str) -> list[str]: ...

    def classify(self, path: str) -> AssetClassification | None: ...

    def get_reference(self, path: str) -> AssetReference | None: ...

    def is_config_artifact(self, path: str) -> bool: ...
