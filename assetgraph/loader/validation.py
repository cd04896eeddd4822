"""Guard run before scanning a load directory."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path


def validate_load_path(
    current_load_path: str,
    combined_path: str | Path,
    on_empty: Callable[[], None],
    on_missing: Callable[[], None],
) -> None:
    """Invoke *on_empty* for an empty load path and *on_missing* for a missing directory.

    Both checks always run; the handlers decide whether to raise.
    """
    if not current_load_path:
        on_empty()
    if not Path(combined_path).is_dir():
        on_missing()
