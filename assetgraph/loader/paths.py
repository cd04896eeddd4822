"""Load-path normalization and resolution.

Load paths are stored relative to the asset root (``Textures/UI``). The
content index addresses assets by project-relative paths that start with the
asset directory name (``Assets/Textures/UI``), and the filesystem needs the
absolute form (``/project/Assets/Textures/UI``).
"""

from __future__ import annotations

from pathlib import Path

ASSETS_DIR = "Assets"


def path_combine(*parts: str) -> str:
    """Join path fragments with single forward slashes, skipping empties."""
    cleaned = [p.replace("\\", "/") for p in parts if p]
    if not cleaned:
        return ""
    result = cleaned[0].rstrip("/")
    for part in cleaned[1:]:
        part = part.strip("/")
        if part:
            result = f"{result}/{part}" if result else part
    return result


def normalize_load_path(path: str, data_path: str | Path, assets_dir: str = ASSETS_DIR) -> str:
    """Convert *path* to a load path relative to the asset root.

    The absolute asset root maps to ``""``. A path containing the absolute
    asset root, or starting with the *assets_dir* component, loses that prefix
    and a single leading separator. Anything else is returned unchanged.
    """
    if not path:
        return path
    path = path.replace("\\", "/")
    data_path = Path(data_path).as_posix()
    if path == data_path:
        return ""
    index = path.find(data_path + "/")
    if index >= 0:
        path = path[index + len(data_path):]
    elif path == assets_dir or path.startswith(assets_dir + "/"):
        path = path[len(assets_dir):]
    else:
        return path
    if path.startswith("/"):
        path = path[1:]
    return path


def get_load_path(load_path: str, assets_dir: str = ASSETS_DIR) -> str:
    """Asset-rooted form of a load path; empty means the asset root itself."""
    if not load_path:
        return assets_dir
    return path_combine(assets_dir, load_path)


def get_full_load_path(load_path: str, data_path: str | Path) -> Path:
    """Absolute filesystem path of a load path."""
    data_path = Path(data_path)
    if not load_path:
        return data_path
    return data_path / load_path
