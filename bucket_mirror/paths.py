import os

from .errors import DirectoryError, RootError, UnsafeKeyError


def is_pseudo_directory(key: str) -> bool:
    # Folder placeholders ("photos/") carry no content
    return key == "" or key.endswith("/")


def map_path(local_root: str, key: str) -> str:
    """Local path of *key*: every "/" segment becomes a directory level."""
    return os.path.join(local_root, *key.split("/"))


def is_within_root(local_root: str, path: str) -> bool:
    root = os.path.abspath(local_root)
    target = os.path.abspath(path)
    return os.path.commonpath([root, target]) == root and target != root


def safe_path(local_root: str, key: str) -> str:
    path = map_path(local_root, key)
    if not is_within_root(local_root, path):
        raise UnsafeKeyError(key)
    return path


def ensure_root(local_root: str) -> None:
    try:
        os.makedirs(local_root, exist_ok=True)
    except (OSError, ValueError) as e:
        raise RootError(local_root, e) from e


def ensure_parent_dir(path: str) -> str:
    parent = os.path.dirname(path)
    try:
        os.makedirs(parent, exist_ok=True)
    except (OSError, ValueError) as e:
        raise DirectoryError(parent, e) from e
    return parent
