import os
from dataclasses import dataclass


@dataclass(frozen=True)
class LocalEntry:
    path: str
    size: int
    exists: bool


def local_entry(path: str) -> LocalEntry:
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return LocalEntry(path=path, size=0, exists=False)
    # A directory in the file's place never matches; the transfer will report it
    size = st.st_size if os.path.isfile(path) else -1
    return LocalEntry(path=path, size=size, exists=True)


def needs_download(local_path: str, remote_size: int) -> bool:
    """Size-only comparison: missing or different size means download.

    Content changes that keep the size identical are not detected.
    """
    entry = local_entry(local_path)
    if not entry.exists:
        return True
    return entry.size != remote_size
