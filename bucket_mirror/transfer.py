import logging
import os
from contextlib import closing

from .config import DEFAULT_CHUNK_BYTES
from .errors import TransferError
from .store import ObjectStore

logger = logging.getLogger(__name__)


class SizeMismatchError(IOError):
    def __init__(self, expected: int, received: int):
        super().__init__(f"expected {expected} bytes, received {received}")
        self.expected = expected
        self.received = received


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except (OSError, ValueError) as e:
        logger.warning(f"Could not remove partial file {path}: {e}")


def transfer(
    store: ObjectStore,
    key: str,
    dest_path: str,
    expected_size: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_BYTES,
) -> int:
    """Stream *key* into *dest_path* and return the number of bytes written.

    The destination is created or truncated. On any failure, including a byte
    count that differs from *expected_size*, the partial file is removed before
    TransferError is raised, so the next cycle sees the file as absent.
    """
    written = 0
    try:
        with open(dest_path, "wb") as f, closing(
            store.iter_object(key, chunk_size)
        ) as chunks:
            for chunk in chunks:
                f.write(chunk)
                written += len(chunk)
        if expected_size is not None and written != expected_size:
            raise SizeMismatchError(expected_size, written)
    except Exception as e:
        _discard(dest_path)
        raise TransferError(key, e) from e
    return written
